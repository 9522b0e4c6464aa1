"""
Configuration file support for pcba-export.

Provides hierarchical configuration loading from:
1. Project config: .pcba-export.toml or pcba-export.toml in the project directory
2. User config: ~/.config/pcba-export/config.toml

CLI arguments override config file values, and project config overrides user config.
"""

import sys
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .exceptions import ConfigError
from .export.filtering import FilterConfig

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]

# Config file names to search for in project directories
CONFIG_FILENAMES = [".pcba-export.toml", "pcba-export.toml"]

# User-level config path
USER_CONFIG_PATH = Path.home() / ".config" / "pcba-export" / "config.toml"

# All known config keys for validation
KNOWN_KEYS = {
    "defaults": {"manufacturer", "prefixes", "verbose", "quiet"},
    "export": {"output_dir", "assume_yes"},
}


@dataclass
class DefaultsConfig:
    """Default options for the CLI."""

    manufacturer: str = "jlcpcb"
    prefixes: list[str] = field(default_factory=list)
    verbose: bool = False
    quiet: bool = False


@dataclass
class ExportConfig:
    """Export-specific configuration."""

    output_dir: str | None = None  # None: <working dir>/<manufacturer>
    assume_yes: bool = False


@dataclass
class Config:
    """Merged configuration from all sources."""

    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    export: ExportConfig = field(default_factory=ExportConfig)

    # Track which file each setting came from
    _sources: dict = field(default_factory=dict, repr=False)

    @classmethod
    def load(cls, start_dir: Path | None = None) -> "Config":
        """
        Load configuration with precedence: project > user > defaults.

        Args:
            start_dir: Directory to start searching from (default: current directory)

        Returns:
            Merged configuration object
        """
        if start_dir is None:
            start_dir = Path.cwd()

        config = cls()
        sources: dict[str, str] = {}

        # Load user config first (lower precedence)
        if USER_CONFIG_PATH.exists():
            user_data = _load_toml_file(USER_CONFIG_PATH)
            if user_data:
                _merge_config(config, user_data, str(USER_CONFIG_PATH), sources)

        # Load project config (higher precedence)
        project_config = _find_project_config(start_dir)
        if project_config:
            project_data = _load_toml_file(project_config)
            if project_data:
                _merge_config(config, project_data, str(project_config), sources)

        config._sources = sources
        return config

    def get_source(self, key: str) -> str:
        """Get the source file for a config key."""
        return self._sources.get(key, "default")

    def filter_config(self) -> FilterConfig:
        """Build the pipeline filter configuration."""
        return FilterConfig.from_prefixes(
            self.defaults.prefixes, manufacturer=self.defaults.manufacturer
        )


def _find_project_config(start_dir: Path) -> Path | None:
    """
    Find project config by walking up the directory tree.

    Stops at .git directory or filesystem root.
    """
    current = start_dir.resolve()

    while True:
        for filename in CONFIG_FILENAMES:
            config_path = current / filename
            if config_path.is_file():
                return config_path

        # Stop at .git directory (project root)
        if (current / ".git").exists():
            break

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def _load_toml_file(path: Path) -> dict[str, Any] | None:
    """
    Load a TOML file safely.

    Returns:
        Parsed TOML data or None if TOML support is unavailable

    Raises:
        ConfigError: If TOML is invalid or the file cannot be read
    """
    if tomllib is None:
        warnings.warn(
            "tomli package not installed. Config file support requires 'pip install tomli' for Python < 3.11.",
            stacklevel=2,
        )
        return None

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}", context={"file": str(path)}) from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}", context={"file": str(path)}) from e


def _parse_prefixes(value: Any, source: str) -> list[str]:
    """Accept a list of prefixes or a comma-separated string."""
    if isinstance(value, str):
        return [p.strip() for p in value.split(",") if p.strip()]
    if isinstance(value, list) and all(isinstance(p, str) for p in value):
        return [p.strip() for p in value if p.strip()]
    raise ConfigError(
        f"Invalid value for 'defaults.prefixes' in {source}",
        context={"file": source, "value": repr(value)},
        suggestions=['Use a list of strings, e.g. prefixes = ["C", "R", "U"]'],
    )


def _merge_config(
    config: Config, data: dict[str, Any], source: str, sources: dict[str, str]
) -> None:
    """
    Merge loaded config data into Config object.

    Args:
        config: Config object to update
        data: Raw config data from TOML
        source: Source file path (for tracking)
        sources: Dict to update with source info
    """
    for key in data:
        if key not in KNOWN_KEYS:
            warnings.warn(f"Unknown config key '{key}' in {source}", stacklevel=3)

    if "defaults" in data:
        defaults_data = data["defaults"]
        _warn_unknown_keys(defaults_data, KNOWN_KEYS["defaults"], "defaults", source)

        if "manufacturer" in defaults_data:
            config.defaults.manufacturer = defaults_data["manufacturer"]
            sources["defaults.manufacturer"] = source
        if "prefixes" in defaults_data:
            config.defaults.prefixes = _parse_prefixes(defaults_data["prefixes"], source)
            sources["defaults.prefixes"] = source
        if "verbose" in defaults_data:
            config.defaults.verbose = defaults_data["verbose"]
            sources["defaults.verbose"] = source
        if "quiet" in defaults_data:
            config.defaults.quiet = defaults_data["quiet"]
            sources["defaults.quiet"] = source

    if "export" in data:
        export_data = data["export"]
        _warn_unknown_keys(export_data, KNOWN_KEYS["export"], "export", source)

        if "output_dir" in export_data:
            config.export.output_dir = export_data["output_dir"]
            sources["export.output_dir"] = source
        if "assume_yes" in export_data:
            config.export.assume_yes = export_data["assume_yes"]
            sources["export.assume_yes"] = source


def _warn_unknown_keys(data: dict[str, Any], known: set[str], section: str, source: str) -> None:
    """Warn about unknown keys in a config section."""
    for key in data:
        if key not in known:
            warnings.warn(f"Unknown config key '{section}.{key}' in {source}", stacklevel=4)


def generate_template() -> str:
    """
    Generate a template config file with all options documented.

    Returns:
        Template TOML string
    """
    return """# pcba-export configuration file
# Place as .pcba-export.toml in the project directory or
# ~/.config/pcba-export/config.toml for user defaults

[defaults]
# Assembly service: jlcpcb
# manufacturer = "jlcpcb"

# Designator prefixes to include in the assembly output (empty: all parts)
# prefixes = ["C", "R", "U"]

# Enable verbose output by default
# verbose = false

# Enable quiet mode by default
# quiet = false

[export]
# Output directory (default: <working dir>/<manufacturer>)
# output_dir = "./assembly"

# Continue without asking when a warning requests confirmation
# assume_yes = false
"""


def get_config_paths(start_dir: Path | None = None) -> dict[str, Path | None]:
    """
    Get paths to config files that would be loaded.

    Returns:
        Dict with 'user' and 'project' keys
    """
    project_config = _find_project_config(start_dir or Path.cwd())

    return {
        "user": USER_CONFIG_PATH if USER_CONFIG_PATH.exists() else None,
        "project": project_config,
    }
