"""
Command-line interface for pcba-export.

Converts the newest CAM output archive in a directory into assembly
spreadsheets for the selected service.

Usage:
    pcba-export [directory] [options]

Examples:
    pcba-export
    pcba-export boards/rev2 --prefix C,R,U
    pcba-export --prefix C --prefix LED --service jlcpcb --yes
    pcba-export --init-config > .pcba-export.toml
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.prompt import Confirm

from pcba_export import __version__
from pcba_export.config import Config, generate_template
from pcba_export.events import EventLevel, PipelineEvent
from pcba_export.exceptions import PcbaExportError, RunCancelledError
from pcba_export.export import AssemblyPipeline
from pcba_export.manufacturers import get_manufacturer_ids

__all__ = ["main", "ConsoleEventHandler", "parse_prefixes"]

_LEVEL_STYLES = {
    EventLevel.INFO: "",
    EventLevel.WARNING: "yellow",
    EventLevel.ERROR: "bold red",
}


class ConsoleEventHandler:
    """
    Print pipeline events and ask for confirmation where requested.

    Declining a confirmation raises RunCancelledError, which aborts the run.
    """

    def __init__(
        self,
        console: Optional[Console] = None,
        assume_yes: bool = False,
        quiet: bool = False,
        interactive: Optional[bool] = None,
    ):
        self.console = console or Console()
        self.assume_yes = assume_yes
        self.quiet = quiet
        self.interactive = sys.stdin.isatty() if interactive is None else interactive

    def __call__(self, event: PipelineEvent) -> None:
        if self.quiet and event.level == EventLevel.INFO:
            return

        self.console.print(
            str(event),
            style=_LEVEL_STYLES[event.level],
            markup=False,
            highlight=False,
            soft_wrap=True,
        )

        if event.requires_confirmation and self.interactive and not self.assume_yes:
            if not Confirm.ask("Continue?", default=True, console=self.console):
                raise RunCancelledError()


def parse_prefixes(values: List[str]) -> List[str]:
    """Flatten repeated and comma-separated --prefix values."""
    prefixes: List[str] = []
    for value in values:
        prefixes.extend(p.strip() for p in value.split(",") if p.strip())
    return prefixes


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pcba-export",
        description="Convert a CAM output archive into assembly BOM and CPL spreadsheets",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--version", action="version", version=f"pcba-export {__version__}")
    parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Directory containing the CAM output zip archive (default: current directory)",
    )
    parser.add_argument(
        "--prefix",
        action="append",
        default=[],
        help="Designator prefixes to include, comma-separated (can repeat; default: all parts)",
    )
    parser.add_argument(
        "--service",
        help=f"Assembly service ({', '.join(get_manufacturer_ids())}; default: jlcpcb)",
    )
    parser.add_argument("--output-dir", help="Output directory (default: <directory>/<service>)")
    parser.add_argument(
        "-y",
        "--yes",
        action="store_true",
        help="Continue without asking when a warning requests confirmation",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug logging")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only show warnings and errors")
    parser.add_argument(
        "--init-config",
        action="store_true",
        help="Print a documented configuration file template and exit",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for pcba-export."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.init_config:
        print(generate_template(), end="")
        return 0

    directory = Path(args.directory)
    try:
        config = Config.load(directory)
    except PcbaExportError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # CLI arguments override config files
    if args.prefix:
        config.defaults.prefixes = parse_prefixes(args.prefix)
    if args.service:
        config.defaults.manufacturer = args.service
    prefixes = config.defaults.prefixes
    output_dir = args.output_dir or config.export.output_dir
    verbose = args.verbose or config.defaults.verbose
    quiet = args.quiet or config.defaults.quiet

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    console = Console()
    if prefixes and not quiet:
        console.print(f"Prefixes set ({','.join(prefixes)})", markup=False, soft_wrap=True)

    try:
        pipeline = AssemblyPipeline(
            config.filter_config(),
            on_event=ConsoleEventHandler(
                console, assume_yes=args.yes or config.export.assume_yes, quiet=quiet
            ),
            output_dir=output_dir,
        )
    except PcbaExportError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        result = pipeline.run(directory)
    except KeyboardInterrupt:
        print("\nCancelled.", file=sys.stderr)
        return 130

    if not quiet:
        console.print()
        console.print(str(result), markup=False, highlight=False, soft_wrap=True)

    return 0 if result.success else 1
