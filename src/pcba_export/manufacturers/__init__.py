"""
Assembly service profiles.

Supported services:
- JLCPCB (jlcpcb) - assembly with the LCSC parts library

Usage:
    from pcba_export.manufacturers import get_profile, list_manufacturers

    profile = get_profile("jlcpcb")
    print(profile.output_dirname, profile.bom_filename)

    for mfr in list_manufacturers():
        print(f"{mfr.name}: {mfr.website}")

New services are added by registering a profile here and formatters in
:mod:`pcba_export.export.bom_formats` and :mod:`pcba_export.export.pnp`.
"""

from ..exceptions import UnknownManufacturerError
from .base import AssemblyProfile
from .jlcpcb import JLCPCB_PROFILE

__all__ = [
    "AssemblyProfile",
    "get_profile",
    "list_manufacturers",
    "get_manufacturer_ids",
    "JLCPCB_PROFILE",
]

# Registry of all assembly profiles
_PROFILES: dict[str, AssemblyProfile] = {
    "jlcpcb": JLCPCB_PROFILE,
}

# Aliases for convenience
_ALIASES: dict[str, str] = {
    "jlc": "jlcpcb",
    "lcsc": "jlcpcb",
}


def get_profile(manufacturer_id: str) -> AssemblyProfile:
    """
    Get an assembly profile by ID.

    Args:
        manufacturer_id: Manufacturer identifier or alias (e.g., "jlcpcb", "JLC")

    Returns:
        AssemblyProfile for the specified manufacturer

    Raises:
        UnknownManufacturerError: If manufacturer_id is not recognized
    """
    normalized = manufacturer_id.lower().strip()
    normalized = _ALIASES.get(normalized, normalized)

    if normalized not in _PROFILES:
        raise UnknownManufacturerError(manufacturer_id, get_manufacturer_ids())

    return _PROFILES[normalized]


def list_manufacturers() -> list[AssemblyProfile]:
    """Get list of all available assembly profiles."""
    return list(_PROFILES.values())


def get_manufacturer_ids() -> list[str]:
    """Get sorted list of valid manufacturer IDs."""
    return sorted(_PROFILES.keys())
