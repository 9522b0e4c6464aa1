"""
Base class for assembly service profiles.

A profile names the output files and the BOM/CPL formats an assembly
service expects.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class AssemblyProfile:
    """Assembly service profile."""

    # Basic info
    id: str  # "jlcpcb"
    name: str  # "JLCPCB"
    website: str

    # Output directory created below the working directory
    output_dirname: str

    # Output file names
    bom_filename: str = "BOM.xlsx"
    cpl_filename: str = "CPL.xlsx"

    # Formatter ids in the export registries
    bom_format: str = "generic"
    pnp_format: str = "generic"

    # Part number attribute expected in the source BOM
    part_number_column: str = "LCSC"

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "website": self.website,
            "output_dirname": self.output_dirname,
            "bom_filename": self.bom_filename,
            "cpl_filename": self.cpl_filename,
            "bom_format": self.bom_format,
            "pnp_format": self.pnp_format,
            "part_number_column": self.part_number_column,
        }
