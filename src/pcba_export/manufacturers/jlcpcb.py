"""
JLCPCB assembly profile.

Source: https://jlcpcb.com/help/article/bill-of-materials-for-pcb-assembly
        https://jlcpcb.com/help/article/pick-place-file-for-pcb-assembly
"""

from .base import AssemblyProfile

JLCPCB_PROFILE = AssemblyProfile(
    id="jlcpcb",
    name="JLCPCB",
    website="https://jlcpcb.com",
    output_dirname="JLCPCB",
    bom_filename="BOM.xlsx",
    cpl_filename="CPL.xlsx",
    bom_format="jlcpcb",
    pnp_format="jlcpcb",
    part_number_column="LCSC",
)
