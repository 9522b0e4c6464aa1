"""
CAM output archive handling.

Locates the newest zip archive in a working directory and extracts the
BOM and pick-and-place CSV files it contains into memory.

Example::

    from pcba_export.cam.archive import extract_documents, find_latest_archive

    archive = find_latest_archive(".")
    docs = extract_documents(archive)
    if docs.bom is not None:
        print(docs.bom.name, len(docs.bom.data))
"""

from __future__ import annotations

import logging
import os
import zipfile
import zlib
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Optional

from ..exceptions import ArchiveReadError, NoArchiveFoundError

logger = logging.getLogger(__name__)

ARCHIVE_SUFFIX = ".zip"


class DocumentKind(Enum):
    """Logical document kinds found in a CAM archive."""

    BOM = "BOM"
    PNP_FRONT = "PnP-Front"
    PNP_BACK = "PnP-Back"

    @property
    def label(self) -> str:
        return self.value


# Entry name suffixes, checked in this order
ENTRY_SUFFIXES: Dict[DocumentKind, str] = {
    DocumentKind.BOM: "BOM.csv",
    DocumentKind.PNP_FRONT: "PnP_front.csv",
    DocumentKind.PNP_BACK: "PnP_back.csv",
}


@dataclass(frozen=True)
class RawDocument:
    """An extracted archive entry."""

    kind: DocumentKind
    name: str  # entry name inside the archive
    data: bytes


@dataclass(frozen=True)
class ExtractedDocuments:
    """Documents extracted from one archive; missing kinds are None."""

    bom: Optional[RawDocument] = None
    pnp_front: Optional[RawDocument] = None
    pnp_back: Optional[RawDocument] = None

    def get(self, kind: DocumentKind) -> Optional[RawDocument]:
        return {
            DocumentKind.BOM: self.bom,
            DocumentKind.PNP_FRONT: self.pnp_front,
            DocumentKind.PNP_BACK: self.pnp_back,
        }[kind]


def _creation_time(path: Path) -> float:
    """Creation timestamp where the platform records one, else st_ctime."""
    stat = path.stat()
    return getattr(stat, "st_birthtime", stat.st_ctime)


def find_latest_archive(directory: str | os.PathLike) -> Path:
    """
    Find the most recently created zip archive in a directory.

    Files are visited in sorted-name order and only a strictly newer file
    replaces the current candidate, so equal timestamps always resolve to
    the first name.

    Args:
        directory: Directory to search (not recursive)

    Returns:
        Path to the newest archive

    Raises:
        NoArchiveFoundError: If the directory holds no zip archive
    """
    root = Path(directory)
    latest: Optional[Path] = None
    latest_time = 0.0

    try:
        candidates = sorted(root.iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise NoArchiveFoundError(root) from e

    for path in candidates:
        if path.suffix.lower() != ARCHIVE_SUFFIX or not path.is_file():
            continue
        created = _creation_time(path)
        if latest is None or created > latest_time:
            latest, latest_time = path, created

    if latest is None:
        raise NoArchiveFoundError(root)

    logger.info(f"Using CAM archive: {latest.name}")
    return latest


def classify_entry(name: str) -> Optional[DocumentKind]:
    """Return the document kind an archive entry name belongs to, if any."""
    for kind, suffix in ENTRY_SUFFIXES.items():
        if name.endswith(suffix):
            return kind
    return None


def extract_documents(archive_path: str | os.PathLike) -> ExtractedDocuments:
    """
    Extract BOM and pick-and-place entries from an archive into memory.

    Entries are matched by name suffix, so files nested in subdirectories
    are found too. The first entry of each kind wins; later entries of the
    same kind are ignored.

    Args:
        archive_path: Path to the zip archive

    Returns:
        ExtractedDocuments with the entries that were found

    Raises:
        ArchiveReadError: If the archive cannot be opened or an entry cannot be read
    """
    path = Path(archive_path)
    found: Dict[DocumentKind, RawDocument] = {}

    try:
        with zipfile.ZipFile(path) as zf:
            for info in zf.infolist():
                if info.is_dir():
                    continue
                kind = classify_entry(info.filename)
                if kind is None:
                    continue
                if kind in found:
                    logger.debug(
                        f"Ignoring duplicate {kind.label} entry {info.filename!r} "
                        f"(using {found[kind].name!r})"
                    )
                    continue
                found[kind] = RawDocument(kind=kind, name=info.filename, data=zf.read(info))
                logger.info(f"{kind.label} stream extracted from {info.filename!r}")
    except (OSError, RuntimeError, zipfile.BadZipFile, zipfile.LargeZipFile, zlib.error) as e:
        # RuntimeError covers encrypted entries and unsupported compression
        raise ArchiveReadError(path, e) from e

    return ExtractedDocuments(
        bom=found.get(DocumentKind.BOM),
        pnp_front=found.get(DocumentKind.PNP_FRONT),
        pnp_back=found.get(DocumentKind.PNP_BACK),
    )
