"""Tests for CAM archive location and extraction."""

import zipfile
from pathlib import Path

import pytest

from pcba_export.cam import archive as archive_mod
from pcba_export.cam.archive import (
    DocumentKind,
    classify_entry,
    extract_documents,
    find_latest_archive,
)
from pcba_export.exceptions import ArchiveReadError, NoArchiveFoundError


@pytest.fixture
def fake_creation_times(monkeypatch):
    """Control creation timestamps by file name."""
    times = {}

    def _creation_time(path: Path) -> float:
        return times[path.name]

    monkeypatch.setattr(archive_mod, "_creation_time", _creation_time)
    return times


class TestFindLatestArchive:
    """Tests for find_latest_archive."""

    def test_no_archive(self, tmp_path):
        (tmp_path / "readme.txt").write_text("hello")

        with pytest.raises(NoArchiveFoundError) as exc_info:
            find_latest_archive(tmp_path)

        assert exc_info.value.directory == tmp_path
        assert str(tmp_path) in str(exc_info.value)

    def test_missing_directory(self, tmp_path):
        with pytest.raises(NoArchiveFoundError):
            find_latest_archive(tmp_path / "does-not-exist")

    def test_single_archive(self, make_archive, tmp_path):
        path = make_archive({"x_BOM.csv": "a"})
        assert find_latest_archive(tmp_path) == path

    def test_newest_wins(self, make_archive, tmp_path, fake_creation_times):
        make_archive({}, name="old.zip")
        newest = make_archive({}, name="new.zip")
        make_archive({}, name="middle.zip")
        fake_creation_times.update({"old.zip": 100.0, "new.zip": 300.0, "middle.zip": 200.0})

        assert find_latest_archive(tmp_path) == newest

    def test_tie_resolves_to_first_name(self, make_archive, tmp_path, fake_creation_times):
        make_archive({}, name="b.zip")
        first = make_archive({}, name="a.zip")
        fake_creation_times.update({"a.zip": 100.0, "b.zip": 100.0})

        assert find_latest_archive(tmp_path) == first
        # Repeated calls give the same answer
        assert find_latest_archive(tmp_path) == first

    def test_ignores_other_extensions_and_directories(self, make_archive, tmp_path, fake_creation_times):
        (tmp_path / "newer.zip.bak").write_text("x")
        (tmp_path / "folder.zip").mkdir()
        archive = make_archive({}, name="cam.zip")
        fake_creation_times.update({"cam.zip": 1.0})

        assert find_latest_archive(tmp_path) == archive

    def test_extension_case_insensitive(self, make_archive, tmp_path):
        archive = make_archive({}, name="CAM.ZIP")
        assert find_latest_archive(tmp_path) == archive


class TestClassifyEntry:
    """Tests for entry name classification."""

    @pytest.mark.parametrize(
        "name,kind",
        [
            ("board_BOM.csv", DocumentKind.BOM),
            ("BOM.csv", DocumentKind.BOM),
            ("cam/board_PnP_front.csv", DocumentKind.PNP_FRONT),
            ("cam/deep/board_PnP_back.csv", DocumentKind.PNP_BACK),
        ],
    )
    def test_known_suffixes(self, name, kind):
        assert classify_entry(name) == kind

    @pytest.mark.parametrize("name", ["board_bom.csv", "board_BOM.txt", "PnP_front.csv.bak", "board.gbr"])
    def test_unknown_names(self, name):
        assert classify_entry(name) is None


class TestExtractDocuments:
    """Tests for extract_documents."""

    def test_extracts_all_kinds(self, full_archive, eagle_bom_csv, pnp_back_csv):
        docs = extract_documents(full_archive)

        assert docs.bom is not None
        assert docs.bom.kind == DocumentKind.BOM
        assert docs.bom.name == "board/board_BOM.csv"
        assert docs.bom.data == eagle_bom_csv.encode("utf-8")
        assert docs.pnp_front is not None
        assert docs.pnp_back.data == pnp_back_csv.encode("utf-8")

    def test_missing_entries_are_none(self, make_archive):
        path = make_archive({"board_PnP_front.csv": "x", "notes.txt": "y"})

        docs = extract_documents(path)

        assert docs.bom is None
        assert docs.pnp_back is None
        assert docs.get(DocumentKind.PNP_FRONT).data == b"x"

    def test_first_match_wins(self, make_archive):
        path = make_archive({"rev1/board_BOM.csv": "first", "rev2/board_BOM.csv": "second"})

        docs = extract_documents(path)

        assert docs.bom.name == "rev1/board_BOM.csv"
        assert docs.bom.data == b"first"

    def test_directory_entries_skipped(self, tmp_path):
        path = tmp_path / "cam.zip"
        with zipfile.ZipFile(path, "w") as zf:
            zf.writestr(zipfile.ZipInfo("weird_BOM.csv/"), "")
            zf.writestr("board_BOM.csv", "bom")

        docs = extract_documents(path)

        assert docs.bom.name == "board_BOM.csv"

    def test_empty_archive(self, make_archive):
        docs = extract_documents(make_archive({}))
        assert docs.bom is None and docs.pnp_front is None and docs.pnp_back is None

    def test_not_a_zip(self, tmp_path):
        path = tmp_path / "broken.zip"
        path.write_bytes(b"this is not a zip file")

        with pytest.raises(ArchiveReadError) as exc_info:
            extract_documents(path)

        assert isinstance(exc_info.value.__cause__, zipfile.BadZipFile)
        assert exc_info.value.cause is exc_info.value.__cause__
        assert "broken.zip" in str(exc_info.value)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ArchiveReadError) as exc_info:
            extract_documents(tmp_path / "gone.zip")

        assert isinstance(exc_info.value.cause, OSError)
