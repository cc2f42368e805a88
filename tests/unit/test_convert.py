"""Tests for the conversion pipeline."""

from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from traffic2postman.collection import CollectionAssembler, InputMode
from traffic2postman.convert import convert_burp_directory, convert_curl_file, convert_inputs
from traffic2postman.discovery import InputKind, InputSource


class TestConvertInputs:
    """Tests for in-order processing and failure isolation."""

    def test_file_failures_do_not_stop_run(self, tmp_path: Path, fixtures_dir: Path) -> None:
        broken = tmp_path / "broken.xml"
        broken.write_text("<items burpVersion='1'><item>")
        sources = [
            InputSource(broken, InputKind.BURP_XML),
            InputSource(tmp_path / "gone.txt", InputKind.CURL_FILE),
            InputSource(fixtures_dir / "commands.txt", InputKind.CURL_FILE),
        ]
        assembler = CollectionAssembler.for_mode(InputMode.CURL)

        result = convert_inputs(sources, assembler)

        assert len(assembler) == 4
        assert [w.source for w in result.warnings] == [str(broken), str(tmp_path / "gone.txt")]
        assert all(w.index is None for w in result.warnings)

    def test_order_follows_sources(self, fixtures_dir: Path) -> None:
        sources = [
            InputSource(fixtures_dir / "commands.txt", InputKind.CURL_FILE),
            InputSource(fixtures_dir / "burp_export.xml", InputKind.BURP_XML),
        ]
        assembler = CollectionAssembler.for_mode(InputMode.BURP)

        result = convert_inputs(sources, assembler)

        assert [r.name for r in assembler.items] == [
            "POST widgets",
            "GET cart",
            "DELETE 42",
            "Request 4",
            "POST users",
            "GET health",
            "GET path",
        ]
        assert list(assembler.items) == result.requests
        assert len(result.warnings) == 1


class TestConvertCurlFile:
    def test_curl_mode_metadata(self, fixtures_dir: Path) -> None:
        result = convert_curl_file(fixtures_dir / "commands.txt")

        assert result.collection.info.name == "cURL API Collection"
        assert len(result.collection) == 4
        assert not result.has_warnings

    def test_xml_file_parsed_as_burp(self, fixtures_dir: Path) -> None:
        result = convert_curl_file(fixtures_dir / "burp_export.xml")

        assert result.collection.info.name == "cURL API Collection"
        assert len(result.collection) == 3

    def test_unsupported_extension(self, tmp_path: Path) -> None:
        path = tmp_path / "capture.har"
        path.write_text("{}")

        result = convert_curl_file(path)

        assert len(result.collection) == 0
        assert "unsupported file type" in result.warnings[0].reason


class TestConvertBurpDirectory:
    def test_directory(self, tmp_path: Path, fixtures_dir: Path) -> None:
        shutil.copy(fixtures_dir / "burp_export.xml", tmp_path / "one.xml")
        shutil.copy(fixtures_dir / "commands.txt", tmp_path / "two.txt")

        result = convert_burp_directory(tmp_path)

        assert result.collection.info.name == "Burp XML API Collection"
        assert len(result.collection) == 7
        assert len(result.warnings) == 1
        assert result.warnings[0].index == 3

    def test_unlistable_subdirectory_does_not_stop_run(
        self, tmp_path: Path, fixtures_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        shutil.copy(fixtures_dir / "commands.txt", tmp_path / "a.txt")
        (tmp_path / "locked").mkdir()
        real_iterdir = Path.iterdir

        def iterdir(self: Path):
            if self.name == "locked":
                raise PermissionError(13, "Permission denied", str(self))
            return real_iterdir(self)

        monkeypatch.setattr(Path, "iterdir", iterdir)

        result = convert_burp_directory(tmp_path)

        assert len(result.collection) == 4
        assert [w.source for w in result.warnings] == [str(tmp_path / "locked")]

    def test_symlink_loop_converted_once(self, tmp_path: Path) -> None:
        (tmp_path / "cmds.txt").write_text("curl https://example.com/a\n")
        (tmp_path / "loop").symlink_to(tmp_path, target_is_directory=True)

        result = convert_burp_directory(tmp_path)

        assert len(result.collection) == 1
        assert not result.has_warnings
