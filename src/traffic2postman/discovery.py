"""Input discovery: decide which parser a file needs.

Two modes mirror the CLI: a single file chosen by extension, or a
directory walked recursively where each file is sniffed by content.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from traffic2postman.config import get_settings
from traffic2postman.exceptions import InputReadError, UnsupportedFormatError
from traffic2postman.logging import get_logger
from traffic2postman.models import ParseWarning
from traffic2postman.parsers.curl import CURL_PREFIX

LOG = get_logger(__name__)

BURP_SIGNATURES = ("<!DOCTYPE items", "<items burpVersion")
XML_EXTENSIONS = frozenset({".xml"})
CURL_EXTENSIONS = frozenset({".txt", ".curl"})


class InputKind(str, Enum):
    CURL_FILE = "curl_file"
    BURP_XML = "burp_xml"


@dataclass(frozen=True)
class InputSource:
    """A discovered input and the parser it should go to."""

    path: Path
    kind: InputKind


def detect_input_kind(path: Path | str) -> InputKind:
    """Choose a kind for a single input file by its extension.

    Files with no extension are treated as cURL command lists.

    Raises:
        UnsupportedFormatError: If the extension is not recognized.
    """
    ext = Path(path).suffix.lower()
    if ext in XML_EXTENSIONS:
        return InputKind.BURP_XML
    if ext in CURL_EXTENSIONS or ext == "":
        return InputKind.CURL_FILE
    raise UnsupportedFormatError(f"unsupported file type: {ext}")


def _read_head(path: Path, size: int) -> str:
    with open(path, "rb") as f:
        return f.read(size).decode("utf-8", errors="replace")


def _read_first_line(path: Path) -> str:
    with open(path, encoding="utf-8", errors="replace") as f:
        return f.readline().rstrip("\r\n")


def sniff_input_kind(path: Path) -> InputKind | None:
    """Identify a file found during a directory walk by its content.

    Returns:
        The kind, or None if the file is not a recognized input.

    Raises:
        InputReadError: If the file cannot be read.
    """
    ext = path.suffix.lower()
    try:
        if ext in XML_EXTENSIONS:
            head = _read_head(path, get_settings().sniff_bytes)
            if any(signature in head for signature in BURP_SIGNATURES):
                return InputKind.BURP_XML
        elif ext in CURL_EXTENSIONS:
            if _read_first_line(path).startswith(CURL_PREFIX):
                return InputKind.CURL_FILE
    except OSError as exc:
        raise InputReadError(f"error reading {path}: {exc}") from exc

    LOG.debug("input_skipped", filepath=str(path))
    return None


def _walk(directory: Path, warnings: list[ParseWarning]) -> Iterator[Path]:
    # Symlinked directories are not descended into; symlinked files are kept.
    try:
        entries = sorted(directory.iterdir(), key=lambda p: p.name)
    except OSError as exc:
        LOG.warning("input_walk_failed", directory=str(directory), error=str(exc))
        reason = f"error listing directory: {exc}"
        warnings.append(ParseWarning(source=str(directory), index=None, reason=reason))
        return

    for entry in entries:
        if entry.is_dir() and not entry.is_symlink():
            yield from _walk(entry, warnings)
        elif entry.is_file():
            yield entry


def discover_inputs(
    directory: Path | str, warnings: list[ParseWarning] | None = None
) -> Iterator[InputSource]:
    """Walk ``directory`` depth-first in lexical order, yielding recognized inputs.

    Subdirectories that cannot be listed and files that cannot be sniffed
    are skipped; each is recorded in ``warnings`` when a list is given.
    """
    if warnings is None:
        warnings = []
    for path in _walk(Path(directory), warnings):
        try:
            kind = sniff_input_kind(path)
        except InputReadError as exc:
            LOG.warning("input_sniff_failed", filepath=str(path), error=str(exc))
            warnings.append(ParseWarning(source=str(path), index=None, reason=str(exc)))
            continue
        if kind is not None:
            LOG.debug("input_discovered", filepath=str(path), kind=kind.value)
            yield InputSource(path=path, kind=kind)
