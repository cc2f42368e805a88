"""Conversion pipeline: inputs -> parsers -> collection.

Inputs are processed one at a time, in order. A file that fails as a whole
(unreadable, not decodable XML, unsupported type) is recorded as a single
warning and the remaining inputs are still converted.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from traffic2postman.collection import CollectionAssembler, InputMode
from traffic2postman.discovery import (
    InputKind,
    InputSource,
    detect_input_kind,
    discover_inputs,
)
from traffic2postman.exceptions import (
    InputReadError,
    UnsupportedFormatError,
    XmlDecodeError,
)
from traffic2postman.logging import get_logger
from traffic2postman.models import ParseResult, ParseWarning
from traffic2postman.parsers.burp import parse_burp_file
from traffic2postman.parsers.curl import parse_curl_file

LOG = get_logger(__name__)


@dataclass
class ConversionResult:
    """Assembled collection plus every warning raised along the way."""

    collection: CollectionAssembler
    warnings: list[ParseWarning] = field(default_factory=list)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)


def parse_input(source: InputSource) -> ParseResult:
    """Run the parser matching ``source.kind``.

    Raises:
        InputReadError: If the file cannot be read.
        XmlDecodeError: If a Burp file cannot be decoded.
    """
    if source.kind is InputKind.BURP_XML:
        return parse_burp_file(source.path)
    return parse_curl_file(source.path)


def convert_inputs(sources: Iterable[InputSource], assembler: CollectionAssembler) -> ParseResult:
    """Parse each source in order and append its requests to ``assembler``.

    Returns:
        ParseResult holding all appended requests and all warnings.
    """
    combined = ParseResult()
    for source in sources:
        LOG.info("input_processing", filepath=str(source.path), kind=source.kind.value)
        try:
            result = parse_input(source)
        except (InputReadError, XmlDecodeError) as exc:
            combined.warnings.append(
                ParseWarning(source=str(source.path), index=None, reason=str(exc))
            )
            LOG.warning("input_failed", filepath=str(source.path), error=str(exc))
            continue
        assembler.extend(result.requests)
        combined.extend(result)
    return combined


def convert_curl_file(path: Path | str) -> ConversionResult:
    """Convert a single input file into a cURL-mode collection.

    The parser is chosen by extension, so an ``.xml`` file is still decoded
    as a Burp export.
    """
    path = Path(path)
    assembler = CollectionAssembler.for_mode(InputMode.CURL)
    try:
        kind = detect_input_kind(path)
    except UnsupportedFormatError as exc:
        LOG.warning("input_unsupported", filepath=str(path), error=str(exc))
        return ConversionResult(
            collection=assembler,
            warnings=[ParseWarning(source=str(path), index=None, reason=str(exc))],
        )

    result = convert_inputs([InputSource(path=path, kind=kind)], assembler)
    return ConversionResult(collection=assembler, warnings=result.warnings)


def convert_burp_directory(directory: Path | str) -> ConversionResult:
    """Convert every recognized file under ``directory`` into a Burp-mode collection.

    Warnings from the directory walk (unlistable subdirectories, unreadable
    files) come first, followed by warnings from parsing the inputs found.
    """
    assembler = CollectionAssembler.for_mode(InputMode.BURP)
    walk_warnings: list[ParseWarning] = []
    result = convert_inputs(discover_inputs(directory, walk_warnings), assembler)
    return ConversionResult(collection=assembler, warnings=walk_warnings + result.warnings)
