"""Burp Suite XML export decoder.

Decodes ``<items>`` exports (Repeater "save item", Proxy history "save
items") into ``BurpRawItem`` records and hands each stored request to the
raw HTTP parser. Exports are untrusted input, so XML goes through
defusedxml.

Expected shape::

    <items burpVersion="..." exportTime="...">
      <item>
        <time/> <url/> <host/> <port/> <protocol/> <method/> <path/>
        <extension/> <request base64="true|false"/> <status/>
        <responselength/> <mimetype/> <response base64="..."/> <comment/>
      </item>
    </items>
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, field
from pathlib import Path
from xml.etree.ElementTree import Element

from defusedxml import DefusedXmlException
from defusedxml.ElementTree import ParseError, fromstring

from traffic2postman.exceptions import (
    Base64DecodeError,
    InputReadError,
    MalformedInputError,
    MalformedUrlError,
    XmlDecodeError,
)
from traffic2postman.logging import get_logger
from traffic2postman.models import ParseResult, ParseWarning
from traffic2postman.parsers.raw_http import parse_http_request
from traffic2postman.parsers.url import decompose_url, split_path

LOG = get_logger(__name__)

BURP_ROOT_TAG = "items"
DEFAULT_RESOURCE_NAME = "request"


@dataclass
class BurpRawItem:
    """One ``<item>`` from a Burp export.

    Only ``method``, ``path``, ``url`` and ``request`` are used to build
    requests; the rest is carried along untouched.
    """

    method: str = ""
    url: str = ""
    path: str = ""
    request: str = ""
    request_base64: bool = False
    time: str = ""
    host: str = ""
    port: str = ""
    protocol: str = ""
    extension: str = ""
    status: str = ""
    response_length: str = ""
    mime_type: str = ""
    response: str = ""
    response_base64: bool = False
    comment: str = ""


@dataclass
class BurpExport:
    """Decoded ``<items>`` document."""

    burp_version: str = ""
    export_time: str = ""
    items: list[BurpRawItem] = field(default_factory=list)


def decode_base64_content(content: str) -> str:
    """Decode base64 request/response content to text.

    Line breaks are ignored; any other non-alphabet character fails.

    Raises:
        Base64DecodeError: If ``content`` is not valid base64.
    """
    compact = content.replace("\r", "").replace("\n", "")
    try:
        data = base64.b64decode(compact, validate=True)
    except binascii.Error as exc:
        raise Base64DecodeError(f"could not decode base64 request: {exc}") from exc
    return data.decode("utf-8", errors="replace")


def _is_base64(element: Element | None) -> bool:
    return element is not None and element.get("base64") == "true"


def _response_text(element: Element | None, source: str, index: int) -> str:
    """Return response content, decoded when flagged; undecodable content stays raw."""
    if element is None:
        return ""
    text = element.text or ""
    if not _is_base64(element):
        return text
    try:
        return decode_base64_content(text)
    except Base64DecodeError as exc:
        LOG.debug(
            "burp_response_decode_failed",
            source=source,
            item_index=index,
            error=str(exc),
        )
        return text


def _item_from_element(element: Element, source: str, index: int) -> BurpRawItem:
    request_el = element.find("request")
    response_el = element.find("response")
    return BurpRawItem(
        method=element.findtext("method") or "",
        url=element.findtext("url") or "",
        path=element.findtext("path") or "",
        request=(request_el.text or "") if request_el is not None else "",
        request_base64=_is_base64(request_el),
        time=element.findtext("time") or "",
        host=element.findtext("host") or "",
        port=element.findtext("port") or "",
        protocol=element.findtext("protocol") or "",
        extension=element.findtext("extension") or "",
        status=element.findtext("status") or "",
        response_length=element.findtext("responselength") or "",
        mime_type=element.findtext("mimetype") or "",
        response=_response_text(response_el, source, index),
        response_base64=_is_base64(response_el),
        comment=element.findtext("comment") or "",
    )


def decode_burp_export(content: str | bytes, source: str = "<string>") -> BurpExport:
    """Decode a Burp XML document into raw item records.

    Args:
        content: XML document text or bytes.
        source: Label attached to log events about individual items.

    Returns:
        BurpExport with items in document order.

    Raises:
        XmlDecodeError: If the document is not well-formed, uses forbidden
            XML constructs, or its root is not ``<items>``.
    """
    try:
        root = fromstring(content)
    except (ParseError, DefusedXmlException) as exc:
        raise XmlDecodeError(f"error decoding Burp XML: {exc}") from exc

    if root.tag != BURP_ROOT_TAG:
        raise XmlDecodeError(f"expected <{BURP_ROOT_TAG}> root element, found <{root.tag}>")

    return BurpExport(
        burp_version=root.get("burpVersion", ""),
        export_time=root.get("exportTime", ""),
        items=[
            _item_from_element(el, source, index)
            for index, el in enumerate(root.findall("item"), start=1)
        ],
    )


def resource_name(item: BurpRawItem) -> str:
    """Pick a display label for an item.

    Prefers the last non-empty segment of ``path``, then the last path
    segment of ``url``, then ``"request"``.
    """
    segments = split_path(item.path)
    if segments:
        return segments[-1]
    if item.url:
        try:
            url = decompose_url(item.url)
        except MalformedUrlError:
            return DEFAULT_RESOURCE_NAME
        if url.resource_name:
            return url.resource_name
    return DEFAULT_RESOURCE_NAME


def parse_burp_items(items: list[BurpRawItem], source: str = "<string>") -> ParseResult:
    """Convert decoded Burp items into normalized requests.

    Items whose request cannot be base64-decoded or parsed are skipped with
    a warning; the remaining items are still processed.

    Args:
        items: Raw items in document order.
        source: Label used to attribute warnings.

    Returns:
        ParseResult with requests in item order.
    """
    result = ParseResult()
    for index, item in enumerate(items, start=1):
        try:
            text = decode_base64_content(item.request) if item.request_base64 else item.request
            name = f"{item.method} {resource_name(item)}"
            result.requests.append(parse_http_request(text, index, name))
        except MalformedInputError as exc:
            result.warnings.append(ParseWarning(source=source, index=index, reason=str(exc)))
            LOG.warning(
                "burp_item_parse_failed",
                source=source,
                item_index=index,
                error=str(exc),
            )
    return result


def parse_burp_string(content: str | bytes, source: str = "<string>") -> ParseResult:
    """Parse a Burp XML export held in memory.

    Raises:
        XmlDecodeError: If the document cannot be decoded.
    """
    export = decode_burp_export(content, source=source)
    return parse_burp_items(export.items, source=source)


def parse_burp_file(filepath: Path | str) -> ParseResult:
    """Parse a Burp XML export file.

    Args:
        filepath: Path to the XML export.

    Returns:
        ParseResult with one request per decodable item.

    Raises:
        InputReadError: If the file cannot be opened or read.
        XmlDecodeError: If the document cannot be decoded.
    """
    filepath = Path(filepath)
    try:
        content = filepath.read_bytes()
    except OSError as exc:
        raise InputReadError(f"error opening Burp XML file {filepath}: {exc}") from exc

    export = decode_burp_export(content, source=str(filepath))
    result = parse_burp_items(export.items, source=str(filepath))
    LOG.info(
        "burp_file_parsed",
        filepath=str(filepath),
        burp_version=export.burp_version,
        items=len(export.items),
        requests=len(result.requests),
        warnings=len(result.warnings),
    )
    return result
