"""cURL command line parser.

Each piece of a request is pulled out of the command by its own pattern
search over the whole line, so flag order does not matter. Only the flags
listed below are understood; anything else on the line is ignored.

Supported subset:
    -X METHOD
    -H "Key: Value"            (repeatable)
    -b "cookie-string"
    -d | --data | --data-raw "payload"
    "https://..." or a bare https://... token
"""

from __future__ import annotations

import re
from pathlib import Path

from traffic2postman.exceptions import InputReadError, MalformedInputError
from traffic2postman.logging import get_logger
from traffic2postman.models import (
    BodyLanguage,
    Header,
    NormalizedRequest,
    ParseResult,
    ParseWarning,
    RequestAuth,
    RequestBody,
    RequestUrl,
)
from traffic2postman.parsers.auth import extract_auth
from traffic2postman.parsers.url import decompose_url

LOG = get_logger(__name__)

CURL_PREFIX = "curl "

# A double-quoted argument may contain \" and \\ escapes; a single-quoted one is literal.
_QUOTED_ARG = r"""(?:"((?:[^"\\]|\\.)*)"|'([^']*)')"""

_METHOD_RE = re.compile(r"""-X\s+['"]?([A-Z]+)['"]?""")
_QUOTED_URL_RE = re.compile(r""""(https?://[^"]+)"|'(https?://[^']+)'""")
_BARE_URL_RE = re.compile(r"\s(https?://\S+)")
_HEADER_RE = re.compile(r"-H\s+" + _QUOTED_ARG)
_COOKIE_RE = re.compile(r"-b\s+" + _QUOTED_ARG)
_DATA_RES = (
    re.compile(r"-d\s+" + _QUOTED_ARG),
    re.compile(r"--data\s+" + _QUOTED_ARG),
    re.compile(r"--data-raw\s+" + _QUOTED_ARG),
)
_ESCAPE_RE = re.compile(r"""\\(["\\])""")


def _quoted_value(match: re.Match[str]) -> str:
    """Return the unquoted argument text from a ``_QUOTED_ARG`` match."""
    double, single = match.group(1), match.group(2)
    if double is not None:
        return _ESCAPE_RE.sub(r"\1", double)
    return single


def extract_method(command: str) -> str | None:
    """Return the ``-X`` method, if any."""
    match = _METHOD_RE.search(command)
    return match.group(1) if match else None


def extract_url(command: str) -> str | None:
    """Return the request URL, preferring a quoted token over a bare one."""
    match = _QUOTED_URL_RE.search(command)
    if match:
        return match.group(1) or match.group(2)
    match = _BARE_URL_RE.search(command)
    return match.group(1) if match else None


def extract_headers(command: str) -> list[Header]:
    """Return every ``-H "Key: Value"`` header, trimmed, in order.

    Arguments without a ``:`` are skipped.
    """
    headers: list[Header] = []
    for match in _HEADER_RE.finditer(command):
        key, sep, value = _quoted_value(match).partition(":")
        if sep:
            headers.append(Header(key=key.strip(), value=value.strip()))
    return headers


def extract_cookie(command: str) -> str | None:
    """Return the ``-b`` cookie string, if any."""
    match = _COOKIE_RE.search(command)
    if match:
        return _quoted_value(match) or None
    return None


def extract_data(command: str) -> str | None:
    """Return the body from the first of ``-d``, ``--data``, ``--data-raw`` present."""
    for pattern in _DATA_RES:
        match = pattern.search(command)
        if match:
            return _quoted_value(match) or None
    return None


def parse_curl_command(command: str, index: int) -> NormalizedRequest:
    """Parse a single cURL command line.

    Missing pieces leave the matching field empty; this never fails on
    unrecognized input. Bodies are always tagged as JSON since cURL flags
    do not reliably carry the content type.

    Args:
        command: One line starting with ``curl ``.
        index: One-based position among the file's cURL lines, used when
            no URL is present to name the request.

    Returns:
        The normalized request.
    """
    method = extract_method(command) or "GET"

    name = f"Request {index}"
    url = RequestUrl()
    url_text = extract_url(command)
    if url_text:
        url = decompose_url(url_text)
        name = f"{method} {url.resource_name or 'root'}"

    headers = extract_headers(command)
    auth: RequestAuth | None = None
    for header in headers:
        auth = extract_auth(header.key, header.value) or auth

    cookie = extract_cookie(command)
    if cookie:
        headers.append(Header(key="Cookie", value=cookie))

    body = None
    data = extract_data(command)
    if data:
        body = RequestBody(raw=data, language=BodyLanguage.JSON)

    return NormalizedRequest(
        name=name,
        method=method,
        url=url,
        headers=tuple(headers),
        body=body,
        auth=auth,
    )


def parse_curl_string(content: str, source: str = "<string>") -> ParseResult:
    """Parse every ``curl `` line in a block of text.

    Args:
        content: Text with one cURL command per line.
        source: Label used to attribute warnings.

    Returns:
        ParseResult with one request per cURL line, in line order.
    """
    result = ParseResult()
    index = 1
    for line in content.split("\n"):
        line = line.rstrip("\r")
        if not line.startswith(CURL_PREFIX):
            continue
        try:
            result.requests.append(parse_curl_command(line, index))
        except MalformedInputError as exc:
            result.warnings.append(ParseWarning(source=source, index=index, reason=str(exc)))
            LOG.warning(
                "curl_command_parse_failed",
                source=source,
                line_index=index,
                error=str(exc),
            )
            continue
        index += 1
    return result


def parse_curl_file(filepath: Path | str) -> ParseResult:
    """Parse a file containing one cURL command per line.

    Args:
        filepath: Path to the commands file.

    Returns:
        ParseResult with requests in line order.

    Raises:
        InputReadError: If the file cannot be opened or read.
    """
    filepath = Path(filepath)
    try:
        content = filepath.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise InputReadError(f"error reading cURL file {filepath}: {exc}") from exc

    result = parse_curl_string(content, source=str(filepath))
    LOG.info(
        "curl_file_parsed",
        filepath=str(filepath),
        requests=len(result.requests),
        warnings=len(result.warnings),
    )
    return result
