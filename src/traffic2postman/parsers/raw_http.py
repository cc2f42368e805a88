"""Raw HTTP/1.1 request text parser.

Parses the request text stored by Burp (request line, headers, blank line,
body) into a ``NormalizedRequest``. Lines are walked once through three
states: request line, headers, then body after the first blank line.
"""

from __future__ import annotations

from enum import Enum

from traffic2postman.exceptions import EmptyRequestError, InvalidRequestLineError
from traffic2postman.logging import get_logger
from traffic2postman.models import (
    Header,
    NormalizedRequest,
    QueryParam,
    RequestAuth,
    RequestBody,
    RequestUrl,
)
from traffic2postman.parsers.auth import extract_auth
from traffic2postman.parsers.body import classify_body
from traffic2postman.parsers.url import parse_query_string, split_host, split_path

LOG = get_logger(__name__)

DEFAULT_PROTOCOL = "https"


class _State(Enum):
    REQUEST_LINE = "request_line"
    HEADERS = "headers"
    BODY = "body"


def _format_query(params: tuple[QueryParam, ...]) -> str:
    """Rebuild a query string; parameters with empty values render as bare keys."""
    return "&".join(f"{p.key}={p.value}" if p.value else p.key for p in params)


def reconstruct_url(target: str, host: str) -> RequestUrl:
    """Build a full URL from a request target and the Host header.

    A target containing ``https://`` or ``http://`` anywhere is treated as
    an absolute URI: the scheme prefix is stripped (when it is a prefix) and
    the host is re-read from the text before the first ``/``, replacing the
    Host header. Any other target is a path on ``https://{host}``.

    Args:
        target: Request-target from the request line.
        host: Host header value, or empty string.

    Returns:
        RequestUrl whose ``raw`` is ``protocol://host[/path][?query]``.
    """
    protocol = DEFAULT_PROTOCOL
    for scheme in ("https", "http"):
        marker = f"{scheme}://"
        if marker in target:
            protocol = scheme
            host, sep, rest = target.removeprefix(marker).partition("/")
            target = f"/{rest}" if sep else "/"
            break

    path, has_query, query = target.partition("?")
    params = parse_query_string(query) if has_query else ()
    segments = split_path(path)

    raw = f"{protocol}://{host}"
    if segments:
        raw += "/" + "/".join(segments)
    if params:
        raw += "?" + _format_query(params)

    return RequestUrl(
        raw=raw,
        protocol=protocol,
        host=split_host(host),
        path=segments,
        query=params,
    )


def parse_http_request(text: str, index: int, name: str = "") -> NormalizedRequest:
    """Parse raw HTTP request text.

    The computed name (``METHOD last-segment`` or ``METHOD host``) replaces
    ``name`` whenever a path or host is known; ``name`` is only kept when
    neither is, and ``Request {index}`` is used if it is empty too.

    Args:
        text: Request text: request line, headers, blank line, body.
        index: One-based item index, used only for the name fallback.
        name: Display name suggested by the caller.

    Returns:
        The normalized request.

    Raises:
        EmptyRequestError: If ``text`` is empty or whitespace only.
        InvalidRequestLineError: If the first line lacks a method and target.
    """
    if not text.strip():
        raise EmptyRequestError("empty request")

    state = _State.REQUEST_LINE
    method = target = host = ""
    content_type: str | None = None
    headers: list[Header] = []
    auth: RequestAuth | None = None
    body_lines: list[str] = []

    for line in text.split("\n"):
        if state is _State.REQUEST_LINE:
            request_line = line.strip()
            parts = request_line.split(" ")
            if len(parts) < 2:
                raise InvalidRequestLineError(request_line)
            method, target = parts[0], parts[1]
            state = _State.HEADERS
        elif state is _State.HEADERS:
            stripped = line.strip()
            if not stripped:
                state = _State.BODY
                continue
            key, sep, value = stripped.partition(":")
            if not sep:
                continue
            header = Header(key=key.strip(), value=value.strip())
            headers.append(header)
            lowered = header.key.lower()
            if lowered == "host":
                host = header.value
            elif lowered == "content-type" and content_type is None:
                content_type = header.value
            auth = extract_auth(header.key, header.value) or auth
        else:
            body_lines.append(line)

    body = None
    raw_body = "\n".join(body_lines)
    if raw_body:
        body = RequestBody(raw=raw_body, language=classify_body(content_type))

    url = reconstruct_url(target, host)
    if url.resource_name:
        name = f"{method} {url.resource_name}"
    elif "".join(url.host):
        name = f"{method} {'.'.join(url.host)}"
    elif not name:
        name = f"Request {index}"

    LOG.debug("http_request_parsed", index=index, method=method, url=url.raw)
    return NormalizedRequest(
        name=name,
        method=method,
        url=url,
        headers=tuple(headers),
        body=body,
        auth=auth,
    )
