"""Absolute URL decomposition into Postman URL parts.

Tokens are stored exactly as they appear: no percent-decoding, no host
validation. Looser than ``urllib.parse``, so the raw
text captured from a tool round-trips unchanged.
"""

from __future__ import annotations

from traffic2postman.exceptions import MalformedUrlError
from traffic2postman.models import QueryParam, RequestUrl

SCHEME_SEPARATOR = "://"


def split_path(path: str) -> tuple[str, ...]:
    """Split a path on ``/``, dropping empty segments."""
    return tuple(segment for segment in path.split("/") if segment)


def parse_query_string(query: str) -> tuple[QueryParam, ...]:
    """Parse ``a=1&b&c=x=y`` into ordered parameters.

    Each pair is split on its first ``=``; a pair without ``=`` gets an
    empty value.

    Args:
        query: Query string without the leading ``?``.

    Returns:
        Parameters in their original order.
    """
    params: list[QueryParam] = []
    for pair in query.split("&"):
        key, _, value = pair.partition("=")
        params.append(QueryParam(key=key, value=value))
    return tuple(params)


def split_host(host: str) -> tuple[str, ...]:
    """Split a host on ``.`` into labels."""
    return tuple(host.split("."))


def decompose_url(url: str) -> RequestUrl:
    """Split an absolute URL into protocol, host labels, path and query.

    The host is everything up to the first ``/`` after the scheme; the query
    is whatever follows the first ``?`` in the remainder.

    Args:
        url: URL of the form ``scheme://host[/path][?query]``.

    Returns:
        RequestUrl with ``raw`` set to the input unchanged.

    Raises:
        MalformedUrlError: If the URL has no ``://`` separator.
    """
    if SCHEME_SEPARATOR not in url:
        raise MalformedUrlError(f"invalid URL format: {url}")

    protocol, remainder = url.split(SCHEME_SEPARATOR, 1)
    host, _, path_and_query = remainder.partition("/")
    path, has_query, query = path_and_query.partition("?")

    return RequestUrl(
        raw=url,
        protocol=protocol,
        host=split_host(host),
        path=split_path(path),
        query=parse_query_string(query) if has_query else (),
    )
