"""Authorization header recognition."""

from __future__ import annotations

from traffic2postman.models import AuthDetail, AuthScheme, RequestAuth

# Prefix (including the trailing space) -> (scheme, detail key)
_AUTH_PREFIXES: tuple[tuple[str, AuthScheme, str], ...] = (
    ("Bearer ", AuthScheme.BEARER, "token"),
    ("Basic ", AuthScheme.BASIC, "password"),
)


def extract_auth(key: str, value: str) -> RequestAuth | None:
    """Build an auth descriptor from an Authorization header.

    Prefix matching is case-sensitive; the header name match is not.
    Unrecognized schemes return None and the caller keeps the header as-is.

    Args:
        key: Header name.
        value: Header value.

    Returns:
        RequestAuth for ``Bearer``/``Basic`` credentials, otherwise None.
    """
    if key.lower() != "authorization":
        return None

    for prefix, scheme, detail_key in _AUTH_PREFIXES:
        if value.startswith(prefix):
            return RequestAuth(
                scheme=scheme,
                detail=AuthDetail(key=detail_key, value=value.removeprefix(prefix)),
            )
    return None
