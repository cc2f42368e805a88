"""Normalized request model shared by every parser.

Each parser (cURL, raw HTTP, Burp XML) produces ``NormalizedRequest``
objects. Once built, a request is immutable: the assembler stores it as-is
and serialization reads it without recomputing anything.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class BodyLanguage(str, Enum):
    """Language hint attached to a raw body for downstream tooling."""

    JSON = "json"
    XML = "xml"
    JAVASCRIPT = "javascript"
    HTML = "html"
    TEXT = "text"
    UNSET = "unset"


class AuthScheme(str, Enum):
    """Recognized Authorization header schemes."""

    BEARER = "bearer"
    BASIC = "basic"


@dataclass(frozen=True)
class QueryParam:
    """A single query-string parameter, stored without percent-decoding."""

    key: str
    value: str = ""


@dataclass(frozen=True)
class Header:
    """A request header. Duplicate keys are kept as separate entries."""

    key: str
    value: str
    type: str = "text"


@dataclass(frozen=True)
class RequestUrl:
    """Decomposed URL.

    Attributes:
        raw: Full URL text.
        protocol: Scheme without the ``://`` separator.
        host: Host split on ``.``, in order.
        path: Non-empty path segments, in order.
        query: Query parameters, in order.
    """

    raw: str = ""
    protocol: str = ""
    host: tuple[str, ...] = ()
    path: tuple[str, ...] = ()
    query: tuple[QueryParam, ...] = ()

    @property
    def resource_name(self) -> str | None:
        """Return the last path segment, or None if there is no path."""
        return self.path[-1] if self.path else None


@dataclass(frozen=True)
class RequestBody:
    """Raw request body with its language hint. Mode is always ``raw``."""

    raw: str
    language: BodyLanguage = BodyLanguage.UNSET
    mode: str = "raw"


@dataclass(frozen=True)
class AuthDetail:
    """Key/value/type triple describing an auth credential."""

    key: str
    value: str
    type: str = "string"


@dataclass(frozen=True)
class RequestAuth:
    """Auth descriptor derived from an Authorization header."""

    scheme: AuthScheme
    detail: AuthDetail


@dataclass(frozen=True)
class NormalizedRequest:
    """One parsed HTTP request, independent of its source format."""

    name: str
    method: str = "GET"
    url: RequestUrl = field(default_factory=RequestUrl)
    headers: tuple[Header, ...] = ()
    body: RequestBody | None = None
    auth: RequestAuth | None = None

    def header_value(self, key: str) -> str | None:
        """Return the first header value matching ``key`` case-insensitively."""
        wanted = key.lower()
        for header in self.headers:
            if header.key.lower() == wanted:
                return header.value
        return None


@dataclass
class ParseWarning:
    """Non-fatal failure attributed to a file and, where known, an item.

    Attributes:
        source: File path (or other label) the failure came from.
        index: One-based item or line index, or None for whole-file failures.
        reason: Human-readable description of what went wrong.
    """

    source: str
    index: int | None
    reason: str

    def __str__(self) -> str:
        if self.index is None:
            return f"{self.source}: {self.reason}"
        return f"{self.source} #{self.index}: {self.reason}"


@dataclass
class ParseResult:
    """Result of parsing one or more inputs.

    Supports partial success: items that fail are recorded as warnings while
    valid requests are still returned, in encounter order.

    Attributes:
        requests: Successfully parsed requests, in original order.
        warnings: Failures for items or files that could not be processed.
    """

    requests: list[NormalizedRequest] = field(default_factory=list)
    warnings: list[ParseWarning] = field(default_factory=list)

    @property
    def has_warnings(self) -> bool:
        """Return True if any item or file failed."""
        return bool(self.warnings)

    def extend(self, other: ParseResult) -> None:
        """Append another result's requests and warnings, preserving order."""
        self.requests.extend(other.requests)
        self.warnings.extend(other.warnings)
