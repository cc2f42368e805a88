"""Postman collection assembly and (de)serialization.

Requests are appended in the order they were encountered and written out
as a Postman collection v2.1.0 document:

    {
      "info": {"name", "description", "schema", "_postman_id", "updatedAt"},
      "item": [{"name", "request": {"method", "header", "body"?, "url", "auth"?}}]
    }
"""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any

from traffic2postman.config import get_settings
from traffic2postman.exceptions import CollectionSealedError, OutputWriteError
from traffic2postman.logging import get_logger
from traffic2postman.models import (
    AuthDetail,
    AuthScheme,
    BodyLanguage,
    Header,
    NormalizedRequest,
    QueryParam,
    RequestAuth,
    RequestBody,
    RequestUrl,
)

LOG = get_logger(__name__)


class InputMode(str, Enum):
    """Which kind of input a run was started with."""

    CURL = "curl"
    BURP = "burp"


_MODE_METADATA: dict[InputMode, tuple[str, str]] = {
    InputMode.CURL: (
        "cURL API Collection",
        "The POSTMAN file was generated from cURL commands",
    ),
    InputMode.BURP: (
        "Burp XML API Collection",
        "The POSTMAN file was generated from Burp XML files",
    ),
}


@dataclass(frozen=True)
class CollectionInfo:
    """Collection-level metadata, fixed when a run starts."""

    name: str
    description: str
    schema_url: str
    postman_id: str
    updated_at: datetime

    @classmethod
    def for_mode(cls, mode: InputMode, schema_url: str | None = None) -> CollectionInfo:
        """Create metadata for a new run with a fresh id and the current time."""
        name, description = _MODE_METADATA[mode]
        return cls(
            name=name,
            description=description,
            schema_url=schema_url or get_settings().schema_url,
            postman_id=str(uuid.uuid4()),
            updated_at=datetime.now().astimezone(),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "schema": self.schema_url,
            "_postman_id": self.postman_id,
            "updatedAt": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CollectionInfo:
        """Rebuild metadata from an ``info`` block; a missing ``updatedAt`` means now."""
        updated_at = data.get("updatedAt")
        return cls(
            name=data.get("name", ""),
            description=data.get("description", ""),
            schema_url=data.get("schema", ""),
            postman_id=data.get("_postman_id", ""),
            updated_at=(
                datetime.fromisoformat(updated_at) if updated_at else datetime.now().astimezone()
            ),
        )


def request_to_dict(request: NormalizedRequest) -> dict[str, Any]:
    """Serialize a request as a Postman collection item.

    ``body`` and ``auth`` are omitted when absent, ``query`` when empty and
    ``body.options`` when the language is unset.
    """
    payload: dict[str, Any] = {
        "method": request.method,
        "header": [{"key": h.key, "value": h.value, "type": h.type} for h in request.headers],
    }

    if request.body is not None:
        body: dict[str, Any] = {"mode": request.body.mode, "raw": request.body.raw}
        if request.body.language is not BodyLanguage.UNSET:
            body["options"] = {"raw": {"language": request.body.language.value}}
        payload["body"] = body

    url: dict[str, Any] = {
        "raw": request.url.raw,
        "protocol": request.url.protocol,
        "host": list(request.url.host),
        "path": list(request.url.path),
    }
    if request.url.query:
        url["query"] = [{"key": q.key, "value": q.value} for q in request.url.query]
    payload["url"] = url

    if request.auth is not None:
        scheme = request.auth.scheme.value
        detail = request.auth.detail
        payload["auth"] = {
            "type": scheme,
            scheme: [{"key": detail.key, "value": detail.value, "type": detail.type}],
        }

    return {"name": request.name, "request": payload}


def _language_from(body: dict[str, Any]) -> BodyLanguage:
    language = body.get("options", {}).get("raw", {}).get("language")
    try:
        return BodyLanguage(language)
    except ValueError:
        return BodyLanguage.UNSET


def request_from_dict(item: dict[str, Any]) -> NormalizedRequest:
    """Rebuild a request from a serialized Postman collection item."""
    payload = item.get("request", {})

    body = None
    if "body" in payload:
        raw_body = payload["body"]
        body = RequestBody(
            raw=raw_body.get("raw", ""),
            language=_language_from(raw_body),
            mode=raw_body.get("mode", "raw"),
        )

    auth = None
    if "auth" in payload:
        scheme = AuthScheme(payload["auth"]["type"])
        detail = payload["auth"][scheme.value][0]
        auth = RequestAuth(
            scheme=scheme,
            detail=AuthDetail(
                key=detail["key"],
                value=detail["value"],
                type=detail.get("type", "string"),
            ),
        )

    url = payload.get("url", {})
    return NormalizedRequest(
        name=item.get("name", ""),
        method=payload.get("method", "GET"),
        url=RequestUrl(
            raw=url.get("raw", ""),
            protocol=url.get("protocol", ""),
            host=tuple(url.get("host", [])),
            path=tuple(url.get("path", [])),
            query=tuple(
                QueryParam(key=q["key"], value=q.get("value", "")) for q in url.get("query", [])
            ),
        ),
        headers=tuple(
            Header(key=h["key"], value=h["value"], type=h.get("type", "text"))
            for h in payload.get("header", [])
        ),
        body=body,
        auth=auth,
    )


class CollectionAssembler:
    """Accumulates normalized requests into a Postman collection.

    Requests are kept in append order with no deduplication or sorting.
    Once serialization begins (``dumps``/``write_collection``) the
    collection is sealed and further appends raise ``CollectionSealedError``.
    """

    def __init__(self, info: CollectionInfo) -> None:
        self.info = info
        self._items: list[NormalizedRequest] = []
        self._sealed = False

    @classmethod
    def for_mode(cls, mode: InputMode) -> CollectionAssembler:
        return cls(CollectionInfo.for_mode(mode))

    @property
    def items(self) -> tuple[NormalizedRequest, ...]:
        return tuple(self._items)

    @property
    def sealed(self) -> bool:
        return self._sealed

    def __len__(self) -> int:
        return len(self._items)

    def append(self, request: NormalizedRequest) -> None:
        if self._sealed:
            raise CollectionSealedError("collection has already been serialized")
        self._items.append(request)

    def extend(self, requests: list[NormalizedRequest]) -> None:
        for request in requests:
            self.append(request)

    def to_dict(self) -> dict[str, Any]:
        """Return the collection as a Postman v2.1.0 document."""
        return {
            "info": self.info.to_dict(),
            "item": [request_to_dict(r) for r in self._items],
        }

    def dumps(self, indent: int | None = None) -> str:
        """Seal the collection and render it as JSON text."""
        self._sealed = True
        if indent is None:
            indent = get_settings().json_indent
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)


def collection_from_dict(data: dict[str, Any]) -> CollectionAssembler:
    """Rebuild an (unsealed) collection from a Postman v2.1.0 document."""
    assembler = CollectionAssembler(CollectionInfo.from_dict(data.get("info", {})))
    assembler.extend([request_from_dict(item) for item in data.get("item", [])])
    return assembler


def write_collection(assembler: CollectionAssembler, output_path: Path | str) -> Path:
    """Write the collection JSON to ``output_path``.

    Returns:
        The path written.

    Raises:
        OutputWriteError: If the file cannot be written.
    """
    output_path = Path(output_path)
    text = assembler.dumps()
    try:
        output_path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise OutputWriteError(f"error writing {output_path}: {exc}") from exc

    LOG.info("collection_written", filepath=str(output_path), items=len(assembler))
    return output_path
