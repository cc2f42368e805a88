"""Tests for collection assembly and Postman serialization."""

from __future__ import annotations

import json
import uuid
from datetime import datetime
from pathlib import Path

import pytest

from traffic2postman.collection import (
    CollectionAssembler,
    CollectionInfo,
    InputMode,
    collection_from_dict,
    request_from_dict,
    request_to_dict,
    write_collection,
)
from traffic2postman.config import POSTMAN_SCHEMA_URL
from traffic2postman.exceptions import CollectionSealedError, OutputWriteError
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
from traffic2postman.parsers.curl import parse_curl_string


def _full_request() -> NormalizedRequest:
    return NormalizedRequest(
        name="POST widgets",
        method="POST",
        url=RequestUrl(
            raw="https://api.example.com/v1/widgets?x=1",
            protocol="https",
            host=("api", "example", "com"),
            path=("v1", "widgets"),
            query=(QueryParam("x", "1"),),
        ),
        headers=(Header("Content-Type", "application/json"), Header("X-A", "1")),
        body=RequestBody(raw='{"a":1}', language=BodyLanguage.JSON),
        auth=RequestAuth(AuthScheme.BEARER, AuthDetail(key="token", value="abc123")),
    )


class TestCollectionInfo:
    """Tests for collection-level metadata."""

    def test_curl_mode(self) -> None:
        info = CollectionInfo.for_mode(InputMode.CURL)

        assert info.name == "cURL API Collection"
        assert info.description == "The POSTMAN file was generated from cURL commands"
        assert info.schema_url == POSTMAN_SCHEMA_URL
        uuid.UUID(info.postman_id)

    def test_burp_mode(self) -> None:
        info = CollectionInfo.for_mode(InputMode.BURP)

        assert info.name == "Burp XML API Collection"
        assert info.description == "The POSTMAN file was generated from Burp XML files"

    def test_fresh_id_per_run(self) -> None:
        first = CollectionInfo.for_mode(InputMode.CURL)
        second = CollectionInfo.for_mode(InputMode.CURL)
        assert first.postman_id != second.postman_id

    def test_updated_at_is_timezone_aware(self) -> None:
        assert CollectionInfo.for_mode(InputMode.CURL).updated_at.tzinfo is not None

    def test_schema_url_from_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TRAFFIC2POSTMAN_SCHEMA_URL", "https://example.com/schema.json")
        from traffic2postman.config import reset_settings

        reset_settings()
        info = CollectionInfo.for_mode(InputMode.CURL)
        assert info.schema_url == "https://example.com/schema.json"


class TestRequestToDict:
    """Tests for the Postman item shape."""

    def test_full_item(self) -> None:
        item = request_to_dict(_full_request())

        assert item == {
            "name": "POST widgets",
            "request": {
                "method": "POST",
                "header": [
                    {"key": "Content-Type", "value": "application/json", "type": "text"},
                    {"key": "X-A", "value": "1", "type": "text"},
                ],
                "body": {
                    "mode": "raw",
                    "raw": '{"a":1}',
                    "options": {"raw": {"language": "json"}},
                },
                "url": {
                    "raw": "https://api.example.com/v1/widgets?x=1",
                    "protocol": "https",
                    "host": ["api", "example", "com"],
                    "path": ["v1", "widgets"],
                    "query": [{"key": "x", "value": "1"}],
                },
                "auth": {
                    "type": "bearer",
                    "bearer": [{"key": "token", "value": "abc123", "type": "string"}],
                },
            },
        }

    def test_optional_fields_omitted(self) -> None:
        item = request_to_dict(NormalizedRequest(name="GET root"))
        request = item["request"]

        assert "body" not in request
        assert "auth" not in request
        assert "query" not in request["url"]
        assert request["header"] == []

    def test_unset_language_has_no_options(self) -> None:
        request = NormalizedRequest(name="x", body=RequestBody(raw="data"))
        assert request_to_dict(request)["request"]["body"] == {"mode": "raw", "raw": "data"}

    def test_basic_auth_key(self) -> None:
        request = NormalizedRequest(
            name="x",
            auth=RequestAuth(AuthScheme.BASIC, AuthDetail(key="password", value="xyz==")),
        )
        auth = request_to_dict(request)["request"]["auth"]
        assert auth == {
            "type": "basic",
            "basic": [{"key": "password", "value": "xyz==", "type": "string"}],
        }


class TestRoundTrip:
    """Serialize then deserialize reproduces the requests."""

    def test_request_round_trip(self) -> None:
        original = _full_request()
        assert request_from_dict(request_to_dict(original)) == original

    def test_collection_round_trip(self) -> None:
        assembler = CollectionAssembler.for_mode(InputMode.BURP)
        assembler.extend([_full_request(), NormalizedRequest(name="GET root")])

        rebuilt = collection_from_dict(json.loads(assembler.dumps()))

        assert rebuilt.items == assembler.items
        assert rebuilt.info == assembler.info

    def test_unknown_language_becomes_unset(self) -> None:
        item = {"name": "x", "request": {"method": "GET", "body": {"mode": "raw", "raw": "a"}}}
        request = request_from_dict(item)
        assert request.body == RequestBody(raw="a", language=BodyLanguage.UNSET)


class TestCollectionAssembler:
    """Tests for ordering and sealing."""

    def test_order_preserved_without_dedup(self) -> None:
        assembler = CollectionAssembler.for_mode(InputMode.CURL)
        requests = [
            NormalizedRequest(name="B"),
            NormalizedRequest(name="A"),
            NormalizedRequest(name="B"),
        ]
        assembler.extend(requests)

        assert [r.name for r in assembler.items] == ["B", "A", "B"]
        assert len(assembler) == 3

    def test_document_shape(self) -> None:
        assembler = CollectionAssembler.for_mode(InputMode.CURL)
        data = assembler.to_dict()

        assert set(data) == {"info", "item"}
        assert set(data["info"]) == {"name", "description", "schema", "_postman_id", "updatedAt"}
        assert data["item"] == []

    def test_append_after_dumps_raises(self) -> None:
        assembler = CollectionAssembler.for_mode(InputMode.CURL)
        assembler.dumps()

        assert assembler.sealed
        with pytest.raises(CollectionSealedError):
            assembler.append(NormalizedRequest(name="late"))

    def test_dumps_indent_from_settings(self) -> None:
        text = CollectionAssembler.for_mode(InputMode.CURL).dumps()
        assert text.startswith('{\n  "info"')

    def test_idempotent_items(self) -> None:
        """Same input twice yields identical item arrays; only metadata differs."""
        content = 'curl -X POST -d "x" https://example.com/a\ncurl https://example.com/b\n'
        first = CollectionAssembler.for_mode(InputMode.CURL)
        second = CollectionAssembler.for_mode(InputMode.CURL)
        first.extend(parse_curl_string(content).requests)
        second.extend(parse_curl_string(content).requests)

        assert first.to_dict()["item"] == second.to_dict()["item"]
        assert first.info.postman_id != second.info.postman_id


class TestWriteCollection:
    """Tests for writing the collection to disk."""

    def test_writes_json(self, tmp_path: Path) -> None:
        assembler = CollectionAssembler.for_mode(InputMode.CURL)
        assembler.append(_full_request())

        path = write_collection(assembler, tmp_path / "out.json")

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["item"][0]["name"] == "POST widgets"
        assert assembler.sealed

    def test_unwritable_path(self, tmp_path: Path) -> None:
        assembler = CollectionAssembler.for_mode(InputMode.CURL)
        with pytest.raises(OutputWriteError):
            write_collection(assembler, tmp_path / "missing-dir" / "out.json")


class TestCollectionFromDict:
    def test_empty_document(self) -> None:
        assembler = collection_from_dict({})

        assert len(assembler) == 0
        assert assembler.info.name == ""
        assert assembler.info.updated_at.tzinfo is not None

    def test_missing_updated_at_uses_current_time(self) -> None:
        before = datetime.now().astimezone()

        info = CollectionInfo.from_dict({"name": "Imported", "_postman_id": "abc"})

        assert info.name == "Imported"
        assert info.postman_id == "abc"
        assert info.updated_at >= before
