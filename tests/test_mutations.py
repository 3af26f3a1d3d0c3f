"""Unit tests for insert / insert_multiple / delete envelopes."""

import json

import httpx
import pytest

from bobuild import (
    APIStatusError,
    DecodeError,
    DeleteResponse,
    InsertMultipleResponse,
    InsertResponse,
)


def _respond(body: dict, status: int = 200):
    return lambda request: httpx.Response(status, json=body)


class TestInsert:
    def test_insert_decodes_envelope(self, make_client):
        client, server = make_client(
            _respond({"success": True, "error": False, "object": "user", "id": 17})
        )

        result = client.insert("/users/insert", {"name": "Bob"})

        assert isinstance(result, InsertResponse)
        assert result == InsertResponse(success=True, error=False, object="user", id=17)
        assert result.ok

        request = server.requests[0]
        assert request.method == "POST"
        assert request.url.path == "/_api/users/insert"
        assert request.headers["Content-Type"] == "application/json"
        assert json.loads(request.content) == {"name": "Bob"}

    def test_insert_multiple_decodes_ids(self, make_client):
        client, server = make_client(
            _respond({"success": True, "error": False, "object": "user", "id": [4, 5, 6]})
        )

        result = client.insert_multiple(
            "/users/insert", [{"name": "A"}, {"name": "B"}, {"name": "C"}]
        )

        assert isinstance(result, InsertMultipleResponse)
        assert result.id == [4, 5, 6]
        assert result.object == "user"
        assert len(json.loads(server.requests[0].content)) == 3

    def test_insert_missing_fields_default(self, make_client):
        client, _ = make_client(_respond({"success": True}))
        result = client.insert("/users/insert", {"name": "Bob"})
        assert result.id == 0
        assert result.object == ""
        assert result.error is False

    def test_insert_wrong_id_type(self, make_client):
        client, _ = make_client(_respond({"success": True, "id": "seventeen"}))
        with pytest.raises(DecodeError):
            client.insert("/users/insert", {"name": "Bob"})

    def test_insert_multiple_scalar_id_rejected(self, make_client):
        client, _ = make_client(_respond({"success": True, "id": 4}))
        with pytest.raises(DecodeError):
            client.insert_multiple("/users/insert", [{"name": "A"}])


class TestDelete:
    def test_delete_without_payload(self, make_client):
        client, server = make_client(_respond({"success": True, "error": False}))

        result = client.delete("/users/17/delete")

        assert isinstance(result, DeleteResponse)
        assert result.ok
        request = server.requests[0]
        assert request.method == "POST"
        assert request.url.path == "/_api/users/17/delete"
        assert request.content == b""

    def test_delete_with_payload(self, make_client):
        client, server = make_client(_respond({"success": True, "error": False}))

        client.delete("/users/delete", {"id": 17})

        assert json.loads(server.requests[0].content) == {"id": 17}

    def test_delete_ignores_extra_fields(self, make_client):
        client, _ = make_client(
            _respond({"success": True, "error": False, "object": "user", "id": 17})
        )
        result = client.delete("/users/17/delete")
        assert result == DeleteResponse(success=True, error=False)


class TestBusinessErrors:
    """A 200 envelope with error=true is returned to the caller, not raised."""

    def test_error_envelope_is_returned(self, make_client):
        client, _ = make_client(
            _respond({"success": False, "error": True, "object": "user", "id": 0})
        )

        result = client.insert("/users/insert", {"name": ""})

        assert result.error is True
        assert result.success is False
        assert not result.ok

    def test_delete_error_envelope_is_returned(self, make_client):
        client, _ = make_client(_respond({"success": False, "error": True}))
        assert not client.delete("/users/999/delete").ok

    def test_http_error_still_raises(self, make_client):
        client, _ = make_client(_respond({"success": False, "error": True}, status=403))
        with pytest.raises(APIStatusError) as exc_info:
            client.insert("/users/insert", {"name": "Bob"})
        assert '"error":true' in exc_info.value.body.replace(" ", "")
