from __future__ import annotations

import pytest
import requests

from hirely.errors import RemoteUnavailable
from hirely.store.remote import RemoteStoreClient
from tests.conftest import FakeSession


@pytest.fixture
def client(session) -> RemoteStoreClient:
    return RemoteStoreClient("http://store.test/", timeout=8, session=session)


def test_list_returns_records_and_passes_timeout(client, session):
    session.route("GET", "jobs", [{"id": "r1"}, {"id": "r2"}])
    assert client.entity("jobs").list() == [{"id": "r1"}, {"id": "r2"}]
    assert session.calls == [("GET", "jobs", None, 8)]


def test_timeout_becomes_remote_unavailable(client, session):
    session.fail("GET", "jobs", requests.Timeout("slow"))
    with pytest.raises(RemoteUnavailable) as info:
        client.entity("jobs").list()
    assert "timed out after 8s" in str(info.value)
    assert info.value.__cause__ is None


def test_connection_error_becomes_remote_unavailable(client, session):
    session.down = True
    with pytest.raises(RemoteUnavailable) as info:
        client.entity("applications").create({"id": "a1"})
    assert info.value.method == "POST"
    assert info.value.path == "applications"


def test_non_2xx_becomes_remote_unavailable(client, session):
    session.route("PUT", "applications/a1", {"error": "DB error"}, status=500)
    with pytest.raises(RemoteUnavailable) as info:
        client.entity("applications").update("a1", {"status": "reviewed"})
    assert info.value.status == 500


def test_non_json_body_becomes_remote_unavailable(client, session):
    session.route("GET", "jobs", raw="<html>gateway</html>")
    with pytest.raises(RemoteUnavailable):
        client.entity("jobs").list()


def test_list_rejects_non_list_payload(client, session):
    session.route("GET", "jobs", {"jobs": []})
    with pytest.raises(RemoteUnavailable):
        client.entity("jobs").list()


def test_get_missing_record_is_none(client, session):
    assert client.entity("profiles").get("u1") is None
    session.route("GET", "profiles/u2", None)
    assert client.entity("profiles").get("u2") is None


def test_get_and_delete_hit_keyed_routes(client, session):
    session.route("GET", "profiles/u1", {"uid": "u1", "role": "recruiter"})
    assert client.entity("profiles").get("u1") == {"uid": "u1", "role": "recruiter"}
    client.entity("jobs").delete("j9")
    assert session.calls[-1][:2] == ("DELETE", "jobs/j9")


def test_message_routes(client, session):
    session.route("GET", "messages/a1", [{"id": "m1"}])
    assert client.list_messages("a1") == [{"id": "m1"}]
    client.append_message("a1", {"id": "m2"})
    client.update_message("a1", "m2", {"id": "m2", "text": "hi"})
    assert [c[:2] for c in session.calls[1:]] == [("POST", "messages/a1"), ("PUT", "messages/a1/m2")]


def test_close_closes_session():
    session = FakeSession()
    RemoteStoreClient("http://x", session=session).close()
    assert session.closed
