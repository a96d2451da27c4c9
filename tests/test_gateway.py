"""Tests for the API client and gateway strategies using httpx.MockTransport."""

import json

import httpx
import pytest

from todopro.config import Settings
from todopro.core.api import TodoApiClient
from todopro.core.exceptions import GatewayError, RemoteFailure
from todopro.core.gateway import (
    FallbackGateway,
    LocalSyntheticStrategy,
    RemoteStrategy,
    build_gateway,
)
from todopro.core.models import Task
from todopro.core.store import TaskStore

BASE_URL = "http://api.test/api"


def make_client(handler):
    return TodoApiClient(BASE_URL, transport=httpx.MockTransport(handler))


def test_client_hits_the_documented_endpoints():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.path))
        if request.method == "DELETE":
            return httpx.Response(200, json={"deleted": True})
        if request.method in ("POST", "PUT"):
            body = json.loads(request.content)
            return httpx.Response(200, json=dict(body, id="9"))
        return httpx.Response(200, json=[])

    with make_client(handler) as client:
        client.get_todos()
        client.get_todo("9")
        client.create_todo({"title": "A"})
        client.update_todo("9", {"status": "completed"})
        client.delete_todo("9")
        client.get_todos_in_range("2024-01-01", "2024-01-31")
        client.get_categories()
        client.get_stats()

    assert seen == [
        ("GET", "/api/todos"),
        ("GET", "/api/todos/9"),
        ("POST", "/api/todos"),
        ("PUT", "/api/todos/9"),
        ("DELETE", "/api/todos/9"),
        ("GET", "/api/todos/range/2024-01-01/2024-01-31"),
        ("GET", "/api/categories"),
        ("GET", "/api/stats"),
    ]


def test_error_status_becomes_remote_failure():
    def handler(request):
        return httpx.Response(404, json={"error": "Todo not found"})

    with make_client(handler) as client:
        with pytest.raises(RemoteFailure) as excinfo:
            client.get_todo("1")
    assert excinfo.value.status_code == 404
    assert "Todo not found" in str(excinfo.value)


def test_transport_error_becomes_remote_failure():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with make_client(handler) as client:
        with pytest.raises(RemoteFailure):
            client.get_todos()


def test_undecodable_body_becomes_remote_failure():
    def handler(request):
        return httpx.Response(200, content=b"<html>oops</html>")

    with make_client(handler) as client:
        with pytest.raises(RemoteFailure):
            client.get_todos()


def test_remote_strategy_validates_payload_shape():
    def handler(request):
        if request.url.path.endswith("/todos"):
            return httpx.Response(200, json={"not": "a list"})
        return httpx.Response(200, json={"title": "missing id"})

    strategy = RemoteStrategy(make_client(handler))
    with pytest.raises(RemoteFailure):
        strategy.list_tasks()
    with pytest.raises(RemoteFailure):
        strategy.get_task("1")


def test_remote_create_never_sends_an_id():
    bodies = []

    def handler(request):
        body = json.loads(request.content)
        bodies.append(body)
        return httpx.Response(201, json=dict(body, id=42, created_at="2024-03-01 10:00:00"))

    task = RemoteStrategy(make_client(handler)).create_task({"id": "local", "title": "A"})
    assert "id" not in bodies[0]
    assert task.id == "42"


def test_fallback_gateway_reports_provenance(clock):
    def handler(request):
        return httpx.Response(500, json={"error": "Internal server error"})

    gateway = FallbackGateway(RemoteStrategy(make_client(handler)), LocalSyntheticStrategy(clock))

    result = gateway.list_tasks()
    assert result.ok
    assert result.source == "local"
    assert "Internal server error" in result.fallback_reason
    assert len(result.value) == 3

    stats = gateway.fetch_stats()
    assert not stats.ok
    assert stats.source == "remote"


def test_fallback_gateway_prefers_remote(clock):
    def handler(request):
        return httpx.Response(200, json=[{"id": 1, "title": "Remote task"}])

    gateway = FallbackGateway(RemoteStrategy(make_client(handler)), LocalSyntheticStrategy(clock))
    result = gateway.list_tasks()
    assert result.source == "remote"
    assert result.fallback_reason is None
    assert result.value[0].id == "1"


def test_local_strategy_update_needs_current_state(clock):
    local = LocalSyntheticStrategy(clock)
    with pytest.raises(GatewayError):
        local.update_task("1", {"title": "A"})

    updated = local.update_task("1", {"status": "completed"}, Task(id="1", title="A"))
    assert updated.completed_at == clock().isoformat()


def test_build_gateway_offline_skips_remote():
    gateway = build_gateway(Settings(offline=True))
    assert isinstance(gateway.primary, LocalSyntheticStrategy)
    assert gateway.fallback is None


def test_build_gateway_online_wires_remote_then_local():
    gateway = build_gateway(Settings(offline=False, api_base_url="http://example.invalid/api"))
    assert isinstance(gateway.primary, RemoteStrategy)
    assert gateway.primary.client.base_url == "http://example.invalid/api"
    assert isinstance(gateway.fallback, LocalSyntheticStrategy)
    gateway.close()
    assert gateway.primary.client._client.is_closed


def test_store_close_releases_the_http_client(clock):
    client = make_client(lambda request: httpx.Response(200, json=[]))
    gateway = FallbackGateway(RemoteStrategy(client), LocalSyntheticStrategy(clock))

    with TaskStore(gateway, clock=clock) as store:
        assert store.load() == []
        assert not client._client.is_closed
    assert client._client.is_closed
