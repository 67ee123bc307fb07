"""Tests for the HTTP pipeline store (Connect JSON over httpx)."""

import base64
import json

import httpx
import pytest

from pipesync.config import RemoteConfig
from pipesync.errors import RemoteError
from pipesync.pipelines.models import Pipeline
from pipesync.remote.http_store import HttpPipelineStore

CONFIG = RemoteConfig(host="https://fleet.example.net", user="1234", token="secret")


def _store(handler) -> tuple[HttpPipelineStore, list[httpx.Request]]:
    """Build a store whose requests are answered by ``handler``."""
    seen: list[httpx.Request] = []

    def record(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    client = httpx.Client(
        base_url=CONFIG.host,
        auth=(CONFIG.user, CONFIG.token),
        transport=httpx.MockTransport(record),
    )
    return HttpPipelineStore(CONFIG, client=client), seen


def test_list_pipelines():
    payload = {
        "pipelines": [
            {"name": "alerts", "matchers": ["team=infra"], "contents": "a"},
            {"name": "bare", "contents": "b"},
        ]
    }
    store, seen = _store(lambda r: httpx.Response(200, json=payload))

    pipes = store.list()

    assert [p.name for p in pipes] == ["alerts", "bare"]
    assert pipes[0].matchers == ["team=infra"]
    assert pipes[1].matchers == []
    assert seen[0].method == "POST"
    assert seen[0].url.path == "/pipeline.v1.PipelineService/ListPipelines"
    assert json.loads(seen[0].content) == {}


def test_list_empty_response():
    store, _ = _store(lambda r: httpx.Response(200, json={}))
    assert store.list() == []


def test_requests_use_basic_auth():
    store, seen = _store(lambda r: httpx.Response(200, json={}))
    store.list()

    expected = base64.b64encode(b"1234:secret").decode()
    assert seen[0].headers["Authorization"] == f"Basic {expected}"


def test_create_update_delete_bodies():
    store, seen = _store(lambda r: httpx.Response(200, json={}))
    pipe = Pipeline(name="alerts", matchers=["a=1", "b=2"], contents="x", source="/tmp/alerts.alloy")

    store.create(pipe)
    store.update(pipe)
    store.delete("old")

    paths = [r.url.path.rsplit("/", 1)[-1] for r in seen]
    assert paths == ["CreatePipeline", "UpdatePipeline", "DeletePipeline"]
    expected = {"pipeline": {"name": "alerts", "matchers": ["a=1", "b=2"], "contents": "x"}}
    assert json.loads(seen[0].content) == expected
    assert json.loads(seen[1].content) == expected
    assert json.loads(seen[2].content) == {"name": "old"}


def test_connect_error_is_mapped():
    store, _ = _store(
        lambda r: httpx.Response(409, json={"code": "already_exists", "message": "pipeline exists"})
    )
    with pytest.raises(RemoteError) as exc:
        store.create(Pipeline(name="dup"))

    assert exc.value.operation == "CreatePipeline"
    assert exc.value.name == "dup"
    assert exc.value.code == "already_exists"
    assert exc.value.message == "pipeline exists"


def test_non_json_error_falls_back_to_status():
    store, _ = _store(lambda r: httpx.Response(502, text="bad gateway"))
    with pytest.raises(RemoteError) as exc:
        store.delete("x")

    assert exc.value.code == "http_502"
    assert exc.value.message == "bad gateway"


def test_transport_error_is_wrapped():
    def boom(request):
        raise httpx.ConnectError("connection refused", request=request)

    store, _ = _store(boom)
    with pytest.raises(RemoteError) as exc:
        store.list()
    assert isinstance(exc.value.__cause__, httpx.ConnectError)


def test_invalid_json_response():
    store, _ = _store(lambda r: httpx.Response(200, text="not json"))
    with pytest.raises(RemoteError):
        store.list()


def test_injected_client_is_not_closed():
    store, _ = _store(lambda r: httpx.Response(200, json={}))
    with store:
        store.list()
    assert not store._client.is_closed


def test_owned_client_is_closed():
    store = HttpPipelineStore(CONFIG)
    assert str(store._client.base_url).startswith("https://fleet.example.net")
    store.close()
    assert store._client.is_closed


def test_non_object_json_response():
    store, _ = _store(lambda r: httpx.Response(200, json=["alerts"]))
    with pytest.raises(RemoteError) as exc:
        store.list()
    assert "expected a JSON object" in exc.value.message
