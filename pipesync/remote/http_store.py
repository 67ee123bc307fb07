"""HTTP pipeline store for the fleet-management service.

Speaks the Connect protocol's unary JSON encoding: every call is a ``POST`` to
``{host}/pipeline.v1.PipelineService/<Method>`` with a JSON body, and errors
come back as a non-2xx status with a ``{"code": ..., "message": ...}`` body.
Requests are authenticated with HTTP basic auth (user + access token).
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from pipesync.config import RemoteConfig
from pipesync.errors import RemoteError
from pipesync.pipelines.models import Pipeline
from pipesync.sync.store import RemotePipelineStore

logger = logging.getLogger(__name__)

SERVICE_PATH = "/pipeline.v1.PipelineService"


class HttpPipelineStore(RemotePipelineStore):
    """Remote pipeline store backed by ``httpx``.

    Parameters
    ----------
    config : RemoteConfig
        Host, credentials and timeout.
    client : httpx.Client | None
        Pre-built client, used as is. When *None* a client is created from
        ``config`` and closed by :meth:`close`.
    """

    def __init__(self, config: RemoteConfig, client: httpx.Client | None = None) -> None:
        self.config = config
        self._owns_client = client is None
        self._client = client or httpx.Client(
            base_url=config.host,
            auth=(config.user, config.token),
            timeout=config.timeout,
            headers={"Connect-Protocol-Version": "1"},
        )

    def __enter__(self) -> HttpPipelineStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    # ------------------------------------------------------------------
    # RemotePipelineStore
    # ------------------------------------------------------------------

    def list(self) -> list[Pipeline]:
        data = self._call("ListPipelines", {})
        return [_dict_to_pipeline(d) for d in data.get("pipelines", [])]

    def create(self, pipeline: Pipeline) -> None:
        self._call("CreatePipeline", {"pipeline": _pipeline_to_dict(pipeline)}, name=pipeline.name)

    def update(self, pipeline: Pipeline) -> None:
        self._call("UpdatePipeline", {"pipeline": _pipeline_to_dict(pipeline)}, name=pipeline.name)

    def delete(self, name: str) -> None:
        self._call("DeletePipeline", {"name": name}, name=name)

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _call(self, method: str, payload: dict[str, Any], name: str = "") -> dict[str, Any]:
        logger.debug("POST %s/%s", SERVICE_PATH, method)
        try:
            resp = self._client.post(f"{SERVICE_PATH}/{method}", json=payload)
        except httpx.HTTPError as e:
            raise RemoteError(method, name, message=str(e)) from e

        if not resp.is_success:
            code, message = _parse_error(resp)
            raise RemoteError(method, name, code=code, message=message)

        if not resp.content:
            return {}
        try:
            data = resp.json()
        except ValueError as e:
            raise RemoteError(method, name, message=f"invalid JSON response: {e}") from e
        if not isinstance(data, dict):
            raise RemoteError(
                method, name, message=f"expected a JSON object, got {type(data).__name__}"
            )
        return data


def _parse_error(resp: httpx.Response) -> tuple[str, str]:
    """Extract the Connect error code and message, falling back to the status."""
    try:
        data = resp.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and (data.get("code") or data.get("message")):
        return str(data.get("code", "")), str(data.get("message", ""))
    return f"http_{resp.status_code}", resp.text[:500] or resp.reason_phrase


def _pipeline_to_dict(pipeline: Pipeline) -> dict[str, Any]:
    return {
        "name": pipeline.name,
        "matchers": list(pipeline.matchers),
        "contents": pipeline.contents,
    }


def _dict_to_pipeline(data: dict[str, Any]) -> Pipeline:
    return Pipeline(
        name=data["name"],
        matchers=list(data.get("matchers", [])),
        contents=data.get("contents", ""),
    )
