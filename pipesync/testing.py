"""In-memory pipeline store for tests.

Records every call it receives, and can be told to fail specific calls::

    store = InMemoryPipelineStore([Pipeline(name="b")], fail={("update", "b")})
"""

from __future__ import annotations

from pipesync.errors import RemoteError
from pipesync.pipelines.models import Pipeline
from pipesync.sync.store import RemotePipelineStore


class InMemoryPipelineStore(RemotePipelineStore):
    """A ``RemotePipelineStore`` that keeps pipelines in a dict."""

    def __init__(
        self,
        pipelines: list[Pipeline] | None = None,
        fail: set[tuple[str, str]] | None = None,
    ) -> None:
        self.pipelines: dict[str, Pipeline] = {p.name: p for p in pipelines or []}
        self.fail = fail or set()
        self.calls: list[tuple[str, str]] = []

    def _record(self, operation: str, name: str = "") -> None:
        self.calls.append((operation, name))
        if (operation, name) in self.fail:
            raise RemoteError(operation, name, code="internal", message="injected failure")

    def list(self) -> list[Pipeline]:
        self._record("list")
        return list(self.pipelines.values())

    def create(self, pipeline: Pipeline) -> None:
        self._record("create", pipeline.name)
        if pipeline.name in self.pipelines:
            raise RemoteError("create", pipeline.name, code="already_exists", message="pipeline exists")
        self.pipelines[pipeline.name] = pipeline

    def update(self, pipeline: Pipeline) -> None:
        self._record("update", pipeline.name)
        if pipeline.name not in self.pipelines:
            raise RemoteError("update", pipeline.name, code="not_found", message="no such pipeline")
        self.pipelines[pipeline.name] = pipeline

    def delete(self, name: str) -> None:
        self._record("delete", name)
        if name not in self.pipelines:
            raise RemoteError("delete", name, code="not_found", message="no such pipeline")
        del self.pipelines[name]

    def mutations(self) -> list[tuple[str, str]]:
        """Recorded calls other than ``list``."""
        return [c for c in self.calls if c[0] != "list"]
