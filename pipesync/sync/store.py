"""Remote pipeline store contract."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pipesync.pipelines.models import Pipeline


class RemotePipelineStore(ABC):
    """The remote collection of pipelines, keyed by name.

    Every method raises ``RemoteError`` when the call fails. Calls are
    synchronous; any timeout or retry policy belongs to the implementation.
    """

    @abstractmethod
    def list(self) -> list[Pipeline]:
        """Return every remote pipeline."""

    @abstractmethod
    def create(self, pipeline: Pipeline) -> None:
        """Create a pipeline that does not exist remotely."""

    @abstractmethod
    def update(self, pipeline: Pipeline) -> None:
        """Replace the remote pipeline with the same name."""

    @abstractmethod
    def delete(self, name: str) -> None:
        """Delete the remote pipeline called ``name``."""
