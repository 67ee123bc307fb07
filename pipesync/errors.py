"""Error types raised by pipesync.

Filesystem failures are not wrapped: they surface as the builtin ``OSError``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pipesync.sync.reconciler import ReconciliationReport


class PipeSyncError(Exception):
    """Base class for all pipesync errors."""


class ConfigError(PipeSyncError):
    """Missing or invalid configuration."""


class MultipleDirectivesError(PipeSyncError):
    """A document carries more than one matchers directive."""

    def __init__(self, source: str, count: int):
        self.source = source
        self.count = count
        super().__init__(
            f"{source}: only one matchers comment allowed, found {count}"
        )


class DuplicatePipelineError(PipeSyncError):
    """Two local documents resolve to the same pipeline name."""

    def __init__(self, name: str, paths: list[str]):
        self.name = name
        self.paths = paths
        super().__init__(
            f"Pipeline name '{name}' is defined more than once: {', '.join(paths)}"
        )


class RemoteError(PipeSyncError):
    """A call to the remote pipeline store failed."""

    def __init__(self, operation: str, name: str = "", code: str = "", message: str = ""):
        self.operation = operation
        self.name = name
        self.code = code
        self.message = message
        target = f" {name}" if name else ""
        detail = f"[{code}] {message}" if code else message
        super().__init__(f"{operation}{target} failed: {detail}")


class PurgeAbortedError(PipeSyncError):
    """A delete failed during purge; the remaining deletes were not attempted."""

    def __init__(self, name: str, cause: RemoteError, report: ReconciliationReport):
        self.name = name
        self.cause = cause
        self.report = report
        super().__init__(f"Purge aborted while deleting '{name}': {cause}")


class PipelineDecodeError(PipeSyncError):
    """A pipeline document is not valid UTF-8."""

    def __init__(self, source: str, cause: UnicodeDecodeError):
        self.source = source
        self.cause = cause
        super().__init__(f"{source}: not valid UTF-8 ({cause.reason} at byte {cause.start})")
