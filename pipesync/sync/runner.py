"""Run dispatch: execute one configured run mode against a store."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from pipesync.config import BackupMode, SyncConfig, SyncMode
from pipesync.pipelines.backup import BackupResult, export_pipelines
from pipesync.pipelines.loader import load_pipelines
from pipesync.sync.reconciler import PlannedAction, ReconciliationReport, Reconciler
from pipesync.sync.store import RemotePipelineStore

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """What a run did. Exactly one of ``report``, ``plan`` or ``backup`` is set."""

    report: ReconciliationReport | None = None
    plan: list[PlannedAction] = field(default_factory=list)
    backup: BackupResult | None = None
    dry_run: bool = False

    @property
    def ok(self) -> bool:
        if self.report is not None:
            return self.report.ok
        if self.backup is not None:
            return self.backup.ok
        return True


def run(config: SyncConfig, store: RemotePipelineStore) -> RunResult:
    """Run the mode selected in ``config``.

    Errors from loading, listing or purging propagate to the caller.
    """
    mode = config.mode
    if isinstance(mode, BackupMode):
        return _run_backup(mode, store)
    if isinstance(mode, SyncMode):
        return _run_sync(mode, config.root_dir, store)
    raise TypeError(f"Unknown run mode: {mode!r}")


def _run_backup(mode: BackupMode, store: RemotePipelineStore) -> RunResult:
    remote = store.list()
    logger.info("Found %d remote pipelines", len(remote))
    result = export_pipelines(remote, mode.target_dir)
    logger.info(result.summary())
    return RunResult(backup=result)


def _run_sync(mode: SyncMode, root_dir: str, store: RemotePipelineStore) -> RunResult:
    local = load_pipelines(root_dir)
    reconciler = Reconciler(store)

    if mode.dry_run:
        remote = store.list()
        logger.info("Found %d remote pipelines", len(remote))
        return RunResult(plan=reconciler.plan(local, remote, purge=mode.purge), dry_run=True)

    return RunResult(report=reconciler.sync(local, purge=mode.purge))
