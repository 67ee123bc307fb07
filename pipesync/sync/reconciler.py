"""Reconciliation: align the remote pipeline collection with the local one.

Pipelines are matched by name only:
1. A local pipeline whose name exists remotely is updated
2. A local pipeline with no remote counterpart is created
3. With purge enabled, a remote pipeline with no local counterpart is deleted

Create and update failures are recorded and the run moves on to the next
pipeline. A delete failure stops the purge and no further deletes are issued.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from pipesync.errors import PurgeAbortedError, RemoteError
from pipesync.pipelines.models import Pipeline, index_by_name
from pipesync.sync.store import RemotePipelineStore

logger = logging.getLogger(__name__)


class Action(Enum):
    """A mutation applied to the remote store."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass
class PlannedAction:
    """A single action the reconciler will apply."""

    action: Action
    name: str
    pipeline: Pipeline | None = None  # None for deletes


@dataclass
class ActionOutcome:
    """Result of applying a single action."""

    action: Action
    name: str
    succeeded: bool
    error: str = ""


@dataclass
class ReconciliationReport:
    """Per-pipeline outcomes of a reconciliation pass, in the order applied."""

    outcomes: list[ActionOutcome] = field(default_factory=list)
    aborted: bool = False

    def _names(self, action: Action) -> list[str]:
        return [o.name for o in self.outcomes if o.action == action and o.succeeded]

    @property
    def created(self) -> list[str]:
        return self._names(Action.CREATE)

    @property
    def updated(self) -> list[str]:
        return self._names(Action.UPDATE)

    @property
    def deleted(self) -> list[str]:
        return self._names(Action.DELETE)

    @property
    def failed(self) -> list[ActionOutcome]:
        return [o for o in self.outcomes if not o.succeeded]

    @property
    def ok(self) -> bool:
        return not self.failed and not self.aborted

    def summary(self) -> str:
        text = (
            f"{len(self.created)} created, {len(self.updated)} updated, "
            f"{len(self.deleted)} deleted, {len(self.failed)} failed"
        )
        if self.aborted:
            text += " (purge aborted)"
        return text


class Reconciler:
    """Applies create/update/delete actions to a remote pipeline store."""

    def __init__(self, store: RemotePipelineStore):
        self.store = store

    def plan(
        self,
        local: list[Pipeline],
        remote: list[Pipeline],
        purge: bool = False,
    ) -> list[PlannedAction]:
        """Classify every pipeline without touching the store.

        Creates and updates come first, in local order, followed by deletes
        in remote listing order.
        """
        remote_names = index_by_name(remote).keys()
        local_names = {p.name for p in local}

        actions = []
        for pipe in local:
            action = Action.UPDATE if pipe.name in remote_names else Action.CREATE
            actions.append(PlannedAction(action=action, name=pipe.name, pipeline=pipe))

        if purge:
            for name in remote_names:
                if name not in local_names:
                    actions.append(PlannedAction(action=Action.DELETE, name=name))

        return actions

    def reconcile(
        self,
        local: list[Pipeline],
        remote: list[Pipeline],
        purge: bool = False,
    ) -> ReconciliationReport:
        """Apply the plan for ``local`` against ``remote``.

        Raises:
            PurgeAbortedError: A delete failed; no further deletes were issued.
        """
        report = ReconciliationReport()

        for planned in self.plan(local, remote, purge=purge):
            if planned.action == Action.DELETE:
                self._delete(planned.name, report)
            else:
                self._upsert(planned, report)

        logger.info("Reconciliation finished: %s", report.summary())
        return report

    def sync(self, local: list[Pipeline], purge: bool = False) -> ReconciliationReport:
        """List the remote collection, then reconcile ``local`` against it."""
        remote = self.store.list()
        logger.info("Found %d remote pipelines", len(remote))
        return self.reconcile(local, remote, purge=purge)

    def _upsert(self, planned: PlannedAction, report: ReconciliationReport) -> None:
        if planned.action == Action.UPDATE:
            logger.info("Updating pipeline %s", planned.name)
            call = self.store.update
        else:
            logger.info("Creating pipeline %s", planned.name)
            call = self.store.create

        try:
            call(planned.pipeline)
        except RemoteError as e:
            logger.error("Failed to %s pipeline %s: %s", planned.action.value, planned.name, e)
            report.outcomes.append(
                ActionOutcome(action=planned.action, name=planned.name, succeeded=False, error=str(e))
            )
            return

        report.outcomes.append(
            ActionOutcome(action=planned.action, name=planned.name, succeeded=True)
        )

    def _delete(self, name: str, report: ReconciliationReport) -> None:
        logger.info("Deleting remote pipeline %s", name)
        try:
            self.store.delete(name)
        except RemoteError as e:
            logger.error("Failed to delete pipeline %s, aborting purge: %s", name, e)
            report.outcomes.append(
                ActionOutcome(action=Action.DELETE, name=name, succeeded=False, error=str(e))
            )
            report.aborted = True
            raise PurgeAbortedError(name, e, report) from e

        report.outcomes.append(ActionOutcome(action=Action.DELETE, name=name, succeeded=True))
