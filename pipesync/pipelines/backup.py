"""Backup exporter: snapshot a remote pipeline collection to local documents."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from pipesync.pipelines.metadata import inject
from pipesync.pipelines.models import PRIMARY_EXTENSION, Pipeline

logger = logging.getLogger(__name__)


@dataclass
class BackupResult:
    """Outcome of a backup export."""

    target_dir: str
    written: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)  # name -> error

    @property
    def ok(self) -> bool:
        return not self.failed

    def summary(self) -> str:
        text = f"Wrote {len(self.written)} pipelines to {self.target_dir}"
        if self.failed:
            text += f", {len(self.failed)} failed"
        return text


def export_pipelines(remote: list[Pipeline], target_dir: str | Path) -> BackupResult:
    """Write each pipeline to ``target_dir/<name>.alloy``.

    The target directory is removed and recreated first, so it only ever
    holds the current snapshot. Failing to clear or create it raises
    ``OSError``; a failure writing one file is logged and recorded, and the
    remaining pipelines are still written.
    """
    target = Path(target_dir)
    if target.exists():
        shutil.rmtree(target)
    target.mkdir(parents=True)

    result = BackupResult(target_dir=str(target))
    for pipe in remote:
        path = target / f"{pipe.name}{PRIMARY_EXTENSION}"
        if path.parent != target:
            logger.error("Refusing to write %s: name escapes %s", pipe.name, target)
            result.failed[pipe.name] = "name is not a plain file name"
            continue
        try:
            path.write_text(inject(pipe.matchers, pipe.contents), encoding="utf-8")
        except OSError as e:
            logger.error("Error writing %s: %s", path, e)
            result.failed[pipe.name] = str(e)
            continue
        logger.info("Wrote %s", path)
        result.written.append(str(path))

    return result
