"""Pipeline loader: discover pipeline documents and parse them into records."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from pipesync.errors import DuplicatePipelineError, PipelineDecodeError
from pipesync.pipelines.metadata import extract
from pipesync.pipelines.models import PIPELINE_EXTENSIONS, Pipeline

logger = logging.getLogger(__name__)

# Directories never descended into
SKIP_DIRS = {".git", ".hg", ".svn"}


def _raise(error: OSError) -> None:
    raise error


def scan_pipeline_files(root: Path) -> list[Path]:
    """Recursively list pipeline documents under ``root`` in sorted order.

    Raises ``OSError`` if any directory in the tree cannot be listed.
    """
    files = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
        dirnames[:] = [d for d in dirnames if d not in SKIP_DIRS]
        for filename in filenames:
            path = Path(dirpath) / filename
            if path.suffix in PIPELINE_EXTENSIONS and path.is_file():
                files.append(path)
    return sorted(files)


def load_pipeline(path: Path) -> Pipeline:
    """Read a single document and split off its matchers directive.

    Raises:
        OSError: The file could not be read.
        PipelineDecodeError: The file is not valid UTF-8.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise PipelineDecodeError(str(path), e) from e
    matchers, body = extract(content, source=str(path))
    return Pipeline(name=path.stem, matchers=matchers, contents=body, source=str(path))


def load_pipelines(root_dir: str | Path) -> list[Pipeline]:
    """Load every pipeline document under ``root_dir``.

    Any failure aborts the whole load; a partial set is never returned.

    Raises:
        FileNotFoundError: ``root_dir`` does not exist.
        NotADirectoryError: ``root_dir`` is not a directory.
        MultipleDirectivesError: A document has more than one directive.
        DuplicatePipelineError: Two documents share a base name.
        PipelineDecodeError: A document is not valid UTF-8.
        OSError: A directory or document could not be read.
    """
    root = Path(root_dir)
    if not root.exists():
        raise FileNotFoundError(f"Pipeline directory not found: {root}")
    if not root.is_dir():
        raise NotADirectoryError(f"Not a directory: {root}")

    pipes: list[Pipeline] = []
    seen: dict[str, str] = {}
    for path in scan_pipeline_files(root):
        pipe = load_pipeline(path)
        if pipe.name in seen:
            raise DuplicatePipelineError(pipe.name, [seen[pipe.name], pipe.source])
        seen[pipe.name] = pipe.source
        logger.debug("Loaded %s from %s (%d matchers)", pipe.name, path, len(pipe.matchers))
        pipes.append(pipe)

    logger.info("Loaded %d local pipelines", len(pipes))
    return pipes
