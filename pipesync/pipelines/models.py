"""Pipeline data model."""

from __future__ import annotations

from dataclasses import dataclass, field

PRIMARY_EXTENSION = ".alloy"

# Interchangeable document extensions; the primary one is used when writing.
PIPELINE_EXTENSIONS = {PRIMARY_EXTENSION, ".river"}


@dataclass
class Pipeline:
    """A named configuration document, the unit of reconciliation."""

    name: str
    matchers: list[str] = field(default_factory=list)
    contents: str = ""
    source: str = ""  # Local path it was loaded from, empty for remote records


def index_by_name(pipelines: list[Pipeline]) -> dict[str, Pipeline]:
    """Map pipeline names to records, later entries winning."""
    return {p.name: p for p in pipelines}
