"""One generation cycle: raw record in, design document and task list out."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .design.assembler import assemble_design
from .errors import InputShapeError
from .models.schema import DesignDocument, TaskList
from .persistence.store import ArtifactStore
from .planning.tasks import build_task_list
from .raw import load_raw_record, parse_raw_record

__all__ = ["GenerationResult", "build_artifacts", "generate_from_file", "run_generation_cycle"]

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class GenerationResult:
    """Artifacts produced by a completed generation cycle."""

    design: DesignDocument
    tasks: TaskList
    design_path: Path
    tasks_path: Path


def build_artifacts(record: Mapping[str, Any]) -> tuple[DesignDocument, TaskList]:
    """Map a parsed ``{design, tasks}`` record without touching disk."""
    design = assemble_design(record.get("design"))
    tasks = build_task_list(record, design.project)
    LOGGER.info(
        "Assembled design for %s with %d component(s) and %d task(s)",
        design.project,
        len(design.components),
        len(tasks.tasks),
    )
    return design, tasks


def run_generation_cycle(
    raw: str | Mapping[str, Any],
    store: ArtifactStore,
    *,
    paired: bool = False,
) -> GenerationResult:
    """Build and persist both artifacts.

    Shape errors surface before any write, so earlier artifacts stay intact.
    """
    record = parse_raw_record(raw) if isinstance(raw, str) else raw
    if not isinstance(record, Mapping):
        raise InputShapeError(f"expected a top-level object, got {type(record).__name__}")
    design, tasks = build_artifacts(record)
    store.write_cycle(design, tasks, paired=paired)
    return GenerationResult(
        design=design,
        tasks=tasks,
        design_path=store.design_path,
        tasks_path=store.tasks_path,
    )


def generate_from_file(path: Path | str, store: ArtifactStore, *, paired: bool = False) -> GenerationResult:
    return run_generation_cycle(load_raw_record(path), store, paired=paired)
