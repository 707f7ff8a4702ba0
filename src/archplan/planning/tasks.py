"""Map raw generator task entries onto a :class:`TaskList`."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..coercion import DEFAULTS, as_int, as_list, as_optional_str, as_str, as_str_list, field
from ..errors import InputShapeError
from ..models.schema import Task, TaskComplexity, TaskList, TaskStatus, utc_now

__all__ = ["build_task", "build_task_list", "map_complexity"]

_COMPLEXITY = {
    "low": TaskComplexity.LOW,
    "high": TaskComplexity.HIGH,
}


def map_complexity(value: Any) -> TaskComplexity:
    """Case-sensitive lookup; anything unrecognised is ``MEDIUM``."""
    if isinstance(value, str):
        return _COMPLEXITY.get(value, TaskComplexity.MEDIUM)
    return TaskComplexity.MEDIUM


def build_task(raw: Any) -> Task:
    """Build one task from a raw entry.

    Status, attempts and commit are executor-owned and always start fresh,
    whatever the entry claims.
    """
    return Task(
        id=as_str(field(raw, "id"), DEFAULTS["task_id"]),
        title=as_str(field(raw, "title"), ""),
        description=as_str(field(raw, "description"), ""),
        priority=as_int(field(raw, "priority"), DEFAULTS["priority"]),
        status=TaskStatus.PENDING,
        dependencies=as_str_list(field(raw, "dependencies")),
        user_story_id=as_optional_str(field(raw, "user_story_id")),
        estimated_complexity=map_complexity(field(raw, "estimated_complexity")),
        files_created=as_str_list(field(raw, "files_to_create")),
        files_modified=as_str_list(field(raw, "files_to_modify")),
        commit_hash=None,
        attempts=0,
        notes="\n".join(as_str_list(field(raw, "acceptance_criteria"))),
    )


def build_task_list(raw: Any, project: str) -> TaskList:
    """Build the task list from a ``{design, tasks}`` record.

    Dependencies are neither resolved nor checked for cycles here; see
    :func:`archplan.planning.validation.validate_task_graph`.
    """
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise InputShapeError(f"expected an object, got {type(raw).__name__}")

    language = as_str(field(raw.get("design"), "language"), DEFAULTS["language"])
    return TaskList(
        project=project,
        language=language,
        phases=[],
        tasks=[build_task(entry) for entry in as_list(raw.get("tasks"))],
        version=DEFAULTS["schema_version"],
        created_at=utc_now(),
        updated_at=None,
    )
