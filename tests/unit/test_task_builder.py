from __future__ import annotations

from typing import Any

import pytest

from archplan.errors import InputShapeError
from archplan.models.schema import TaskComplexity, TaskStatus
from archplan.planning.tasks import build_task, build_task_list, map_complexity


def test_full_entries_map_every_field(hello_world_record: dict[str, Any]) -> None:
    task_list = build_task_list(hello_world_record, "hello-world")

    assert task_list.project == "hello-world"
    assert task_list.language == "rust"
    assert task_list.phases == []
    assert task_list.version == "1.0"
    assert task_list.updated_at is None
    assert [task.id for task in task_list.tasks] == ["T-001", "T-002"]

    second = task_list.tasks[1]
    assert second.title == "CLI test"
    assert second.priority == 2
    assert second.estimated_complexity is TaskComplexity.MEDIUM
    assert second.dependencies == ["T-001"]
    assert second.user_story_id == "US-001"
    assert second.files_created == ["tests/cli.rs"]
    assert second.files_modified == ["src/main.rs"]
    assert second.notes == "WHEN run, THE program SHALL print Hello, World!\nWHEN tested, THE suite SHALL pass"


def test_entry_with_only_id_gets_complete_defaults() -> None:
    task = build_task({"id": "T-9"})

    assert task.id == "T-9"
    assert task.title == ""
    assert task.description == ""
    assert task.status is TaskStatus.PENDING
    assert task.estimated_complexity is TaskComplexity.MEDIUM
    assert task.priority == 3
    assert task.attempts == 0
    assert task.commit_hash is None
    assert task.user_story_id is None
    assert task.dependencies == []
    assert task.files_created == []
    assert task.files_modified == []
    assert task.notes == ""


def test_missing_id_uses_placeholder() -> None:
    assert build_task({}).id == "TASK-000"
    assert build_task("not an object").id == "TASK-000"


@pytest.mark.parametrize("status", ["completed", "in_progress", "failed", "blocked", 3, None])
def test_status_hint_is_ignored(status: Any) -> None:
    task = build_task({"id": "T-1", "status": status, "attempts": 4, "commit_hash": "abc123"})

    assert task.status is TaskStatus.PENDING
    assert task.attempts == 0
    assert task.commit_hash is None


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("low", TaskComplexity.LOW),
        ("high", TaskComplexity.HIGH),
        ("medium", TaskComplexity.MEDIUM),
        ("High", TaskComplexity.MEDIUM),
        ("LOW", TaskComplexity.MEDIUM),
        (None, TaskComplexity.MEDIUM),
        (2, TaskComplexity.MEDIUM),
    ],
)
def test_complexity_mapping_is_case_sensitive(value: Any, expected: TaskComplexity) -> None:
    assert map_complexity(value) is expected


@pytest.mark.parametrize(("value", "expected"), [(1, 1), (5, 5), ("1", 3), (2.0, 3), (True, 3), (None, 3)])
def test_priority_requires_an_integer(value: Any, expected: int) -> None:
    assert build_task({"id": "T", "priority": value}).priority == expected


def test_non_string_list_members_are_dropped() -> None:
    task = build_task(
        {
            "id": "T",
            "dependencies": ["T-0", 1, None],
            "files_to_create": "src/a.x",
            "files_to_modify": [{"path": "x"}, "src/b.x"],
            "acceptance_criteria": ["one", 2, "two"],
        }
    )

    assert task.dependencies == ["T-0"]
    assert task.files_created == []
    assert task.files_modified == ["src/b.x"]
    assert task.notes == "one\ntwo"


def test_one_task_per_entry_without_uniqueness_or_reference_checks() -> None:
    task_list = build_task_list(
        {"tasks": [{"id": "A", "dependencies": ["B"]}, {"id": "A"}, {"id": "B", "dependencies": ["A"]}]},
        "demo",
    )

    assert [task.id for task in task_list.tasks] == ["A", "A", "B"]


def test_language_defaults_when_design_is_missing() -> None:
    assert build_task_list({"tasks": []}, "demo").language == "rust"
    assert build_task_list({"design": {"language": "go"}}, "demo").language == "go"
    assert build_task_list({"design": "text", "tasks": "none"}, "demo").tasks == []


def test_missing_record_yields_empty_list() -> None:
    task_list = build_task_list(None, "demo")

    assert task_list.tasks == []
    assert task_list.language == "rust"


def test_non_object_record_is_rejected() -> None:
    with pytest.raises(InputShapeError):
        build_task_list(["tasks"], "demo")
