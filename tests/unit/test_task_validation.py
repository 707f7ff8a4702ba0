from __future__ import annotations

from archplan.models.schema import Task, TaskList
from archplan.planning.validation import validate_task_graph


def _tasks(*entries: tuple[str, list[str], int]) -> TaskList:
    return TaskList(
        project="demo",
        language="rust",
        tasks=[Task(id=task_id, dependencies=deps, priority=priority) for task_id, deps, priority in entries],
    )


def test_acyclic_graph_orders_by_dependencies_then_priority() -> None:
    report = validate_task_graph(
        _tasks(
            ("T-3", ["T-1"], 1),
            ("T-1", [], 3),
            ("T-2", [], 2),
            ("T-4", ["T-2", "T-3"], 1),
        )
    )

    assert report.ok
    assert report.cycles == []
    assert report.order == ["T-2", "T-1", "T-3", "T-4"]


def test_ties_fall_back_to_stored_position() -> None:
    report = validate_task_graph(_tasks(("B", [], 3), ("A", [], 3)))

    assert report.order == ["B", "A"]


def test_missing_dependencies_are_reported() -> None:
    report = validate_task_graph(_tasks(("T-1", ["T-0", "T-9"], 1), ("T-2", ["T-1"], 2)))

    assert not report.ok
    assert report.missing_dependencies == {"T-1": ["T-0", "T-9"]}
    assert report.order == ["T-1", "T-2"]


def test_cycles_are_reported_without_an_order() -> None:
    report = validate_task_graph(_tasks(("A", ["B"], 1), ("B", ["A"], 1), ("C", ["A"], 1), ("D", [], 1)))

    assert not report.ok
    assert report.order is None
    assert report.cycles == [["A", "B"]]


def test_self_dependency_is_a_cycle() -> None:
    report = validate_task_graph(_tasks(("A", ["A"], 1)))

    assert report.self_dependencies == ["A"]
    assert report.cycles == [["A"]]


def test_duplicate_ids_are_flagged_once() -> None:
    report = validate_task_graph(_tasks(("A", [], 1), ("A", [], 1), ("A", [], 1), ("B", ["A"], 1)))

    assert report.duplicate_ids == ["A"]
    assert report.order == ["A", "B"]
    assert "duplicate_ids" in report.to_metadata()


def test_validation_does_not_mutate_tasks() -> None:
    task_list = _tasks(("A", ["missing"], 1))
    before = task_list.model_dump()

    validate_task_graph(task_list)

    assert task_list.model_dump() == before
