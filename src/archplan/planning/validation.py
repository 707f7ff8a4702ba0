"""Optional integrity checks for the task dependency graph.

Task construction is deliberately permissive: dependency ids may point at
nothing and the graph may contain cycles. Callers that want stricter
guarantees run :func:`validate_task_graph` as a separate pass.
"""

from __future__ import annotations

import heapq
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..models.schema import TaskList

__all__ = ["TaskGraphReport", "validate_task_graph"]

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class TaskGraphReport:
    """Aggregated findings for a task list's dependency graph."""

    duplicate_ids: list[str] = field(default_factory=list)
    missing_dependencies: dict[str, list[str]] = field(default_factory=dict)
    self_dependencies: list[str] = field(default_factory=list)
    cycles: list[list[str]] = field(default_factory=list)
    order: Optional[list[str]] = None

    @property
    def ok(self) -> bool:
        return not (self.duplicate_ids or self.missing_dependencies or self.cycles)

    def to_metadata(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        if self.duplicate_ids:
            payload["duplicate_ids"] = list(self.duplicate_ids)
        if self.missing_dependencies:
            payload["missing_dependencies"] = {key: list(value) for key, value in self.missing_dependencies.items()}
        if self.self_dependencies:
            payload["self_dependencies"] = list(self.self_dependencies)
        if self.cycles:
            payload["cycles"] = [list(cycle) for cycle in self.cycles]
        if self.order is not None:
            payload["order"] = list(self.order)
        return payload


def validate_task_graph(task_list: TaskList) -> TaskGraphReport:
    """Check ids and dependencies, and compute a topological order if one exists.

    Tasks sharing an id are merged into one graph node at the position of the
    first occurrence. Ties in the order are broken by priority, then by
    stored position.
    """
    report = TaskGraphReport()

    position: Dict[str, int] = {}
    priority: Dict[str, int] = {}
    edges: Dict[str, List[str]] = {}
    for index, task in enumerate(task_list.tasks):
        if task.id in position:
            if task.id not in report.duplicate_ids:
                report.duplicate_ids.append(task.id)
        else:
            position[task.id] = index
            priority[task.id] = task.priority
            edges[task.id] = []
        for dependency in task.dependencies:
            if dependency not in edges[task.id]:
                edges[task.id].append(dependency)

    for task_id, dependencies in edges.items():
        missing = [dependency for dependency in dependencies if dependency not in position]
        if missing:
            report.missing_dependencies[task_id] = missing
        if task_id in dependencies:
            report.self_dependencies.append(task_id)

    dependents: Dict[str, List[str]] = {task_id: [] for task_id in position}
    indegree: Dict[str, int] = {task_id: 0 for task_id in position}
    for task_id, dependencies in edges.items():
        for dependency in dependencies:
            if dependency in position:
                dependents[dependency].append(task_id)
                indegree[task_id] += 1

    heap = [(priority[task_id], position[task_id], task_id) for task_id, count in indegree.items() if count == 0]
    heapq.heapify(heap)
    order: List[str] = []
    while heap:
        _, _, task_id = heapq.heappop(heap)
        order.append(task_id)
        for dependent in dependents[task_id]:
            indegree[dependent] -= 1
            if indegree[dependent] == 0:
                heapq.heappush(heap, (priority[dependent], position[dependent], dependent))

    if len(order) == len(position):
        report.order = order
    else:
        blocked = sorted((task_id for task_id in position if indegree[task_id] > 0), key=position.__getitem__)
        report.cycles = _find_cycles(blocked, edges)

    for task_id, missing in report.missing_dependencies.items():
        LOGGER.warning("Task %s depends on unknown tasks: %s", task_id, ", ".join(missing))
    for cycle in report.cycles:
        LOGGER.warning("Dependency cycle detected: %s", " -> ".join(cycle + cycle[:1]))
    return report


def _find_cycles(candidates: List[str], edges: Dict[str, List[str]]) -> List[List[str]]:
    """Return one cycle per back edge found by a DFS restricted to ``candidates``."""
    allowed = set(candidates)
    state: Dict[str, int] = {}
    stack: List[str] = []
    cycles: List[List[str]] = []

    def visit(node: str) -> None:
        state[node] = 1
        stack.append(node)
        for dependency in edges.get(node, []):
            if dependency not in allowed:
                continue
            if state.get(dependency) == 1:
                start = stack.index(dependency)
                cycles.append(stack[start:])
            elif dependency not in state:
                visit(dependency)
        stack.pop()
        state[node] = 2

    for node in candidates:
        if node not in state:
            visit(node)
    return cycles
