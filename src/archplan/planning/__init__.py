"""
Task breakdown mapping and optional dependency-graph checks.
"""

from .tasks import build_task, build_task_list
from .validation import TaskGraphReport, validate_task_graph

__all__ = ["TaskGraphReport", "build_task", "build_task_list", "validate_task_graph"]
