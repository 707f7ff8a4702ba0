"""Persistence boundary shared with the downstream executor."""

from .markdown import render_design_markdown
from .store import (
    DEFAULT_DESIGN_NAME,
    DEFAULT_TASKS_NAME,
    ArtifactStore,
    dump_task_list,
    load_task_list,
    parse_task_list,
    save_task_list,
    write_text_atomic,
)

__all__ = [
    "DEFAULT_DESIGN_NAME",
    "DEFAULT_TASKS_NAME",
    "ArtifactStore",
    "dump_task_list",
    "load_task_list",
    "parse_task_list",
    "render_design_markdown",
    "save_task_list",
    "write_text_atomic",
]
