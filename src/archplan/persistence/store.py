"""File-backed persistence for design documents and task snapshots."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from contextlib import suppress
from pathlib import Path
from typing import Any, Mapping

from pydantic import ValidationError

from ..errors import ArtifactIOError, SnapshotNotFoundError, SnapshotParseError
from ..models.schema import DesignDocument, TaskList
from .markdown import render_design_markdown

__all__ = [
    "DEFAULT_DESIGN_NAME",
    "DEFAULT_TASKS_NAME",
    "ArtifactStore",
    "dump_task_list",
    "load_task_list",
    "parse_task_list",
    "save_task_list",
    "write_text_atomic",
]

DEFAULT_DESIGN_NAME = "design.md"
DEFAULT_TASKS_NAME = "tasks.json"
LOGGER = logging.getLogger(__name__)


def dump_task_list(task_list: TaskList) -> str:
    """Serialise ``task_list`` to indented JSON with a trailing newline."""
    payload = task_list.model_dump(mode="json")
    return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"


def parse_task_list(text: str, path: Path | str = "<memory>") -> TaskList:
    """Deserialise a snapshot, reporting any problem as :class:`SnapshotParseError`."""
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as error:
        raise SnapshotParseError(path, f"invalid JSON: {error}") from error
    try:
        return TaskList.model_validate(payload)
    except ValidationError as error:
        raise SnapshotParseError(path, f"schema mismatch: {error.error_count()} error(s)") from error


def _stage_text(path: Path, content: str) -> Path:
    """Write ``content`` to a temporary sibling of ``path`` and return it."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
            return Path(handle.name)
    except OSError as error:
        raise ArtifactIOError(path, f"Failed to write artifact: {error}") from error


def _commit_staged(staged: Path, path: Path) -> None:
    try:
        os.replace(staged, path)
    except OSError as error:
        _discard(staged)
        raise ArtifactIOError(path, f"Failed to replace artifact: {error}") from error


def _discard(staged: Path) -> None:
    with suppress(OSError):
        staged.unlink()


def write_text_atomic(path: Path | str, content: str) -> None:
    """Replace ``path`` with ``content``; the old file survives any failure."""
    target = Path(path)
    staged = _stage_text(target, content)
    _commit_staged(staged, target)


def save_task_list(task_list: TaskList, path: Path | str) -> None:
    write_text_atomic(path, dump_task_list(task_list))


def load_task_list(path: Path | str) -> TaskList:
    """Read a snapshot, separating "no file" from "corrupt file"."""
    snapshot = Path(path)
    try:
        text = snapshot.read_text(encoding="utf-8")
    except FileNotFoundError as error:
        raise SnapshotNotFoundError(snapshot, "Task snapshot not found") from error
    except (OSError, UnicodeDecodeError) as error:
        raise ArtifactIOError(snapshot, f"Failed to read task snapshot: {error}") from error
    return parse_task_list(text, snapshot)


class ArtifactStore:
    """Conventional design/task artifact locations within a project directory."""

    def __init__(
        self,
        project_dir: Path | str,
        *,
        design_name: str = DEFAULT_DESIGN_NAME,
        tasks_name: str = DEFAULT_TASKS_NAME,
    ) -> None:
        self.project_dir = Path(project_dir)
        self.design_path = self.project_dir / design_name
        self.tasks_path = self.project_dir / tasks_name

    @classmethod
    def from_config(cls, project_dir: Path | str, config: Mapping[str, Any]) -> "ArtifactStore":
        paths = config.get("paths") or {}
        return cls(
            project_dir,
            design_name=str(paths.get("design") or DEFAULT_DESIGN_NAME),
            tasks_name=str(paths.get("tasks") or DEFAULT_TASKS_NAME),
        )

    def write_cycle(self, design: DesignDocument, tasks: TaskList, *, paired: bool = False) -> None:
        """Persist one generation cycle: the design first, then the tasks.

        Both payloads are rendered before anything touches disk. With
        ``paired`` both files are staged before either is renamed into place,
        which narrows the window in which the two artifacts disagree.
        """
        design_text = render_design_markdown(design)
        tasks_text = dump_task_list(tasks)

        if not paired:
            write_text_atomic(self.design_path, design_text)
            write_text_atomic(self.tasks_path, tasks_text)
            LOGGER.info("Wrote %s and %s", self.design_path, self.tasks_path)
            return

        staged_design = _stage_text(self.design_path, design_text)
        try:
            staged_tasks = _stage_text(self.tasks_path, tasks_text)
        except ArtifactIOError:
            _discard(staged_design)
            raise
        try:
            _commit_staged(staged_design, self.design_path)
        except ArtifactIOError:
            _discard(staged_tasks)
            raise
        _commit_staged(staged_tasks, self.tasks_path)
        LOGGER.info("Wrote %s and %s (paired)", self.design_path, self.tasks_path)

    def load_tasks(self) -> TaskList:
        return load_task_list(self.tasks_path)

    def save_tasks(self, task_list: TaskList, *, touch: bool = True) -> None:
        """Re-persist an executor-updated task list in its existing order."""
        if touch:
            task_list.touch()
        save_task_list(task_list, self.tasks_path)

    def read_design(self) -> str:
        try:
            return self.design_path.read_text(encoding="utf-8")
        except OSError as error:
            raise ArtifactIOError(self.design_path, f"Failed to read design document: {error}") from error
