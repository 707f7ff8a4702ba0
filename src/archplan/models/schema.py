"""Typed records produced by the design and task-breakdown mappers."""

from __future__ import annotations

from collections import Counter
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

SCHEMA_VERSION = "1.0"


def utc_now() -> datetime:
    """Return a timezone-aware UTC timestamp."""
    return datetime.now(timezone.utc)


class RecordModel(BaseModel):
    """Base Pydantic model with strict field handling."""

    model_config = ConfigDict(extra="forbid", frozen=False)


class NodeKind(str, Enum):
    """Kind tag for entries in the project file tree."""

    DIRECTORY = "directory"
    FILE = "file"


class TaskStatus(str, Enum):
    """Lifecycle states for a task; mutated only by the executor."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"
    BLOCKED = "blocked"


class TaskComplexity(str, Enum):
    """Rough effort estimate attached to a task."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class FileStructureNode(RecordModel):
    """One entry in the project tree.

    Children are kept in discovery order and only directories carry them.
    """

    name: str
    kind: NodeKind
    description: str = ""
    children: List["FileStructureNode"] = Field(default_factory=list)

    @classmethod
    def directory(cls, name: str, description: str = "") -> "FileStructureNode":
        return cls(name=name, kind=NodeKind.DIRECTORY, description=description)

    @classmethod
    def file(cls, name: str, description: str = "") -> "FileStructureNode":
        return cls(name=name, kind=NodeKind.FILE, description=description)

    @property
    def is_directory(self) -> bool:
        return self.kind is NodeKind.DIRECTORY

    def child(self, name: str) -> Optional["FileStructureNode"]:
        """Return the direct child called ``name`` if present."""
        for candidate in self.children:
            if candidate.name == name:
                return candidate
        return None

    def iter_paths(self, prefix: str = "") -> Iterator[Tuple[str, "FileStructureNode"]]:
        """Yield ``(relative_path, node)`` depth-first, excluding this node."""
        for node in self.children:
            path = f"{prefix}{node.name}"
            yield path, node
            if node.children:
                yield from node.iter_paths(prefix=f"{path}/")

    def render_tree(self) -> str:
        """Render the tree as indented ASCII, directories suffixed with ``/``."""
        lines = [f"{self.name}/" if self.is_directory else self.name]
        lines.extend(self._render_children(""))
        return "\n".join(lines)

    def _render_children(self, indent: str) -> List[str]:
        lines: List[str] = []
        for index, node in enumerate(self.children):
            last = index == len(self.children) - 1
            connector = "└── " if last else "├── "
            label = f"{node.name}/" if node.is_directory else node.name
            if node.description:
                label = f"{label}  # {node.description}"
            lines.append(f"{indent}{connector}{label}")
            if node.children:
                lines.extend(node._render_children(indent + ("    " if last else "│   ")))
        return lines


class TechnologyStack(RecordModel):
    """Language and tooling choices for the generated project."""

    language: str
    testing_framework: str
    build_tool: str
    dependencies: List[str] = Field(default_factory=list)
    additional: Dict[str, str] = Field(default_factory=dict)


class Component(RecordModel):
    """Architectural unit described by the design."""

    name: str
    purpose: str = ""
    file_path: Optional[str] = None
    interface: List[str] = Field(default_factory=list)
    dependencies: List[str] = Field(default_factory=list)


class DesignDocument(RecordModel):
    """Design produced once per generation cycle."""

    project: str
    overview: str = ""
    component_diagram: Optional[str] = None
    components: List[Component] = Field(default_factory=list)
    file_structure: Optional[FileStructureNode] = None
    technology_stack: Optional[TechnologyStack] = None
    design_decisions: List[str] = Field(default_factory=list)
    version: str = SCHEMA_VERSION
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: Optional[datetime] = None

    @property
    def language(self) -> Optional[str]:
        if self.technology_stack is None:
            return None
        return self.technology_stack.language


class Task(RecordModel):
    """Single unit of work handed to the executor."""

    id: str
    title: str = ""
    description: str = ""
    priority: int = 3
    status: TaskStatus = TaskStatus.PENDING
    dependencies: List[str] = Field(default_factory=list)
    user_story_id: Optional[str] = None
    estimated_complexity: TaskComplexity = TaskComplexity.MEDIUM
    files_created: List[str] = Field(default_factory=list)
    files_modified: List[str] = Field(default_factory=list)
    commit_hash: Optional[str] = None
    attempts: int = 0
    notes: str = ""


class Phase(RecordModel):
    """Named grouping of tasks, reserved for downstream planners."""

    name: str
    description: str = ""
    task_ids: List[str] = Field(default_factory=list)


class TaskList(RecordModel):
    """Ordered task breakdown for one project."""

    project: str
    language: str
    phases: List[Phase] = Field(default_factory=list)
    tasks: List[Task] = Field(default_factory=list)
    version: str = SCHEMA_VERSION
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: Optional[datetime] = None

    def get(self, task_id: str) -> Optional[Task]:
        """Return the first task with ``task_id``; ids are not guaranteed unique."""
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def status_counts(self) -> Dict[TaskStatus, int]:
        counts = Counter(task.status for task in self.tasks)
        return {status: counts.get(status, 0) for status in TaskStatus}

    def touch(self) -> None:
        self.updated_at = utc_now()


FileStructureNode.model_rebuild()
