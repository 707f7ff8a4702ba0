"""Verbosity-aware console lines as a pure function of level and event.

Nothing here prints; callers decide where the returned lines go.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

__all__ = [
    "DebugLevel",
    "Debug",
    "Error",
    "Event",
    "ListItem",
    "Phase",
    "PhaseComplete",
    "Progress",
    "Status",
    "Success",
    "TaskLine",
    "Warn",
    "render",
]


class DebugLevel(str, Enum):
    """How much console output the user asked for."""

    MINIMAL = "minimal"
    NORMAL = "normal"
    VERBOSE = "verbose"
    DEBUG = "debug"

    @property
    def rank(self) -> int:
        return list(DebugLevel).index(self)

    def is_normal(self) -> bool:
        return self.rank >= DebugLevel.NORMAL.rank

    def is_verbose(self) -> bool:
        return self.rank >= DebugLevel.VERBOSE.rank

    def is_debug(self) -> bool:
        return self is DebugLevel.DEBUG


@dataclass(frozen=True, slots=True)
class Phase:
    name: str


@dataclass(frozen=True, slots=True)
class Status:
    message: str


@dataclass(frozen=True, slots=True)
class PhaseComplete:
    message: str


@dataclass(frozen=True, slots=True)
class ListItem:
    message: str


@dataclass(frozen=True, slots=True)
class TaskLine:
    task_id: str
    title: str
    status: str = ""


@dataclass(frozen=True, slots=True)
class Progress:
    completed: int
    total: int
    width: int = 30


@dataclass(frozen=True, slots=True)
class Warn:
    message: str


@dataclass(frozen=True, slots=True)
class Error:
    message: str


@dataclass(frozen=True, slots=True)
class Success:
    message: str


@dataclass(frozen=True, slots=True)
class Debug:
    context: str
    message: str


Event = Union[Phase, Status, PhaseComplete, ListItem, TaskLine, Progress, Warn, Error, Success, Debug]


def _progress_bar(event: Progress) -> list[str]:
    if event.total <= 0:
        return []
    completed = max(0, min(event.completed, event.total))
    percentage = completed * 100 // event.total
    filled = completed * event.width // event.total
    bar = "#" * filled + "-" * (event.width - filled)
    return [f"  [{bar}] {percentage}% ({completed}/{event.total} tasks)"]


def render(level: DebugLevel, event: Event) -> list[str]:
    """Return the display lines for ``event`` at verbosity ``level``."""
    if isinstance(event, Error):
        return [f"x Error: {event.message}"]
    if isinstance(event, Success):
        return [f"ok {event.message}"]
    if isinstance(event, Debug):
        return [f"  [{event.context}] {event.message}"] if level.is_debug() else []
    if not level.is_normal():
        return []
    if isinstance(event, Phase):
        return ["", f"> {event.name}"]
    if isinstance(event, Status):
        return [f"  * {event.message}"]
    if isinstance(event, PhaseComplete):
        return [f"  ok {event.message}"]
    if isinstance(event, ListItem):
        return [f"    - {event.message}"]
    if isinstance(event, TaskLine):
        status = f"[{event.status}] " if event.status else ""
        return [f"  {status}{event.task_id} - {event.title}"]
    if isinstance(event, Progress):
        return _progress_bar(event)
    if isinstance(event, Warn):
        return [f"! {event.message}"]
    raise TypeError(f"Unsupported output event: {type(event).__name__}")
