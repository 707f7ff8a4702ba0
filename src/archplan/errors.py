"""Error hierarchy shared by the mappers and the persistence boundary."""

from __future__ import annotations

from pathlib import Path

__all__ = [
    "ArchplanError",
    "ArtifactIOError",
    "InputShapeError",
    "SnapshotNotFoundError",
    "SnapshotParseError",
]


class ArchplanError(RuntimeError):
    """Base error for structural failures of a generation cycle."""


class InputShapeError(ArchplanError):
    """Raised when a raw record exists but is not a recognised structure."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        self.field = field
        if field:
            message = f"{field}: {message}"
        super().__init__(message)


class ArtifactIOError(ArchplanError):
    """Raised when reading or writing an artifact fails at the OS level."""

    def __init__(self, path: Path | str, message: str) -> None:
        self.path = Path(path)
        super().__init__(f"{message} ({self.path})")


class SnapshotNotFoundError(ArtifactIOError):
    """Raised when a task snapshot is requested but no file exists."""


class SnapshotParseError(ArchplanError):
    """Raised when a persisted task snapshot cannot be deserialised."""

    def __init__(self, path: Path | str, detail: str) -> None:
        self.path = Path(path)
        self.detail = detail
        super().__init__(f"Corrupt task snapshot {self.path}: {detail}")
