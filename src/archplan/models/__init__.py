"""Convenience exports for the archplan record types."""

from .schema import (
    SCHEMA_VERSION,
    Component,
    DesignDocument,
    FileStructureNode,
    NodeKind,
    Phase,
    Task,
    TaskComplexity,
    TaskList,
    TaskStatus,
    TechnologyStack,
    utc_now,
)

__all__ = [
    "SCHEMA_VERSION",
    "Component",
    "DesignDocument",
    "FileStructureNode",
    "NodeKind",
    "Phase",
    "Task",
    "TaskComplexity",
    "TaskList",
    "TaskStatus",
    "TechnologyStack",
    "utc_now",
]
