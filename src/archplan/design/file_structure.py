"""Build a single-rooted project tree from flat path lists or legacy text."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Iterable, Optional

from ..coercion import as_str_list
from ..models.schema import FileStructureNode
from ..utils.paths import sanitize_path

__all__ = [
    "ROOT_DESCRIPTION",
    "build_file_structure",
    "build_from_paths",
    "build_from_text",
    "insert_path",
]

LOGGER = logging.getLogger(__name__)

ROOT_DESCRIPTION = "Project root"
_BULLET_MARKERS = ("- ", "* ")


def build_file_structure(raw: Any, project_name: str) -> Optional[FileStructureNode]:
    """Map a raw ``file_structure`` value onto a tree.

    Mappings use the structured ``{directories, files}`` form, non-empty strings
    fall back to legacy text parsing, and anything else yields ``None``.
    """
    if isinstance(raw, Mapping):
        return build_from_paths(
            project_name,
            as_str_list(raw.get("directories")),
            as_str_list(raw.get("files")),
        )
    if isinstance(raw, str) and raw:
        LOGGER.warning(
            "Legacy string file_structure format detected - consider updating to structured format"
        )
        return build_from_text(project_name, raw)
    return None


def build_from_paths(
    project_name: str,
    directories: Iterable[str],
    files: Iterable[str],
) -> Optional[FileStructureNode]:
    """Build the tree from directory and file paths, in input order."""
    directories = list(directories)
    files = list(files)
    if not directories and not files:
        return None

    root = FileStructureNode.directory(project_name, ROOT_DESCRIPTION)
    for directory in directories:
        clean = sanitize_path(directory, project_name)
        if clean:
            insert_path(root, clean, is_directory=True)
    for file_path in files:
        clean = sanitize_path(file_path, project_name)
        if clean:
            insert_path(root, clean, is_directory=False)
    return root


def build_from_text(project_name: str, text: str) -> FileStructureNode:
    """Best-effort parse of a bullet/heading listing, one path per line."""
    root = FileStructureNode.directory(project_name, ROOT_DESCRIPTION)
    for line in text.splitlines():
        entry = line.strip()
        for marker in _BULLET_MARKERS:
            while entry.startswith(marker):
                entry = entry[len(marker) :]
        if not entry or entry.startswith("#"):
            continue
        clean = sanitize_path(entry, project_name)
        if not clean:
            continue
        is_directory = clean.endswith("/")
        insert_path(root, clean.rstrip("/"), is_directory=is_directory)
    return root


def insert_path(root: FileStructureNode, path: str, *, is_directory: bool) -> None:
    """Insert ``path`` below ``root``, creating intermediate directories.

    Existing nodes win: a repeated name is reused rather than replaced, and
    traversal continues into it. A file node never receives children, so a
    deeper path through an existing file is dropped.
    """
    parts = [segment for segment in path.split("/") if segment]
    current = root
    for index, part in enumerate(parts):
        last = index == len(parts) - 1
        existing = current.child(part)
        if existing is None:
            if last and not is_directory:
                node = FileStructureNode.file(part)
            else:
                node = FileStructureNode.directory(part)
            current.children.append(node)
            existing = node
        if last:
            return
        if not existing.is_directory:
            LOGGER.warning("Dropping path %s: %s is already a file", path, part)
            return
        current = existing
