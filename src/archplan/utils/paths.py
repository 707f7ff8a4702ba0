"""Normalise generator-supplied paths to project-relative form."""

from __future__ import annotations

import logging

LOGGER = logging.getLogger(__name__)


def kebab_project_name(name: str) -> str:
    """Lower-case ``name`` and replace spaces with hyphens."""
    return name.lower().replace(" ", "-")


def sanitize_path(path: str, project_name: str) -> str:
    """Strip ``./`` and one redundant leading project-name segment from ``path``.

    The literal project name is tried first, then its lower-kebab form. Each
    candidate is stripped at most once; the result may be empty.
    """
    clean = path.strip()
    if clean.startswith("./"):
        clean = clean[2:]

    for candidate in (project_name, kebab_project_name(project_name)):
        prefix = f"{candidate}/"
        if clean.startswith(prefix):
            stripped = clean[len(prefix) :]
            LOGGER.warning(
                "Stripped redundant project name prefix from path: %s -> %s",
                path,
                stripped,
            )
            clean = stripped

    return clean
