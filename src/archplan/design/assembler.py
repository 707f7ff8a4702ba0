"""Map a raw generator design record onto a :class:`DesignDocument`."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Dict, List

from ..coercion import (
    DEFAULTS,
    as_list,
    as_mapping,
    as_optional_str,
    as_str,
    as_str_list,
    field,
)
from ..errors import InputShapeError
from ..models.schema import Component, DesignDocument, TechnologyStack, utc_now
from .file_structure import build_file_structure

__all__ = ["assemble_design", "map_component", "map_design_decision", "map_technology_stack"]

LOGGER = logging.getLogger(__name__)

_STACK_KEYS = {"language", "testing", "build_tool", "build", "key_dependencies", "dependencies"}


def assemble_design(raw: Any) -> DesignDocument:
    """Build a design document, defaulting every missing or mistyped field.

    ``None`` stands for an absent record and yields an all-default document.
    Any other non-mapping value is structurally meaningless and rejected.
    """
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise InputShapeError(
            f"expected an object, got {type(raw).__name__}",
            field="design",
        )

    project = as_str(raw.get("project"), DEFAULTS["project"])
    language = as_str(raw.get("language"), DEFAULTS["language"])
    components = [map_component(entry) for entry in as_list(raw.get("components"))]
    _log_unresolved_components(components)

    return DesignDocument(
        project=project,
        overview=as_str(raw.get("overview"), DEFAULTS["overview"]),
        component_diagram=as_optional_str(raw.get("architecture_diagram")),
        components=components,
        file_structure=build_file_structure(raw.get("file_structure"), project),
        technology_stack=map_technology_stack(raw.get("technology_stack"), language),
        design_decisions=[map_design_decision(entry) for entry in as_list(raw.get("design_decisions"))],
        version=DEFAULTS["schema_version"],
        created_at=utc_now(),
        updated_at=None,
    )


def map_technology_stack(raw: Any, language: str) -> TechnologyStack:
    stack = as_mapping(raw)
    build_tool = stack.get("build_tool")
    if not isinstance(build_tool, str):
        build_tool = stack.get("build")
    dependencies = stack.get("key_dependencies")
    if dependencies is None:
        dependencies = stack.get("dependencies")

    additional: Dict[str, str] = {
        str(key): value
        for key, value in stack.items()
        if key not in _STACK_KEYS and isinstance(value, str)
    }
    return TechnologyStack(
        language=language,
        testing_framework=as_str(stack.get("testing"), DEFAULTS["testing_framework"]),
        build_tool=as_str(build_tool, DEFAULTS["build_tool"]),
        dependencies=as_str_list(dependencies),
        additional=additional,
    )


def map_component(raw: Any) -> Component:
    file_path = field(raw, "file")
    if not isinstance(file_path, str):
        file_path = field(raw, "file_path")
    return Component(
        name=as_str(field(raw, "name"), ""),
        purpose=as_str(field(raw, "purpose"), ""),
        file_path=as_optional_str(file_path),
        interface=as_str_list(field(raw, "key_functions")),
        dependencies=as_str_list(field(raw, "dependencies")),
    )


def map_design_decision(raw: Any) -> str:
    """Flatten ``{decision, rationale}`` into ``"<decision>: <rationale>"``."""
    decision = as_str(field(raw, "decision"), "")
    rationale = as_str(field(raw, "rationale"), "")
    return f"{decision}: {rationale}"


def _log_unresolved_components(components: List[Component]) -> None:
    known = {component.name for component in components}
    for component in components:
        missing = [name for name in component.dependencies if name not in known]
        if missing:
            LOGGER.debug(
                "Component %s depends on unknown components: %s",
                component.name or "<unnamed>",
                ", ".join(missing),
            )
