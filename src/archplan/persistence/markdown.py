"""Render a design document as human-readable Markdown."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from ..models.schema import Component, DesignDocument, TechnologyStack


def _timestamp(value: Optional[datetime]) -> str:
    if value is None:
        return "-"
    return value.isoformat()


def _render_stack(stack: TechnologyStack) -> List[str]:
    lines = [
        f"- **Language:** {stack.language}",
        f"- **Testing:** {stack.testing_framework}",
        f"- **Build tool:** {stack.build_tool}",
    ]
    if stack.dependencies:
        lines.append(f"- **Dependencies:** {', '.join(stack.dependencies)}")
    for key, value in stack.additional.items():
        lines.append(f"- **{key}:** {value}")
    return lines


def _render_component(component: Component) -> List[str]:
    lines = [f"### {component.name or 'Unnamed component'}", ""]
    if component.purpose:
        lines.extend([component.purpose, ""])
    if component.file_path:
        lines.append(f"- **File:** `{component.file_path}`")
    if component.interface:
        lines.append("- **Interface:**")
        lines.extend(f"  - `{entry}`" for entry in component.interface)
    if component.dependencies:
        lines.append(f"- **Depends on:** {', '.join(component.dependencies)}")
    lines.append("")
    return lines


def render_design_markdown(design: DesignDocument) -> str:
    """Return the Markdown rendering of ``design``; output is deterministic."""
    lines: List[str] = [
        f"# {design.project} - System Design",
        "",
        f"- **Version:** {design.version}",
        f"- **Created:** {_timestamp(design.created_at)}",
        f"- **Updated:** {_timestamp(design.updated_at)}",
        "",
        "## Overview",
        "",
        design.overview or "_No overview provided._",
        "",
    ]

    if design.technology_stack is not None:
        lines.extend(["## Technology Stack", ""])
        lines.extend(_render_stack(design.technology_stack))
        lines.append("")

    if design.component_diagram:
        lines.extend(["## Architecture", "", design.component_diagram.strip(), ""])

    if design.components:
        lines.extend(["## Components", ""])
        for component in design.components:
            lines.extend(_render_component(component))

    if design.file_structure is not None:
        lines.extend(["## File Structure", "", "```", design.file_structure.render_tree(), "```", ""])

    if design.design_decisions:
        lines.extend(["## Design Decisions", ""])
        lines.extend(f"- {decision}" for decision in design.design_decisions)
        lines.append("")

    return "\n".join(lines).rstrip() + "\n"
