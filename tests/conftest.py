from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture()
def hello_world_record() -> dict[str, Any]:
    """Generator output for a minimal Rust CLI, as the architect model emits it."""

    return {
        "design": {
            "project": "hello-world",
            "overview": "Prints a greeting.",
            "language": "rust",
            "technology_stack": {
                "testing": "cargo test",
                "build_tool": "cargo",
                "key_dependencies": ["clap"],
            },
            "architecture_diagram": "```mermaid\nflowchart LR\n  main --> greeting\n```",
            "components": [
                {
                    "name": "main",
                    "purpose": "Entry point",
                    "file": "src/main.rs",
                    "key_functions": ["fn main()", "fn get_greeting() -> String"],
                    "dependencies": [],
                }
            ],
            "file_structure": {
                "directories": ["src", "tests"],
                "files": ["Cargo.toml", "src/main.rs", "tests/cli.rs"],
            },
            "design_decisions": [
                {"decision": "Single binary", "rationale": "Scope is one user story"},
            ],
        },
        "tasks": [
            {
                "id": "T-001",
                "title": "Scaffold crate",
                "description": "Create Cargo.toml and src/main.rs",
                "priority": 1,
                "estimated_complexity": "low",
                "dependencies": [],
                "user_story_id": "US-001",
                "files_to_create": ["Cargo.toml", "src/main.rs"],
                "files_to_modify": [],
                "acceptance_criteria": ["WHEN built, THE crate SHALL compile"],
            },
            {
                "id": "T-002",
                "title": "CLI test",
                "description": "Assert the greeting",
                "priority": 2,
                "estimated_complexity": "medium",
                "dependencies": ["T-001"],
                "user_story_id": "US-001",
                "files_to_create": ["tests/cli.rs"],
                "files_to_modify": ["src/main.rs"],
                "acceptance_criteria": [
                    "WHEN run, THE program SHALL print Hello, World!",
                    "WHEN tested, THE suite SHALL pass",
                ],
            },
        ],
    }


@pytest.fixture()
def raw_file(tmp_path: Path, hello_world_record: dict[str, Any]) -> Path:
    """Write the hello-world record to disk the way the generator layer does."""

    path = tmp_path / "architect.json"
    path.write_text(json.dumps(hello_world_record), encoding="utf-8")
    return path
