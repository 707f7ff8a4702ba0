from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
import yaml
from typer.testing import CliRunner

from archplan.cli import app
from archplan.models.schema import TaskStatus
from archplan.persistence.store import ArtifactStore

runner = CliRunner()


def test_init_writes_default_config(tmp_path: Path) -> None:
    result = runner.invoke(app, ["init", "--dir", str(tmp_path)])

    assert result.exit_code == 0, result.output
    config = yaml.safe_load((tmp_path / "archplan.yaml").read_text(encoding="utf-8"))
    assert config["paths"]["tasks"] == "tasks.json"

    second = runner.invoke(app, ["init", "--dir", str(tmp_path)])
    assert "already exists" in second.output


def test_generate_then_status(tmp_path: Path, raw_file: Path) -> None:
    project_dir = tmp_path / "project"

    generated = runner.invoke(app, ["generate", str(raw_file), "--dir", str(project_dir)])

    assert generated.exit_code == 0, generated.output
    assert "T-001 - Scaffold crate" in generated.output
    assert "Generation complete." in generated.output
    assert (project_dir / "design.md").exists()

    status = runner.invoke(app, ["status", "--dir", str(project_dir)])

    assert status.exit_code == 0, status.output
    assert "Project: hello-world (rust)" in status.output
    assert "pending 2" in status.output
    assert "[pending] T-002 - CLI test" in status.output


def test_generate_uses_configured_names_and_raw_path(tmp_path: Path, hello_world_record: dict[str, Any]) -> None:
    (tmp_path / "archplan.yaml").write_text(
        yaml.safe_dump({"paths": {"raw": "llm.json", "tasks": "work.json"}, "output": {"level": "minimal"}}),
        encoding="utf-8",
    )
    (tmp_path / "llm.json").write_text(json.dumps(hello_world_record), encoding="utf-8")

    result = runner.invoke(app, ["generate", "--dir", str(tmp_path)])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "work.json").exists()
    assert "T-001" not in result.output
    assert "Generation complete." in result.output


def test_generate_reports_shape_errors(tmp_path: Path) -> None:
    raw = tmp_path / "architect.json"
    raw.write_text('{"design": 3}', encoding="utf-8")

    result = runner.invoke(app, ["generate", "--dir", str(tmp_path)])

    assert result.exit_code == 1
    assert "Error" in result.output
    assert not (tmp_path / "design.md").exists()
    assert not (tmp_path / "tasks.json").exists()


def test_status_without_snapshot(tmp_path: Path) -> None:
    result = runner.invoke(app, ["status", "--dir", str(tmp_path)])

    assert result.exit_code == 1
    assert "No task snapshot" in result.output


def test_status_with_corrupt_snapshot(tmp_path: Path) -> None:
    (tmp_path / "tasks.json").write_text("{", encoding="utf-8")

    result = runner.invoke(app, ["status", "--dir", str(tmp_path)])

    assert result.exit_code == 1
    assert "Corrupt task snapshot" in result.output


def test_validate_flags_cycles(tmp_path: Path, raw_file: Path) -> None:
    runner.invoke(app, ["generate", str(raw_file), "--dir", str(tmp_path)])
    ok = runner.invoke(app, ["validate", "--dir", str(tmp_path)])
    assert ok.exit_code == 0, ok.output
    assert "order: T-001, T-002" in ok.output

    store = ArtifactStore(tmp_path)
    task_list = store.load_tasks()
    task_list.get("T-001").dependencies.append("T-002")
    task_list.get("T-001").status = TaskStatus.BLOCKED
    store.save_tasks(task_list)

    broken = runner.invoke(app, ["validate", "--dir", str(tmp_path)])
    assert broken.exit_code == 1
    assert "Dependency cycle: T-001 -> T-002 -> T-001" in broken.output


def test_tree_prints_file_structure(raw_file: Path, tmp_path: Path) -> None:
    result = runner.invoke(app, ["tree", str(raw_file), "--dir", str(tmp_path)])

    assert result.exit_code == 0, result.output
    assert result.output.splitlines()[0] == "hello-world/"
    assert "└── Cargo.toml" in result.output


def test_invalid_config_is_reported(tmp_path: Path) -> None:
    (tmp_path / "archplan.yaml").write_text("- just\n- a list\n", encoding="utf-8")

    result = runner.invoke(app, ["status", "--dir", str(tmp_path)])

    assert result.exit_code == 1
    assert "mapping" in result.output


@pytest.mark.parametrize("section", ["paths", "artifacts", "output", "logging"])
def test_scalar_config_section_is_reported(tmp_path: Path, section: str) -> None:
    (tmp_path / "archplan.yaml").write_text(f"{section}: design.md\n", encoding="utf-8")

    result = runner.invoke(app, ["status", "--dir", str(tmp_path)])

    assert result.exit_code == 1
    assert f"Configuration section '{section}' must be a mapping." in result.output
