"""CLI commands for generating and inspecting design and task artifacts."""

from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import typer
import yaml

from .design.assembler import assemble_design
from .errors import ArchplanError, SnapshotNotFoundError
from .generation import generate_from_file
from .models.schema import TaskStatus
from .output import (
    DebugLevel,
    Error,
    Event,
    ListItem,
    Phase,
    PhaseComplete,
    Progress,
    Status,
    Success,
    TaskLine,
    Warn,
    render,
)
from .persistence.store import DEFAULT_DESIGN_NAME, DEFAULT_TASKS_NAME, ArtifactStore
from .planning.validation import validate_task_graph
from .raw import load_raw_record

APP_HELP = "Turn generator design output into a design document and task list."
DEFAULT_CONFIG_NAME = "archplan.yaml"

DEFAULT_CONFIG_TEMPLATE: Dict[str, Any] = {
    "paths": {
        "design": DEFAULT_DESIGN_NAME,
        "tasks": DEFAULT_TASKS_NAME,
        "raw": "architect.json",
    },
    "artifacts": {
        "paired_writes": False,
    },
    "output": {
        "level": DebugLevel.NORMAL.value,
    },
    "logging": {
        "level": "WARNING",
    },
}

app = typer.Typer(help=APP_HELP)


def _copy_config_template() -> Dict[str, Any]:
    """Return a deep copy of the default configuration template."""
    return copy.deepcopy(DEFAULT_CONFIG_TEMPLATE)


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value
    return base


def load_config(config_path: Path) -> Dict[str, Any]:
    """Load YAML configuration merged over the defaults; a missing file is fine."""
    config = _copy_config_template()
    if not config_path.exists():
        return config

    try:
        with config_path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except yaml.YAMLError as error:
        typer.echo(f"Failed to parse config: {error}", err=True)
        raise typer.Exit(code=1) from error

    if not isinstance(data, dict):
        typer.echo("Configuration must be a mapping at the top level.", err=True)
        raise typer.Exit(code=1)

    config = _merge(config, data)
    for section in DEFAULT_CONFIG_TEMPLATE:
        if not isinstance(config.get(section), dict):
            typer.echo(f"Configuration section '{section}' must be a mapping.", err=True)
            raise typer.Exit(code=1)
    return config


def _write_config(config_path: Path, config_data: Dict[str, Any]) -> None:
    """Persist configuration data to disk with stable formatting."""
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with config_path.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(config_data, handle, sort_keys=False)


def _output_level(config: Dict[str, Any]) -> DebugLevel:
    value = str((config.get("output") or {}).get("level") or DebugLevel.NORMAL.value).lower()
    try:
        return DebugLevel(value)
    except ValueError:
        return DebugLevel.NORMAL


def _configure_logging(config: Dict[str, Any], override: Optional[str]) -> None:
    level_name = override or str((config.get("logging") or {}).get("level") or "WARNING")
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger().setLevel(level)


def _emit(level: DebugLevel, event: Event) -> None:
    err = isinstance(event, Error)
    for line in render(level, event):
        typer.echo(line, err=err)


def _prepare(ctx: typer.Context, project_dir: Path, config: Optional[Path]) -> tuple[Dict[str, Any], DebugLevel]:
    config_path = config if config is not None else project_dir / DEFAULT_CONFIG_NAME
    config_data = load_config(config_path)
    _configure_logging(config_data, (ctx.obj or {}).get("log_level"))
    return config_data, _output_level(config_data)


def _resolve_raw_path(project_dir: Path, raw: Optional[Path], config: Dict[str, Any]) -> Path:
    if raw is not None:
        return raw
    raw_value = (config.get("paths") or {}).get("raw") or "architect.json"
    return project_dir / str(raw_value)


DIR_OPTION = typer.Option(Path("."), "--dir", "-d", help="Project working directory.")
CONFIG_OPTION = typer.Option(None, "--config", "-c", help="Path to the archplan configuration file.")


@app.callback()
def main(
    ctx: typer.Context,
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level for diagnostics (overrides the config file).",
    ),
) -> None:
    """Turn generator design output into a design document and task list."""
    ctx.obj = {"log_level": log_level}


@app.command()
def init(
    project_dir: Path = DIR_OPTION,
    force: bool = typer.Option(False, "--force", help="Overwrite an existing configuration file."),
) -> None:
    """Write a default configuration file into the project directory."""
    config_path = project_dir / DEFAULT_CONFIG_NAME
    if config_path.exists() and not force:
        typer.echo(f"Configuration already exists at {config_path}.")
        return
    _write_config(config_path, _copy_config_template())
    typer.echo(f"Created configuration at {config_path}.")


@app.command()
def generate(
    ctx: typer.Context,
    raw: Optional[Path] = typer.Argument(None, help="Generator output holding the design and tasks."),
    project_dir: Path = DIR_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
    paired: Optional[bool] = typer.Option(
        None,
        "--paired/--no-paired",
        help="Stage both artifacts before renaming either into place.",
    ),
) -> None:
    """Run one generation cycle and write the design and task artifacts."""
    config_data, level = _prepare(ctx, project_dir, config)
    raw_path = _resolve_raw_path(project_dir, raw, config_data)
    if paired is None:
        paired = bool((config_data.get("artifacts") or {}).get("paired_writes"))

    store = ArtifactStore.from_config(project_dir, config_data)
    _emit(level, Phase("Generating design and tasks"))
    _emit(level, Status(f"Reading {raw_path}"))
    try:
        result = generate_from_file(raw_path, store, paired=paired)
    except ArchplanError as error:
        _emit(level, Error(str(error)))
        raise typer.Exit(code=1) from error

    design = result.design
    _emit(level, Status(f"Project: {design.project}"))
    _emit(level, Status(f"Components: {len(design.components)}"))
    for component in design.components:
        _emit(level, ListItem(component.name or "<unnamed>"))
    _emit(level, Status(f"Tasks: {len(result.tasks.tasks)}"))
    for task in result.tasks.tasks:
        _emit(level, TaskLine(task.id, task.title))
    if design.file_structure is None:
        _emit(level, Warn("No file structure in generator output."))
    _emit(level, PhaseComplete(f"Wrote {result.design_path} and {result.tasks_path}"))
    _emit(level, Success("Generation complete."))


@app.command()
def status(
    ctx: typer.Context,
    project_dir: Path = DIR_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
) -> None:
    """Report task progress from the persisted snapshot."""
    config_data, level = _prepare(ctx, project_dir, config)
    store = ArtifactStore.from_config(project_dir, config_data)
    try:
        task_list = store.load_tasks()
    except SnapshotNotFoundError as error:
        _emit(level, Error(f"No task snapshot at {error.path}; run `archplan generate` first."))
        raise typer.Exit(code=1) from error
    except ArchplanError as error:
        _emit(level, Error(str(error)))
        raise typer.Exit(code=1) from error

    counts = task_list.status_counts()
    typer.echo(f"Project: {task_list.project} ({task_list.language})")
    typer.echo(" | ".join(f"{state.value} {counts[state]}" for state in TaskStatus))
    for task in task_list.tasks:
        _emit(level, TaskLine(task.id, task.title, status=task.status.value))
    _emit(level, Progress(counts[TaskStatus.COMPLETED], len(task_list.tasks)))


@app.command()
def validate(
    ctx: typer.Context,
    project_dir: Path = DIR_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
) -> None:
    """Check task ids and dependencies for gaps and cycles."""
    config_data, level = _prepare(ctx, project_dir, config)
    store = ArtifactStore.from_config(project_dir, config_data)
    try:
        task_list = store.load_tasks()
    except ArchplanError as error:
        _emit(level, Error(str(error)))
        raise typer.Exit(code=1) from error

    report = validate_task_graph(task_list)
    for task_id in report.duplicate_ids:
        _emit(level, Warn(f"Duplicate task id: {task_id}"))
    for task_id, missing in report.missing_dependencies.items():
        _emit(level, Warn(f"{task_id} depends on unknown task(s): {', '.join(missing)}"))
    for cycle in report.cycles:
        _emit(level, Warn(f"Dependency cycle: {' -> '.join(cycle + cycle[:1])}"))
    if not report.ok:
        _emit(level, Error("Task graph validation failed."))
        raise typer.Exit(code=1)
    _emit(level, Success(f"Task graph OK; order: {', '.join(report.order or [])}"))


@app.command()
def tree(
    ctx: typer.Context,
    raw: Optional[Path] = typer.Argument(None, help="Generator output holding the design."),
    project_dir: Path = DIR_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
) -> None:
    """Print the project file tree assembled from generator output."""
    config_data, level = _prepare(ctx, project_dir, config)
    raw_path = _resolve_raw_path(project_dir, raw, config_data)
    try:
        design = assemble_design(load_raw_record(raw_path).get("design"))
    except ArchplanError as error:
        _emit(level, Error(str(error)))
        raise typer.Exit(code=1) from error

    if design.file_structure is None:
        typer.echo("No file structure.")
        return
    typer.echo(design.file_structure.render_tree())


if __name__ == "__main__":
    app()
