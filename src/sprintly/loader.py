"""YAML loading of task lists and sprint configuration files."""

from __future__ import annotations

from pathlib import Path
from typing import Any, cast

import yaml
from pydantic import ValidationError as PydanticValidationError

from . import context
from .config import SprintConfig
from .exceptions import ParseError, ValidationError
from .logger import get_logger
from .models import Task
from .scheduler.calendar import generate_rota_dates

logger = get_logger()

CONFIG_FILENAME = "sprintly_config.yaml"

WEEKDAYS = {
    "mon": 1,
    "tue": 2,
    "wed": 3,
    "thu": 4,
    "fri": 5,
    "sat": 6,
    "sun": 7,
}


def _read_yaml(path: Path | str) -> dict[str, Any]:
    path = Path(path)
    if not path.exists():
        raise ParseError(f"File not found: {path}")

    try:
        with path.open(encoding="utf-8") as f:
            data: Any = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ParseError(f"Failed to parse YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ParseError(f"{path}: YAML must contain a dictionary at the root level")
    return data  # type: ignore[return-value]


def parse_weekday(value: int | str) -> int:
    """Parse an ISO weekday given as a number (1=Monday) or a name ("thu", "Thursday")."""
    if isinstance(value, int):
        return value
    text = str(value).strip().lower()
    if text.isdigit():
        return int(text)
    weekday = WEEKDAYS.get(text[:3])
    if weekday is None:
        raise ValueError(f"Unknown weekday: {value!r}")
    return weekday


def parse_tasks(data: dict[str, Any]) -> list[Task]:
    """Build tasks from loaded YAML data with a top-level ``tasks`` list."""
    raw_tasks = data.get("tasks")
    if raw_tasks is None:
        raise ValidationError("Task file must contain a 'tasks' list")
    if not isinstance(raw_tasks, list):
        raise ValidationError("'tasks' must be a list")

    tasks: list[Task] = []
    seen: set[int] = set()
    for index, raw in enumerate(raw_tasks):  # type: ignore[misc]
        try:
            task = Task.model_validate(raw)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid task at position {index}: {e}") from e
        if task.id in seen:
            raise ValidationError(f"Duplicate task id {task.id}")
        seen.add(task.id)
        tasks.append(task)
    return tasks


def load_tasks(path: Path | str) -> list[Task]:
    """Load a task list from a YAML file.

    Raises:
        ParseError: If the file is missing or not valid YAML
        ValidationError: If a task is invalid or IDs are duplicated
    """
    tasks = parse_tasks(_read_yaml(path))
    logger.checks(f"Loaded {len(tasks)} task(s) from {path}")
    return tasks


def write_tasks(path: Path | str, tasks: list[Task]) -> None:
    """Write tasks back to a YAML task file."""
    data = {"tasks": [task.model_dump(mode="json", exclude_none=True) for task in tasks]}
    with Path(path).open("w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)


def parse_sprint_config(data: dict[str, Any]) -> SprintConfig:
    """Build a SprintConfig from loaded YAML data.

    An optional ``rota`` section (``person: weekday``) is expanded into L2
    events for every matching day of the sprint window.
    """
    raw_rota: Any = data.get("rota") or {}
    if not isinstance(raw_rota, dict):
        raise ValidationError("'rota' must map each person to a weekday")
    rota = cast(dict[str, Any], raw_rota)
    config_data = {k: v for k, v in data.items() if k != "rota"}

    try:
        config = SprintConfig.model_validate(config_data)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid sprint config: {e}") from e

    events = list(config.calendar_events)
    if rota:
        if config.sprint_end is None:
            raise ValidationError("A 'rota' section requires sprint_end")
        for person, weekday in rota.items():
            try:
                iso_weekday = parse_weekday(weekday)
                events.extend(
                    generate_rota_dates(
                        str(person), iso_weekday, config.sprint_start, config.sprint_end, "L2 rota"
                    )
                )
            except ValueError as e:
                raise ValidationError(f"Invalid rota entry for {person}: {e}") from e

    # Calendar events are deduplicated here, where they enter the system
    return config.model_copy(update={"calendar_events": []}).with_events(events)


def load_sprint_config(path: Path | str) -> SprintConfig:
    """Load a sprint configuration from a YAML file.

    Raises:
        ParseError: If the file is missing or not valid YAML
        ValidationError: If the configuration is invalid
    """
    config = parse_sprint_config(_read_yaml(path))
    logger.checks(
        f"Loaded sprint config from {path}: {config.sprint_start} .. {config.sprint_end}, "
        f"{len(config.holidays)} holiday(s), {len(config.calendar_events)} calendar event(s), "
        f"{len(config.task_delays)} delay(s)"
    )
    return config


def discover_config(tasks_path: Path | str, config_path: Path | None = None) -> SprintConfig:
    """Find and load the sprint config for a task file.

    Search order:
    1. Explicit config_path argument, else the global context (CLI --config);
       either must exist
    2. tasks file directory / sprintly_config.yaml
    3. Current directory / sprintly_config.yaml

    Raises:
        ParseError: If no config file can be found or the explicit path is missing
    """
    explicit = config_path or context.get_config_path()
    if explicit is not None:
        return load_sprint_config(explicit)

    candidates = [
        Path(tasks_path).parent / CONFIG_FILENAME,
        Path(CONFIG_FILENAME),
    ]
    for candidate in candidates:
        if candidate.exists():
            return load_sprint_config(candidate)

    raise ParseError(
        f"No sprint config found: pass --config or create {CONFIG_FILENAME} "
        "next to the task file"
    )
