"""Command-line interface for Sprintly."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from . import context
from .config import SprintConfig
from .exceptions import SprintlyError
from .loader import discover_config, load_tasks, write_tasks
from .logger import setup_logger
from .models import LANE_KEYS, Task
from .scheduler import (
    cascade_risks,
    check_dependencies,
    compute_predictions,
    compute_velocity,
    find_cycles,
    stamp_planned_ends,
    task_predicted_end,
    write_predictions_file,
)

app = typer.Typer(
    name="sprintly",
    help="Sprint planning with per-lane delivery predictions",
    add_completion=False,
)

TasksArgument = Annotated[Path, typer.Argument(help="Path to the task list YAML file")]


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbosity level: 0=silent (default), 1=show changes, 2=show all checks, 3=debug",
            min=0,
            max=3,
        ),
    ] = 0,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to the sprint config file (default: sprintly_config.yaml)",
        ),
    ] = None,
) -> None:
    """Global options for sprintly commands."""
    setup_logger(verbose)
    context.set_config_path(config)


def _load(file: Path) -> tuple[list[Task], SprintConfig]:
    try:
        return load_tasks(file), discover_config(file)
    except SprintlyError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None


@app.command()
def predict(
    file: TasksArgument = Path("tasks.yaml"),
    *,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the predictions to a YAML snapshot file"),
    ] = None,
    strict: Annotated[
        bool,
        typer.Option("--strict", help="Fail on circular or unknown dependencies"),
    ] = False,
) -> None:
    """Predict start and end dates for every lane of every task."""
    tasks, config = _load(file)

    if strict:
        try:
            check_dependencies(tasks)
        except SprintlyError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1) from None

    predictions = compute_predictions(tasks, config)

    if output:
        write_predictions_file(output, predictions)
        typer.echo(f"Predictions written to {output}")
        return

    at_risk = {task.id for task in cascade_risks(tasks, predictions, config.sprint_end)}

    for task in tasks:
        if task.id not in predictions:
            continue
        predicted_end = task_predicted_end(task.id, predictions)
        typer.echo(f"{task.name} ({task.id})")
        typer.echo(f"  Predicted End: {predicted_end or '-'}")
        for lane in LANE_KEYS:
            prediction = predictions[task.id][lane]
            if not prediction.is_scheduled:
                continue
            typer.echo(f"  {lane:<4} {task.owner(lane):<12} {prediction.start} .. {prediction.end}")
        if config.sprint_end and predicted_end and predicted_end > config.sprint_end:
            typer.echo("  ⚠️  ENDS AFTER SPRINT")
        if task.id in at_risk:
            typer.echo("  ⚠️  CASCADE RISK: a dependency also ends after the sprint")
        typer.echo("")

    found = find_cycles(tasks)
    if found:
        typer.echo("\nWarnings:", err=True)
        typer.echo(
            f"  - Circular dependencies involve task(s): {', '.join(map(str, sorted(found)))}",
            err=True,
        )


@app.command()
def cycles(file: TasksArgument = Path("tasks.yaml")) -> None:
    """Report tasks involved in circular dependencies (exit code 1 if any)."""
    try:
        tasks = load_tasks(file)
    except SprintlyError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    found = find_cycles(tasks)
    if not found:
        typer.echo("No circular dependencies")
        return

    names = {task.id: task.name for task in tasks}
    typer.echo("Circular dependencies involve:")
    for task_id in sorted(found):
        typer.echo(f"  {task_id}: {names[task_id]}")
    raise typer.Exit(1)


@app.command()
def velocity(file: TasksArgument = Path("tasks.yaml")) -> None:
    """Show average slip per person from tasks with planned and actual ends."""
    try:
        tasks = load_tasks(file)
    except SprintlyError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    stats = compute_velocity(tasks)
    if not stats:
        typer.echo("No tasks with both a planned and an actual end yet")
        return

    typer.echo(f"{'Person':<16}{'Tasks':>6}{'Avg slip':>10}")
    for person in sorted(stats, key=lambda p: (-stats[p].avg_slip, p)):
        entry = stats[person]
        typer.echo(f"{person:<16}{entry.count:>6}{entry.avg_slip:>+9}d")


@app.command()
def stamp(
    file: TasksArgument = Path("tasks.yaml"),
    *,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write to this file instead of updating in place"),
    ] = None,
) -> None:
    """Freeze the current predicted end as planned_end on tasks that lack one."""
    tasks, config = _load(file)

    stamped = stamp_planned_ends(tasks, config)
    changed = sum(
        1 for before, after in zip(tasks, stamped) if before.planned_end != after.planned_end
    )

    target = output or file
    write_tasks(target, stamped)
    typer.echo(f"Stamped planned end on {changed} task(s), written to {target}")


def main() -> int:
    """Main entry point."""
    app()
    return 0


if __name__ == "__main__":
    main()
