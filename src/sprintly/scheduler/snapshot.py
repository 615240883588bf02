"""Prediction snapshot files.

A snapshot stores the output of one prediction run as YAML so it can be
diffed against a later run or handed to a reporting tool.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any, cast

import yaml

from sprintly.models import LANE_KEYS

from .core import UNSCHEDULED, LanePrediction, PredictionMap

SNAPSHOT_VERSION = 1


def write_predictions_file(path: Path, predictions: PredictionMap) -> None:
    """Export a prediction map to a YAML snapshot.

    Unscheduled lanes are omitted.
    """
    tasks_data: dict[int, dict[str, dict[str, str]]] = {}
    for task_id in sorted(predictions):
        lanes: dict[str, dict[str, str]] = {}
        for lane, prediction in predictions[task_id].items():
            if prediction.start is None or prediction.end is None:
                continue
            lanes[lane] = {
                "start": prediction.start.isoformat(),
                "end": prediction.end.isoformat(),
            }
        tasks_data[task_id] = lanes

    output: dict[str, Any] = {
        "version": SNAPSHOT_VERSION,
        "predictions": tasks_data,
    }

    with path.open("w") as f:
        yaml.safe_dump(output, f, default_flow_style=False, sort_keys=False)


def read_predictions_file(path: Path) -> PredictionMap:
    """Load a prediction snapshot.

    Lanes missing from the file are unscheduled, so every task gets an entry
    for each lane.

    Raises:
        ValueError: If the file format is invalid or the version is unsupported
    """
    with path.open() as f:
        raw_data: Any = yaml.safe_load(f)

    if not isinstance(raw_data, dict):
        raise ValueError(f"Invalid snapshot format: expected dict, got {type(raw_data)}")

    data = cast(dict[str, Any], raw_data)

    version = data.get("version")
    if version != SNAPSHOT_VERSION:
        raise ValueError(f"Unsupported snapshot version {version}, expected {SNAPSHOT_VERSION}")

    raw_tasks = data.get("predictions") or {}
    if not isinstance(raw_tasks, dict):
        raise ValueError("Snapshot 'predictions' field must be a dict")

    predictions: PredictionMap = {}
    for task_id, raw_lanes in cast(dict[Any, Any], raw_tasks).items():
        if not isinstance(raw_lanes, dict):
            raise ValueError(f"Predictions for task {task_id} must be a dict")
        lanes: dict[str, LanePrediction] = dict.fromkeys(LANE_KEYS, UNSCHEDULED)
        for lane, interval in cast(dict[str, Any], raw_lanes).items():
            if lane not in LANE_KEYS:
                raise ValueError(f"Unknown lane '{lane}' for task {task_id}")
            if not interval:
                continue
            try:
                lanes[lane] = LanePrediction(
                    start=_parse_date(interval["start"]), end=_parse_date(interval["end"])
                )
            except (KeyError, TypeError, ValueError) as e:
                raise ValueError(f"Invalid interval for task {task_id} lane '{lane}': {e}") from e
        predictions[int(task_id)] = lanes

    return predictions


def _parse_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))
