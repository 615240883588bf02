"""Tests for prediction snapshot files."""

from datetime import date
from pathlib import Path

import pytest
import yaml

from sprintly.models import LANE_KEYS
from sprintly.scheduler import (
    UNSCHEDULED,
    LanePrediction,
    PredictionMap,
    compute_predictions,
    read_predictions_file,
    write_predictions_file,
)
from sprintly.scheduler.snapshot import SNAPSHOT_VERSION
from tests.conftest import make_config, make_task


class TestWritePredictionsFile:
    """Tests for write_predictions_file."""

    def test_write_basic_snapshot(self, tmp_path: Path) -> None:
        """Write a snapshot and check the YAML layout."""
        predictions: PredictionMap = {
            2: {"and": LanePrediction(date(2026, 2, 25), date(2026, 2, 27)), "qa": UNSCHEDULED},
            1: {"and": LanePrediction(date(2026, 2, 23), date(2026, 2, 24))},
        }
        path = tmp_path / "predictions.yaml"

        write_predictions_file(path, predictions)

        data = yaml.safe_load(path.read_text())
        assert data["version"] == SNAPSHOT_VERSION
        assert list(data["predictions"]) == [1, 2]
        assert data["predictions"][2] == {"and": {"start": "2026-02-25", "end": "2026-02-27"}}

    def test_read_back_engine_output(self, tmp_path: Path) -> None:
        """An engine run survives a write and read unchanged."""
        tasks = [
            make_task(1, owners={"ios": "Hari", "qa": "Gengu"}, effort={"ios": 2, "qa": 1}),
            make_task(2, owner="Sam", effort=3, depends_on=[1]),
        ]
        predictions = compute_predictions(tasks, make_config())
        path = tmp_path / "predictions.yaml"

        write_predictions_file(path, predictions)
        loaded = read_predictions_file(path)

        assert loaded == predictions

    def test_task_without_scheduled_lanes(self, tmp_path: Path) -> None:
        path = tmp_path / "predictions.yaml"
        write_predictions_file(path, {7: {"ios": UNSCHEDULED}})

        assert read_predictions_file(path) == {7: dict.fromkeys(LANE_KEYS, UNSCHEDULED)}


class TestReadPredictionsFile:
    """Tests for read_predictions_file."""

    def test_null_interval_is_unscheduled(self, tmp_path: Path) -> None:
        path = tmp_path / "predictions.yaml"
        path.write_text("version: 1\npredictions:\n  3:\n    qa: null\n")

        loaded = read_predictions_file(path)

        assert loaded[3]["qa"] == UNSCHEDULED
        assert set(loaded[3]) == set(LANE_KEYS)

    def test_unquoted_dates(self, tmp_path: Path) -> None:
        path = tmp_path / "predictions.yaml"
        path.write_text(
            "version: 1\npredictions:\n  3:\n    be: {start: 2026-03-02, end: 2026-03-03}\n"
        )

        loaded = read_predictions_file(path)

        assert loaded[3]["be"] == LanePrediction(date(2026, 3, 2), date(2026, 3, 3))
        assert loaded[3]["ios"] == UNSCHEDULED

    def test_empty_predictions(self, tmp_path: Path) -> None:
        path = tmp_path / "predictions.yaml"
        path.write_text("version: 1\npredictions:\n")

        assert read_predictions_file(path) == {}

    def test_not_a_dict(self, tmp_path: Path) -> None:
        path = tmp_path / "predictions.yaml"
        path.write_text("- 1\n- 2\n")

        with pytest.raises(ValueError, match="expected dict"):
            read_predictions_file(path)

    def test_unsupported_version(self, tmp_path: Path) -> None:
        path = tmp_path / "predictions.yaml"
        path.write_text("version: 99\npredictions: {}\n")

        with pytest.raises(ValueError, match="Unsupported snapshot version 99"):
            read_predictions_file(path)

    def test_predictions_not_a_dict(self, tmp_path: Path) -> None:
        path = tmp_path / "predictions.yaml"
        path.write_text("version: 1\npredictions: [1, 2]\n")

        with pytest.raises(ValueError, match="must be a dict"):
            read_predictions_file(path)

    def test_bad_interval(self, tmp_path: Path) -> None:
        path = tmp_path / "predictions.yaml"
        path.write_text("version: 1\npredictions:\n  3:\n    be: {start: 2026-03-02}\n")

        with pytest.raises(ValueError, match="Invalid interval for task 3 lane 'be'"):
            read_predictions_file(path)

    def test_unknown_lane(self, tmp_path: Path) -> None:
        path = tmp_path / "predictions.yaml"
        path.write_text(
            "version: 1\npredictions:\n  3:\n    web: {start: 2026-03-02, end: 2026-03-03}\n"
        )

        with pytest.raises(ValueError, match="Unknown lane 'web' for task 3"):
            read_predictions_file(path)
