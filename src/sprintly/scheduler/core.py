"""Core dataclasses for the prediction engine."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class LanePrediction:
    """Projected interval for one lane of one task (both ends inclusive).

    Both dates are None when the lane is not scheduled (no owner or no effort).
    """

    start: date | None
    end: date | None

    @property
    def is_scheduled(self) -> bool:
        return self.start is not None and self.end is not None


UNSCHEDULED = LanePrediction(start=None, end=None)

# task id -> lane key -> prediction
PredictionMap = dict[int, dict[str, LanePrediction]]
