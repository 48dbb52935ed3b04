"""Status bands, the critical-constraint gate and the trend indicator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from .models import Constraint


class Status(str, Enum):
    HEALTHY = "healthy"
    WATCH = "watch"
    NOT_HEALTHY = "not_healthy"
    CONSTRAINT_FAIL = "constraint_fail"


class Trend(str, Enum):
    IMPROVING = "improving"
    DEGRADING = "degrading"
    STABLE = "stable"


@dataclass(frozen=True)
class StatusBands:
    """Values below ``not_healthy_below`` are not healthy, below ``watch_below`` are watch."""

    not_healthy_below: float = 60.0
    watch_below: float = 80.0

    def __post_init__(self) -> None:
        if not 0 <= self.not_healthy_below <= self.watch_below <= 100:
            raise ValueError("bands must satisfy 0 <= not_healthy_below <= watch_below <= 100")


@dataclass(frozen=True)
class GateResult:
    """Displayed status/value next to the raw computation they may override."""

    holistic: float
    computed_status: Status
    displayed_value: float
    status: Status
    failing_constraints: tuple[str, ...]

    @property
    def locked(self) -> bool:
        return self.status is Status.CONSTRAINT_FAIL


@dataclass(frozen=True)
class TrendReading:
    delta: float
    direction: Trend
    baseline: float | None


def classify(value: float, bands: StatusBands = StatusBands()) -> Status:
    if value < bands.not_healthy_below:
        return Status.NOT_HEALTHY
    if value < bands.watch_below:
        return Status.WATCH
    return Status.HEALTHY


def failing_critical_constraints(constraints: Iterable[Constraint]) -> list[Constraint]:
    return [c for c in constraints if c.critical and c.status == "fail"]


def gate(holistic: float, constraints: Iterable[Constraint], bands: StatusBands = StatusBands()) -> GateResult:
    """Force ``constraint_fail`` and a displayed 0 while any critical constraint fails."""

    computed = classify(holistic, bands)
    failing = tuple(c.id for c in failing_critical_constraints(constraints))
    if failing:
        return GateResult(
            holistic=holistic,
            computed_status=computed,
            displayed_value=0.0,
            status=Status.CONSTRAINT_FAIL,
            failing_constraints=failing,
        )
    return GateResult(
        holistic=holistic,
        computed_status=computed,
        displayed_value=holistic,
        status=computed,
        failing_constraints=(),
    )


def trend(current: float, previous: float | None, tolerance: float = 1.0) -> TrendReading:
    if previous is None:
        return TrendReading(delta=0.0, direction=Trend.STABLE, baseline=None)
    delta = current - previous
    if delta > tolerance:
        direction = Trend.IMPROVING
    elif delta < -tolerance:
        direction = Trend.DEGRADING
    else:
        direction = Trend.STABLE
    return TrendReading(delta=delta, direction=direction, baseline=previous)
