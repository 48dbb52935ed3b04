"""Full recomputation of derived scores from a session document."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from .catalog import DEFAULT_ROLE, ROLES, RoleLens
from .config import RaceSafetySettings
from .health import Status, Trend, gate, trend
from .models import Document
from .scoring import (
    control_health_pct,
    domain_readiness,
    holistic_health,
    readiness_pct,
    residual_risk,
    risk_load_pct,
)
from .views import visible_controls, visible_domains, visible_hazards


@dataclass(frozen=True)
class ScoreSnapshot:
    """Everything a view or report needs after one recompute. Plain data only."""

    template_key: str
    role: str
    risk_load: float
    control_health: float
    readiness: float
    holistic: float
    computed_status: Status
    status: Status
    displayed_value: float
    failing_constraints: tuple[str, ...]
    trend: Trend
    trend_delta: float
    trend_baseline: float | None
    # Value written back as ``last_holistic`` (raw or gated per policy).
    persisted_value: float
    domain_readiness: dict[str, float] = field(default_factory=dict)
    residual_risk: dict[str, float] = field(default_factory=dict)
    visible_domains: tuple[str, ...] = ()
    visible_hazards: tuple[str, ...] = ()
    visible_controls: tuple[str, ...] = ()

    @property
    def locked(self) -> bool:
        return self.status is Status.CONSTRAINT_FAIL

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["computed_status"] = self.computed_status.value
        payload["status"] = self.status.value
        payload["trend"] = self.trend.value
        payload["locked"] = self.locked
        for key in ("failing_constraints", "visible_domains", "visible_hazards", "visible_controls"):
            payload[key] = list(payload[key])
        return payload


def resolve_role(name: str) -> RoleLens:
    # Stored documents may carry a role that no longer exists.
    return ROLES.get(name) or ROLES[DEFAULT_ROLE]


def recompute(
    document: Document,
    settings: RaceSafetySettings | None = None,
    previous: float | None = None,
) -> ScoreSnapshot:
    """Score the document as seen through its role and selectors.

    ``previous`` is the session's trend baseline; it is compared against the
    raw or the gated holistic value depending on ``settings.status.trend_baseline``.
    """

    settings = settings or RaceSafetySettings()
    scoring = settings.scoring
    role = resolve_role(document.role)

    domains = visible_domains(role)
    hazards = visible_hazards(role, document.hazards, document.domain_filter, document.segment_filter)
    controls = visible_controls(role, document.controls)

    risk_load = risk_load_pct(hazards, divisor=scoring.risk_divisor)
    control_health = control_health_pct(controls, penalty_per_uca=scoring.penalty_per_uca)
    readiness = readiness_pct(domains, document.readiness)
    holistic = holistic_health(risk_load, control_health, readiness, scoring.weights())

    gated = gate(holistic, document.constraints, settings.status.bands())
    tracked = holistic if settings.status.trend_baseline == "raw" else gated.displayed_value
    reading = trend(tracked, previous, settings.status.trend_tolerance)

    return ScoreSnapshot(
        template_key=document.template_key,
        role=role.name,
        risk_load=risk_load,
        control_health=control_health,
        readiness=readiness,
        holistic=holistic,
        computed_status=gated.computed_status,
        status=gated.status,
        displayed_value=gated.displayed_value,
        failing_constraints=gated.failing_constraints,
        trend=reading.direction,
        trend_delta=reading.delta,
        trend_baseline=reading.baseline,
        persisted_value=tracked,
        domain_readiness={d: domain_readiness(d, document.readiness) for d in domains},
        residual_risk={h.id: residual_risk(h) for h in hazards},
        visible_domains=tuple(domains),
        visible_hazards=tuple(h.id for h in hazards),
        visible_controls=tuple(c.id for c in controls),
    )
