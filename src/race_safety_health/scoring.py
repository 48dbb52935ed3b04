"""Scoring engine: FMEA risk load, STPA control health and EMBOK readiness.

All functions are pure. They score exactly the collections they are given
and never mutate them. Every percentage is clamped to ``[0, 100]`` and empty
inputs map to a neutral value instead of raising.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Sequence

from .catalog import DEFAULT_READINESS, DOMAINS, READINESS_CRITERIA, ReadinessCriterion
from .models import Control, Hazard

DEFAULT_PENALTY_PER_UCA = 0.1
DEFAULT_RISK_DIVISOR = 10.0


@dataclass(frozen=True)
class HealthWeights:
    """Blend of the three pillars into holistic health. Must sum to 1."""

    readiness: float = 1.0 / 3.0
    control: float = 1.0 / 3.0
    risk: float = 1.0 / 3.0

    def __post_init__(self) -> None:
        if min(self.readiness, self.control, self.risk) < 0:
            raise ValueError("weights must be non-negative")
        if abs(self.readiness + self.control + self.risk - 1.0) > 1e-6:
            raise ValueError("weights must sum to 1")


def _pct(value: float) -> float:
    return min(100.0, max(0.0, value))


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def residual_risk(hazard: Hazard) -> float:
    """Residual RPN: ``S*O*D`` reduced by active controls and scaled by weight."""

    base = hazard.severity * hazard.occurrence * hazard.detection
    return base * (1.0 - hazard.controls_active) * hazard.weight


def domain_risk(domain: str, hazards: Iterable[Hazard]) -> float:
    return _mean([residual_risk(h) for h in hazards if h.domain == domain])


def risk_load_pct(
    hazards: Iterable[Hazard],
    domains: Sequence[str] = DOMAINS,
    divisor: float = DEFAULT_RISK_DIVISOR,
) -> float:
    """Inverted risk load over every domain in ``domains``.

    Domains without hazards contribute zero risk. Scoping (role, segment) is the
    caller's business: pass the already-filtered hazard list.
    """

    if divisor <= 0:
        raise ValueError("divisor must be positive")
    if not domains:
        return 100.0
    hazard_list = list(hazards)
    load = _mean([domain_risk(domain, hazard_list) / divisor for domain in domains])
    return 100.0 - _pct(load)


def effective_readiness(control: Control, penalty_per_uca: float = DEFAULT_PENALTY_PER_UCA) -> float:
    return min(1.0, max(0.0, control.readiness - penalty_per_uca * control.uca_count))


def control_health_pct(
    controls: Iterable[Control],
    penalty_per_uca: float = DEFAULT_PENALTY_PER_UCA,
) -> float:
    values = [effective_readiness(c, penalty_per_uca) for c in controls]
    if not values:
        return 100.0
    return _pct(100.0 * _mean(values))


def domain_readiness(
    domain: str,
    scores: Mapping[str, Mapping[str, float]],
    criteria: Sequence[ReadinessCriterion] | None = None,
) -> float:
    """Mean criterion score for one domain, unscored criteria counting as the default."""

    if criteria is None:
        criteria = READINESS_CRITERIA.get(domain, ())
    domain_scores = scores.get(domain, {})
    if criteria:
        return _mean([domain_scores.get(c.id, DEFAULT_READINESS) for c in criteria])
    if domain_scores:
        return _mean(list(domain_scores.values()))
    return DEFAULT_READINESS


def readiness_pct(
    domains: Iterable[str],
    scores: Mapping[str, Mapping[str, float]],
    catalog: Mapping[str, Sequence[ReadinessCriterion]] = READINESS_CRITERIA,
) -> float:
    values = [domain_readiness(d, scores, catalog.get(d, ())) for d in domains]
    if not values:
        return 100.0 * DEFAULT_READINESS
    return _pct(100.0 * _mean(values))


def holistic_health(
    risk_load: float,
    control_health: float,
    readiness: float,
    weights: HealthWeights = HealthWeights(),
) -> float:
    blended = (
        weights.readiness * readiness
        + weights.control * control_health
        + weights.risk * risk_load
    )
    return _pct(blended)
