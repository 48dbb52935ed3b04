import pytest

from race_safety_health.catalog import DOMAINS
from race_safety_health.models import Control, Hazard
from race_safety_health.scoring import (
    HealthWeights,
    control_health_pct,
    domain_readiness,
    domain_risk,
    holistic_health,
    readiness_pct,
    residual_risk,
    risk_load_pct,
)


def _hazard(**overrides) -> Hazard:
    fields = dict(
        id="H1",
        domain="Health / Sanitary",
        name="Heat illness / dehydration",
        severity=8,
        occurrence=4,
        detection=4,
        controls_active=0.8,
        weight=1.3,
        segment_id="SEG-START",
    )
    fields.update(overrides)
    return Hazard(**fields)


def test_residual_risk_reference_hazard() -> None:
    assert residual_risk(_hazard()) == pytest.approx(33.28)


def test_residual_risk_monotonicity() -> None:
    previous = None
    for active in (0.0, 0.25, 0.5, 0.75, 1.0):
        value = residual_risk(_hazard(controls_active=active))
        if previous is not None:
            assert value <= previous
        previous = value

    for field in ("severity", "occurrence", "detection"):
        values = [residual_risk(_hazard(**{field: level})) for level in range(1, 11)]
        assert values == sorted(values)


def test_domain_risk_means_matching_hazards() -> None:
    hazards = [
        _hazard(),
        _hazard(id="H2", controls_active=0.5, weight=1.0),
        _hazard(id="H3", domain="Operational"),
    ]
    # (33.28 + 64) / 2
    assert domain_risk("Health / Sanitary", hazards) == pytest.approx(48.64)
    assert domain_risk("Legal", hazards) == 0.0
    assert domain_risk("Legal", []) == 0.0


def test_risk_load_averages_over_all_domains() -> None:
    # 33.28 / 10 spread over ten domains.
    assert risk_load_pct([_hazard()]) == pytest.approx(100 - 0.3328)
    assert risk_load_pct([]) == 100.0


def test_risk_load_clamps_extreme_risk() -> None:
    worst = _hazard(domain="Financial", severity=10, occurrence=10, detection=10, controls_active=0.0, weight=10)
    assert risk_load_pct([worst], domains=["Financial"]) == 0.0
    assert 0.0 <= risk_load_pct([worst]) <= 100.0
    assert risk_load_pct([worst], domains=[]) == 100.0


def test_control_health_with_uca_penalty() -> None:
    controls = [
        Control(id="C1", name="Heat / Cold Protocol", readiness=0.8, uca_count=0),
        Control(id="C2", name="Security Screening Perimeter", readiness=0.6, uca_count=2),
    ]
    assert control_health_pct(controls, penalty_per_uca=0.1) == pytest.approx(60.0)


def test_control_health_floor_and_empty() -> None:
    assert control_health_pct([]) == 100.0
    crippled = [Control(id="C1", name="Heat / Cold Protocol", readiness=0.2, uca_count=5)]
    assert control_health_pct(crippled) == 0.0


def test_readiness_defaults_and_partial_scores() -> None:
    assert readiness_pct(DOMAINS, {}) == pytest.approx(75.0)
    scores = {"Financial": {"budget": 0.0}}
    # mean(0.0, 0.75, 0.75)
    assert domain_readiness("Financial", scores) == pytest.approx(0.5)
    assert readiness_pct(["Financial"], scores) == pytest.approx(50.0)
    full = {"Financial": {"budget": 1.0, "insurance": 1.0, "sponsors": 1.0}}
    assert readiness_pct(["Financial"], full) == pytest.approx(100.0)


def test_readiness_without_catalog_criteria() -> None:
    assert domain_readiness("Financial", {}, criteria=()) == pytest.approx(0.75)
    assert domain_readiness("Financial", {"Financial": {"adhoc": 0.5}}, criteria=()) == pytest.approx(0.5)
    assert readiness_pct([], {}) == pytest.approx(75.0)


def test_holistic_health_blends_pillars() -> None:
    assert holistic_health(90.0, 60.0, 75.0) == pytest.approx(75.0)
    weights = HealthWeights(readiness=0.5, control=0.25, risk=0.25)
    assert holistic_health(0.0, 0.0, 100.0, weights) == pytest.approx(50.0)
    assert 0.0 <= holistic_health(0.0, 0.0, 0.0) <= 100.0


def test_health_weights_validation() -> None:
    with pytest.raises(ValueError):
        HealthWeights(readiness=0.5, control=0.5, risk=0.5)
    with pytest.raises(ValueError):
        HealthWeights(readiness=1.2, control=-0.2, risk=0.0)


def test_scoring_does_not_mutate_inputs() -> None:
    hazards = [_hazard(), _hazard(id="H2", domain="Sports")]
    before = [h.model_dump() for h in hazards]
    risk_load_pct(hazards)
    assert [h.model_dump() for h in hazards] == before
