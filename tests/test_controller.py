import logging

import pytest

from race_safety_health.controller import SafetyController
from race_safety_health.errors import NotFoundError, PersistenceError
from race_safety_health.health import Status, Trend
from race_safety_health.persistence import JsonFileAdapter, MemoryAdapter, default_document
from race_safety_health.templates import TEMPLATES


class BrokenAdapter:
    """Storage that fails on every call."""

    def load(self):
        raise PersistenceError("disk on fire")

    def save(self, document) -> None:
        raise PersistenceError("disk on fire")


class FlakyAdapter:
    """Storage that raises plain OS errors instead of PersistenceError."""

    def load(self):
        raise OSError("mount gone")

    def save(self, document) -> None:
        raise OSError("quota exceeded")


def test_fresh_session_starts_from_defaults() -> None:
    controller = SafetyController(MemoryAdapter())
    assert controller.baseline is None
    assert controller.document.template_key == "roadShort"
    assert controller.snapshot.status is Status.WATCH


def test_every_mutation_saves_document_and_scores() -> None:
    adapter = MemoryAdapter()
    controller = SafetyController(adapter)
    update = controller.log_incident("H1", "Heat illness", "collapsed at finish")
    assert adapter.saves == 1
    assert update.incident is not None
    assert update.document.incidents[0] == update.incident
    assert update.document.hazard("H1").occurrence == 5
    stored = adapter.load()
    assert stored == update.document
    assert stored.last_holistic == pytest.approx(update.snapshot.holistic)


def test_returned_document_is_a_copy() -> None:
    controller = SafetyController(MemoryAdapter())
    update = controller.set_constraint_status("S1", "warn")
    update.document.hazards.clear()
    assert len(controller.document.hazards) == 6


def test_failed_mutation_leaves_state_and_storage_alone() -> None:
    adapter = MemoryAdapter()
    controller = SafetyController(adapter)
    before = controller.document
    with pytest.raises(NotFoundError):
        controller.log_incident("H404", "Trail fall")
    assert controller.document == before
    assert adapter.saves == 0


def test_baseline_read_once_per_session() -> None:
    adapter = MemoryAdapter()
    first = SafetyController(adapter)
    persisted = first.clear_filters().snapshot.holistic

    second = SafetyController(adapter)
    assert second.baseline == pytest.approx(persisted)
    update = second.update_control("C1", readiness=0.0)
    # C1 loses 0.6 of effective readiness: control health drops 10 points, holistic 10/3.
    assert update.snapshot.trend is Trend.DEGRADING
    assert update.snapshot.trend_delta == pytest.approx(-10 / 3)
    second.update_control("C2", readiness=0.0)
    assert second.baseline == pytest.approx(persisted)


def test_constraint_failure_gates_session() -> None:
    controller = SafetyController(MemoryAdapter())
    update = controller.set_constraint_status("S3", "fail")
    assert update.snapshot.status is Status.CONSTRAINT_FAIL
    assert update.snapshot.displayed_value == 0.0
    assert update.document.last_holistic == pytest.approx(update.snapshot.holistic)
    cleared = controller.set_constraint_status("S3", "pass")
    assert cleared.snapshot.status is Status.WATCH


def test_template_switch_keeps_controls_and_readiness() -> None:
    controller = SafetyController(MemoryAdapter())
    controller.update_control("C4", readiness=0.3, uca_count=2)
    controller.set_readiness_score("Legal", "permits", 0.1)
    controller.set_segment_filter("SEG-START")
    before = controller.document

    update = controller.select_template("roadMarathon")

    assert update.document.hazards == list(TEMPLATES["roadMarathon"].hazards)
    assert update.document.segments == list(TEMPLATES["roadMarathon"].segments)
    assert update.document.segment_filter is None
    assert update.document.controls == before.controls
    assert update.document.readiness == before.readiness
    with pytest.raises(NotFoundError):
        controller.select_template("velodrome")


def test_storage_failures_are_logged_not_raised(caplog) -> None:
    caplog.set_level(logging.WARNING)
    controller = SafetyController(BrokenAdapter())
    update = controller.select_role("Medical Lead")
    assert update.snapshot.role == "Medical Lead"
    messages = [record.getMessage() for record in caplog.records]
    assert "state_load_failed" in messages
    assert "state_save_failed" in messages


def test_corrupt_stored_state_falls_back_to_defaults() -> None:
    controller = SafetyController(MemoryAdapter("{definitely not json"))
    assert controller.document.template_key == "roadShort"
    assert controller.baseline is None


def test_incident_cap_follows_settings() -> None:
    from race_safety_health.config import IncidentConfig, RaceSafetySettings

    settings = RaceSafetySettings(incidents=IncidentConfig(max_incidents=2))
    controller = SafetyController(MemoryAdapter(), settings=settings)
    for hazard_id in ("H1", "H2", "H3"):
        update = controller.log_incident(hazard_id, "Course confusion")
    assert [i.hazard_id for i in update.document.incidents] == ["H3", "H2"]


def test_unexpected_storage_errors_are_logged_not_raised(caplog) -> None:
    caplog.set_level(logging.WARNING)
    controller = SafetyController(FlakyAdapter())
    assert controller.document.template_key == "roadShort"
    update = controller.select_role("Medical Lead")
    assert update.snapshot.role == "Medical Lead"
    failures = [r for r in caplog.records if r.getMessage() in ("state_load_failed", "state_save_failed")]
    assert [r.getMessage() for r in failures] == ["state_load_failed", "state_save_failed"]
    assert all(r.exc_info is not None for r in failures)


def test_non_utf8_state_file_falls_back_to_defaults(tmp_path) -> None:
    (tmp_path / "state.json").write_bytes(b'{"template_key": "\xff\xfe"}')
    controller = SafetyController(JsonFileAdapter(tmp_path, "state"))
    assert controller.document.template_key == "roadShort"
    assert controller.baseline is None


def test_dangling_segment_reference_falls_back_to_defaults() -> None:
    raw = default_document().model_dump_json().replace('"segment_id":"SEG-2"', '"segment_id":"SEG-GONE"')
    controller = SafetyController(MemoryAdapter(raw))
    assert controller.document.hazard("H2").segment_id == "SEG-2"
