import pytest

from race_safety_health.controller import SafetyController
from race_safety_health.persistence import MemoryAdapter
from race_safety_health.report import build_report


def test_report_sections_for_director() -> None:
    controller = SafetyController(MemoryAdapter())
    controller.log_incident("H1", "Heat illness", "KM 4")
    update = controller.set_hazard_notes("H1", "Ice baths at finish")
    report = build_report(update.document, update.snapshot)

    assert report.header["template"] == "Road 5K / 10K"
    assert report.header["role"] == "Race Director"
    assert [t.title for t in report.tables] == [
        "Domain Readiness",
        "Hazards",
        "Control Loops",
        "Critical Constraints",
        "Incidents",
    ]
    hazards = report.table("Hazards")
    assert len(hazards.rows) == 6
    first = dict(zip(hazards.columns, hazards.rows[0]))
    assert first["Segment"] == "Start/Finish Zone"
    assert first["O"] == 5
    # 8 * 5 * 4 * 0.2 * 1.3
    assert first["Residual RPN"] == pytest.approx(41.6)
    assert first["Notes"] == "Ice baths at finish"
    assert len(report.table("Critical Constraints").rows) == 3
    assert report.table("Incidents").rows[0][1:] == ["Heat illness", "H1", "KM 4"]
    assert len(report.table("Domain Readiness").rows) == 10


def test_report_follows_role_scope() -> None:
    controller = SafetyController(MemoryAdapter())
    update = controller.select_role("Medical Lead")
    report = build_report(update.document, update.snapshot)
    assert [row[0] for row in report.table("Hazards").rows] == ["H1", "H4"]
    controls = report.table("Control Loops")
    assert [row[0] for row in controls.rows] == ["C1", "C3"]
    # C1: 0.7 readiness, one UCA at 0.1.
    assert controls.rows[0][4] == 60


def test_report_exports() -> None:
    controller = SafetyController(MemoryAdapter())
    update = controller.set_constraint_status("S2", "fail")
    report = build_report(update.document, update.snapshot)
    payload = report.to_dict()
    assert payload["header"]["status"] == "constraint_fail"
    assert payload["header"]["displayed"] == 0.0
    text = report.to_csv()
    assert "Critical Constraints" in text
    assert "S2,No open vehicle access on any course segment,YES,fail" in text
