"""Tabular report export.

Builds plain rows for each report section from a document and its score
snapshot. Layout (PDF, HTML) is left to whoever consumes the tables.
"""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass, field
from typing import Any

from .catalog import criteria_for
from .engine import ScoreSnapshot
from .models import Document
from .scoring import effective_readiness, residual_risk
from .templates import TEMPLATES

APP_TITLE = "Race Safety Health"
SUBTITLE = "EMBOK × FMEA × STPA/STAMP"


@dataclass
class Table:
    title: str
    columns: list[str]
    rows: list[list[Any]] = field(default_factory=list)


@dataclass
class Report:
    header: dict[str, Any]
    tables: list[Table]

    def table(self, title: str) -> Table:
        return next(table for table in self.tables if table.title == title)

    def to_dict(self) -> dict[str, Any]:
        return {
            "header": dict(self.header),
            "tables": [
                {"title": t.title, "columns": list(t.columns), "rows": [list(r) for r in t.rows]}
                for t in self.tables
            ],
        }

    def to_csv(self) -> str:
        """All sections as consecutive CSV blocks separated by a blank line."""

        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        for key, value in self.header.items():
            writer.writerow([key, value])
        for table in self.tables:
            writer.writerow([])
            writer.writerow([table.title])
            writer.writerow(table.columns)
            writer.writerows(table.rows)
        return buffer.getvalue()


def _pct(value: float) -> int:
    return round(value * 100)


def build_report(document: Document, snapshot: ScoreSnapshot, penalty_per_uca: float = 0.1) -> Report:
    template = TEMPLATES.get(document.template_key)
    header = {
        "title": APP_TITLE,
        "subtitle": SUBTITLE,
        "template": template.label if template else document.template_key,
        "role": snapshot.role,
        "holistic": round(snapshot.holistic, 1),
        "displayed": round(snapshot.displayed_value, 1),
        "status": snapshot.status.value,
        "trend": snapshot.trend.value,
        "risk_load": round(snapshot.risk_load, 1),
        "control_health": round(snapshot.control_health, 1),
        "readiness": round(snapshot.readiness, 1),
    }

    readiness = Table("Domain Readiness", ["Domain", "Readiness %", "Criteria scored"])
    for domain, value in snapshot.domain_readiness.items():
        scored = len(document.readiness.get(domain, {}))
        readiness.rows.append([domain, _pct(value), f"{scored}/{len(criteria_for(domain))}"])

    visible_hazards = set(snapshot.visible_hazards)
    hazards = Table(
        "Hazards",
        ["ID", "Domain", "Hazard", "Segment", "S", "O", "D", "Controls Active %", "Residual RPN", "Notes"],
    )
    for hazard in document.hazards:
        if hazard.id not in visible_hazards:
            continue
        hazards.rows.append(
            [
                hazard.id,
                hazard.domain,
                hazard.name,
                document.segment_name(hazard.segment_id),
                hazard.severity,
                hazard.occurrence,
                hazard.detection,
                _pct(hazard.controls_active),
                round(residual_risk(hazard), 2),
                document.notes_by_hazard.get(hazard.id, ""),
            ]
        )

    visible_controls = set(snapshot.visible_controls)
    controls = Table("Control Loops", ["ID", "Control", "Readiness %", "UCA count", "Effective %"])
    for control in document.controls:
        if control.id not in visible_controls:
            continue
        controls.rows.append(
            [
                control.id,
                control.name,
                _pct(control.readiness),
                control.uca_count,
                _pct(effective_readiness(control, penalty_per_uca)),
            ]
        )

    constraints = Table("Critical Constraints", ["ID", "Constraint", "Critical", "Status"])
    for constraint in document.constraints:
        constraints.rows.append(
            [constraint.id, constraint.statement, "YES" if constraint.critical else "NO", constraint.status]
        )

    incidents = Table("Incidents", ["Time", "Type", "Hazard", "Notes"])
    for incident in document.incidents:
        incidents.rows.append([incident.timestamp, incident.type, incident.hazard_id, incident.notes])

    return Report(header=header, tables=[readiness, hazards, controls, constraints, incidents])
