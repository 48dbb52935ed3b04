"""Scenario presets: default hazards, constraints and course segments per race type."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from .catalog import WHOLE_COURSE
from .errors import NotFoundError
from .models import Constraint, Hazard, Segment

DEFAULT_TEMPLATE = "roadShort"


@dataclass(frozen=True)
class Template:
    """Named scenario preset.

    Records are handed out as deep copies so sessions never edit the catalog.
    """

    key: str
    label: str
    hazards: tuple[Hazard, ...]
    constraints: tuple[Constraint, ...]
    segments: tuple[Segment, ...]

    def fresh_hazards(self) -> list[Hazard]:
        return [hazard.model_copy(deep=True) for hazard in self.hazards]

    def fresh_constraints(self) -> list[Constraint]:
        return [constraint.model_copy(deep=True) for constraint in self.constraints]

    def fresh_segments(self) -> list[Segment]:
        return [segment.model_copy(deep=True) for segment in self.segments]


def _hazard(
    hid: str,
    domain: str,
    name: str,
    s: int,
    o: int,
    d: int,
    controls_active: float,
    weight: float,
    segment_id: str,
) -> Hazard:
    return Hazard(
        id=hid,
        domain=domain,
        name=name,
        severity=s,
        occurrence=o,
        detection=d,
        controls_active=controls_active,
        weight=weight,
        segment_id=segment_id,
    )


def _constraints(*statements: str) -> tuple[Constraint, ...]:
    return tuple(
        Constraint(id=f"S{index}", statement=statement, critical=True, status="pass")
        for index, statement in enumerate(statements, start=1)
    )


def _segments(*pairs: tuple[str, str]) -> tuple[Segment, ...]:
    return tuple(Segment(id=sid, name=name) for sid, name in pairs)


TEMPLATES: Mapping[str, Template] = {
    "roadShort": Template(
        key="roadShort",
        label="Road 5K / 10K",
        hazards=(
            _hazard("H1", "Health / Sanitary", "Heat illness / dehydration", 8, 4, 4, 0.8, 1.3, "SEG-START"),
            _hazard("H2", "Operational", "Course misdirection at junctions", 5, 4, 5, 0.7, 1.0, "SEG-2"),
            _hazard("H3", "Security – Threats", "Unauthorized vehicle access", 9, 2, 6, 0.7, 1.4, WHOLE_COURSE),
            _hazard("H4", "Sports", "Runner crowding at start", 6, 5, 3, 0.9, 1.0, "SEG-START"),
            _hazard("H5", "Environmental", "Sudden rain / slippery road", 6, 3, 5, 0.7, 1.0, "SEG-3"),
            _hazard("H6", "Human Resources", "Volunteer no-shows", 5, 4, 4, 0.6, 0.9, "SEG-START"),
        ),
        constraints=_constraints(
            "Heat index <= 32°C OR Heat Protocol Level 2 active",
            "No open vehicle access on any course segment",
            "AED coverage at start/finish + roving medics",
        ),
        segments=_segments(
            ("SEG-START", "Start/Finish Zone"),
            ("SEG-1", "KM 0–1"),
            ("SEG-2", "KM 1–3"),
            ("SEG-3", "KM 3–5"),
            (WHOLE_COURSE, "Whole course"),
        ),
    ),
    "roadMarathon": Template(
        key="roadMarathon",
        label="Road Half / Marathon",
        hazards=(
            _hazard("H1", "Health / Sanitary", "Heat illness / dehydration", 9, 5, 4, 0.75, 1.5, WHOLE_COURSE),
            _hazard("H2", "Sports", "Cardiac emergency", 10, 2, 7, 0.7, 1.6, WHOLE_COURSE),
            _hazard("H3", "Operational", "Water station depletion", 8, 3, 6, 0.7, 1.3, "SEG-10"),
            _hazard("H4", "Operational", "Course misdirection at junctions", 6, 4, 6, 0.7, 1.1, "SEG-5"),
            _hazard("H5", "Security – Threats", "Unauthorized vehicle access", 10, 2, 6, 0.65, 1.5, WHOLE_COURSE),
            _hazard("H6", "Environmental", "Lightning / severe storm", 10, 2, 7, 0.7, 1.3, WHOLE_COURSE),
            _hazard("H7", "Human Resources", "Volunteer fatigue / shift gaps", 6, 5, 4, 0.6, 1.0, "SEG-START"),
        ),
        constraints=_constraints(
            "Heat index <= 30°C OR Start-time adjusted / heat protocol active",
            "AED spacing <= 1.5km and ALS on course",
            "No open vehicle access on any course segment",
            "Water points every <= 3km",
            "Lightning >10km away",
        ),
        segments=_segments(
            ("SEG-START", "Start/Finish Zone"),
            ("SEG-5", "KM 3–7 Junction Cluster"),
            ("SEG-10", "KM 9–12 Long straight"),
            ("SEG-20", "KM 18–22 Exposed area"),
            (WHOLE_COURSE, "Whole course"),
        ),
    ),
    "trailUltra": Template(
        key="trailUltra",
        label="Trail / Ultra",
        hazards=(
            _hazard("H1", "Sports", "Falls on technical terrain", 8, 5, 6, 0.6, 1.4, "SEG-TECH"),
            _hazard("H2", "Environmental", "Rapid weather change (cold/rain)", 9, 4, 7, 0.6, 1.5, "SEG-RIDGE"),
            _hazard("H3", "Operational", "Runner lost off-course", 9, 3, 7, 0.65, 1.4, WHOLE_COURSE),
            _hazard("H4", "Health / Sanitary", "Hypothermia / dehydration", 9, 4, 6, 0.6, 1.5, WHOLE_COURSE),
            _hazard("H5", "Security – Threats", "Delayed rescue access", 9, 3, 8, 0.55, 1.6, "SEG-REMOTE"),
            _hazard("H6", "Human Resources", "Aid station understaffing", 7, 4, 5, 0.6, 1.2, "SEG-AID"),
        ),
        constraints=_constraints(
            "Sweep team contact interval <= 30 min",
            "Mandatory gear check active",
            "Comms coverage on all segments",
            "Lightning / storm thresholds respected",
        ),
        segments=_segments(
            ("SEG-START", "Start/Finish Zone"),
            ("SEG-TECH", "Technical descent"),
            ("SEG-RIDGE", "Exposed ridge"),
            ("SEG-REMOTE", "Remote valley"),
            ("SEG-AID", "Aid Stations"),
            (WHOLE_COURSE, "Whole course"),
        ),
    ),
}


def get_template(key: str) -> Template:
    try:
        return TEMPLATES[key]
    except KeyError:
        raise NotFoundError("template", key) from None
