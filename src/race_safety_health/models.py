"""Pydantic record types for the risk model.

Numeric fields clamp into range both at construction and on assignment, so a
record is always scoreable. Values that cannot be clamped (an unknown domain,
an unknown constraint status, NaN) are rejected.
"""

from __future__ import annotations

import math
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .catalog import DEFAULT_ROLE, DOMAINS, WHOLE_COURSE

MIN_WEIGHT = 0.1
MAX_WEIGHT = 10.0
MAX_UCA_COUNT = 100
DOCUMENT_VERSION = 1

ConstraintStatus = Literal["pass", "warn", "fail"]
CONSTRAINT_STATUSES: tuple[str, ...] = ("pass", "warn", "fail")


def clamp(value: Any, low: float, high: float) -> float:
    number = float(value)
    if math.isnan(number):
        raise ValueError("value must be a number")
    return min(high, max(low, number))


class Record(BaseModel):
    """Base for mutable records that re-validate on every update."""

    model_config = ConfigDict(validate_assignment=True, extra="ignore")


class Segment(Record):
    """Named course zone."""

    id: str
    name: str


class Hazard(Record):
    """FMEA hazard with severity, occurrence and detection on a 1..10 scale."""

    id: str
    domain: str
    name: str
    severity: int = Field(default=5, ge=1, le=10)
    occurrence: int = Field(default=5, ge=1, le=10)
    detection: int = Field(default=5, ge=1, le=10)
    controls_active: float = Field(default=0.7, ge=0.0, le=1.0)
    weight: float = Field(default=1.0, ge=MIN_WEIGHT, le=MAX_WEIGHT)
    segment_id: str

    @field_validator("severity", "occurrence", "detection", mode="before")
    @classmethod
    def clamp_scale(cls, value: Any) -> int:
        return int(round(clamp(value, 1, 10)))

    @field_validator("controls_active", mode="before")
    @classmethod
    def clamp_fraction(cls, value: Any) -> float:
        return clamp(value, 0.0, 1.0)

    @field_validator("weight", mode="before")
    @classmethod
    def clamp_weight(cls, value: Any) -> float:
        return clamp(value, MIN_WEIGHT, MAX_WEIGHT)

    @field_validator("domain")
    @classmethod
    def known_domain(cls, value: str) -> str:
        if value not in DOMAINS:
            raise ValueError(f"unknown domain {value!r}")
        return value


class Control(Record):
    """STPA control loop; each unsafe control action degrades effective readiness."""

    id: str
    name: str
    readiness: float = Field(default=0.7, ge=0.0, le=1.0)
    uca_count: int = Field(default=0, ge=0, le=MAX_UCA_COUNT)

    @field_validator("readiness", mode="before")
    @classmethod
    def clamp_readiness(cls, value: Any) -> float:
        return clamp(value, 0.0, 1.0)

    @field_validator("uca_count", mode="before")
    @classmethod
    def clamp_uca(cls, value: Any) -> int:
        return int(round(clamp(value, 0, MAX_UCA_COUNT)))


class Constraint(Record):
    """STAMP safety constraint; critical failures gate the displayed health."""

    id: str
    statement: str
    critical: bool = True
    status: ConstraintStatus = "pass"


class Incident(Record):
    id: str
    type: str
    hazard_id: str
    notes: str = ""
    timestamp: str


class Document(BaseModel):
    """Full persisted session state."""

    model_config = ConfigDict(extra="ignore")

    version: int = DOCUMENT_VERSION
    lang: str = "en"
    template_key: str
    role: str = DEFAULT_ROLE
    domain_filter: str | None = None
    segment_filter: str | None = None
    hazards: list[Hazard] = Field(default_factory=list)
    controls: list[Control] = Field(default_factory=list)
    constraints: list[Constraint] = Field(default_factory=list)
    segments: list[Segment] = Field(default_factory=list)
    # domain -> criterion id -> score in [0, 1]
    readiness: dict[str, dict[str, float]] = Field(default_factory=dict)
    notes_by_hazard: dict[str, str] = Field(default_factory=dict)
    incidents: list[Incident] = Field(default_factory=list)
    last_holistic: float | None = None

    @field_validator("readiness")
    @classmethod
    def clamp_scores(cls, value: dict[str, dict[str, float]]) -> dict[str, dict[str, float]]:
        return {
            domain: {cid: clamp(score, 0.0, 1.0) for cid, score in scores.items()}
            for domain, scores in value.items()
        }

    @model_validator(mode="after")
    def consistent_references(self) -> "Document":
        for label, records in (
            ("hazard", self.hazards),
            ("control", self.controls),
            ("constraint", self.constraints),
            ("segment", self.segments),
            ("incident", self.incidents),
        ):
            ids = [record.id for record in records]
            duplicates = sorted({rid for rid in ids if ids.count(rid) > 1})
            if duplicates:
                raise ValueError(f"duplicate {label} ids {duplicates}")
        segment_ids = {segment.id for segment in self.segments}
        for hazard in self.hazards:
            if hazard.segment_id != WHOLE_COURSE and hazard.segment_id not in segment_ids:
                raise ValueError(f"hazard {hazard.id!r} references unknown segment {hazard.segment_id!r}")
        return self

    def hazard(self, hazard_id: str) -> Hazard | None:
        return next((h for h in self.hazards if h.id == hazard_id), None)

    def segment_name(self, segment_id: str) -> str:
        segment = next((s for s in self.segments if s.id == segment_id), None)
        return segment.name if segment else segment_id
