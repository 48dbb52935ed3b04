"""Record store: named, invariant-preserving mutations of the session document.

Every mutation validates its full result before touching the document, so a
rejected call leaves the state exactly as it was.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Callable, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as SchemaError

from .catalog import LANGUAGES, ROLES, WHOLE_COURSE, criteria_for, is_domain
from .errors import NotFoundError, ValidationError
from .models import Constraint, Control, Document, Hazard, Incident, clamp
from .templates import Template

EDITABLE_HAZARD_FIELDS = frozenset(
    {"name", "severity", "occurrence", "detection", "controls_active", "weight", "segment_id"}
)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _revalidate(record: ModelT, changes: dict[str, Any]) -> ModelT:
    try:
        return type(record).model_validate({**record.model_dump(), **changes})
    except SchemaError as exc:
        raise ValidationError(str(exc)) from exc


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RecordStore:
    """Owns the mutable collections of one session document."""

    def __init__(self, document: Document) -> None:
        self.document = document

    def _index(self, records: list[Any], record_id: str, kind: str) -> int:
        for index, record in enumerate(records):
            if record.id == record_id:
                return index
        raise NotFoundError(kind, record_id)

    def _check_segment(self, segment_id: str) -> None:
        if segment_id == WHOLE_COURSE:
            return
        if not any(segment.id == segment_id for segment in self.document.segments):
            raise ValidationError(f"Unknown segment {segment_id!r}")

    def update_hazard(self, hazard_id: str, **changes: Any) -> Hazard:
        index = self._index(self.document.hazards, hazard_id, "hazard")
        unknown = set(changes) - EDITABLE_HAZARD_FIELDS
        if unknown:
            raise ValidationError(f"Hazard fields not editable: {', '.join(sorted(unknown))}")
        if "segment_id" in changes:
            self._check_segment(changes["segment_id"])
        hazard = _revalidate(self.document.hazards[index], changes)
        self.document.hazards[index] = hazard
        return hazard

    def update_control(
        self,
        control_id: str,
        readiness: float | None = None,
        uca_count: int | None = None,
    ) -> Control:
        index = self._index(self.document.controls, control_id, "control")
        changes: dict[str, Any] = {}
        if readiness is not None:
            changes["readiness"] = readiness
        if uca_count is not None:
            changes["uca_count"] = uca_count
        control = _revalidate(self.document.controls[index], changes)
        self.document.controls[index] = control
        return control

    def set_constraint_status(self, constraint_id: str, status: str) -> Constraint:
        index = self._index(self.document.constraints, constraint_id, "constraint")
        constraint = _revalidate(self.document.constraints[index], {"status": status})
        self.document.constraints[index] = constraint
        return constraint

    def set_readiness_score(self, domain: str, criterion_id: str, value: float) -> float:
        if not is_domain(domain):
            raise ValidationError(f"Unknown domain {domain!r}")
        if not any(criterion.id == criterion_id for criterion in criteria_for(domain)):
            raise ValidationError(f"Unknown readiness criterion {criterion_id!r} for {domain!r}")
        try:
            score = clamp(value, 0.0, 1.0)
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"Invalid readiness score {value!r}") from exc
        self.document.readiness.setdefault(domain, {})[criterion_id] = score
        return score

    def set_hazard_notes(self, hazard_id: str, notes: str) -> None:
        self._index(self.document.hazards, hazard_id, "hazard")
        if notes:
            self.document.notes_by_hazard[hazard_id] = notes
        else:
            self.document.notes_by_hazard.pop(hazard_id, None)

    def apply_template(self, template: Template) -> None:
        """Destructive reset of hazards, constraints and segments; controls and readiness survive."""

        self.document.template_key = template.key
        self.document.hazards = template.fresh_hazards()
        self.document.constraints = template.fresh_constraints()
        self.document.segments = template.fresh_segments()
        self.document.domain_filter = None
        self.document.segment_filter = None

    def apply_incident(
        self,
        hazard_id: str,
        incident_type: str,
        notes: str = "",
        max_incidents: int = 50,
        now: Callable[[], datetime] = _utc_now,
    ) -> tuple[Incident, Hazard]:
        """Log an incident against a hazard and bump its occurrence (capped at 10)."""

        index = self._index(self.document.hazards, hazard_id, "hazard")
        if not incident_type.strip():
            raise ValidationError("Incident type is required")
        hazard = self.document.hazards[index]
        updated = _revalidate(hazard, {"occurrence": hazard.occurrence + 1})
        incident = Incident(
            id=f"I-{uuid.uuid4().hex[:12]}",
            type=incident_type.strip(),
            hazard_id=hazard_id,
            notes=notes.strip(),
            timestamp=now().isoformat(),
        )
        self.document.hazards[index] = updated
        self.document.incidents = [incident, *self.document.incidents][:max_incidents]
        return incident, updated

    def set_role(self, role: str) -> None:
        if role not in ROLES:
            raise NotFoundError("role", role)
        self.document.role = role

    def set_language(self, lang: str) -> None:
        if lang not in LANGUAGES:
            raise ValidationError(f"Unsupported language {lang!r}")
        self.document.lang = lang

    def set_domain_filter(self, domain: str | None) -> None:
        if domain is not None and not is_domain(domain):
            raise ValidationError(f"Unknown domain {domain!r}")
        self.document.domain_filter = domain

    def set_segment_filter(self, segment_id: str | None) -> None:
        if segment_id is not None:
            self._index(self.document.segments, segment_id, "segment")
        self.document.segment_filter = segment_id

    def clear_filters(self) -> None:
        self.document.domain_filter = None
        self.document.segment_filter = None
