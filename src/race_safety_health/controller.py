"""Single-writer session controller.

All state changes go through named operations. Each one mutates the record
store, recomputes every derived score, and snapshots the document through the
persistence adapter. A failing save is logged and never reaches the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from .config import RaceSafetySettings
from .engine import ScoreSnapshot, recompute
from .errors import PersistenceError
from .models import Document, Incident
from .persistence import StateAdapter, default_document
from .store import RecordStore
from .templates import get_template


@dataclass(frozen=True)
class SessionUpdate:
    """Result of one mutation: a copy of the document plus its scores."""

    document: Document
    snapshot: ScoreSnapshot
    incident: Incident | None = None


class SafetyController:
    """Own the session document and keep its scores current."""

    def __init__(
        self,
        adapter: StateAdapter,
        settings: RaceSafetySettings | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._adapter = adapter
        self._settings = settings or RaceSafetySettings()
        self._logger = logger or logging.getLogger(__name__)
        document = self._load()
        self._store = RecordStore(document)
        # Trend baseline is read once per session.
        self._baseline = document.last_holistic
        self._snapshot = recompute(document, self._settings, self._baseline)

    def _load(self) -> Document:
        try:
            document = self._adapter.load()
        except PersistenceError as exc:
            self._logger.warning("state_load_failed", extra={"error": str(exc)})
            document = None
        except Exception:
            self._logger.exception("state_load_failed")
            document = None
        if document is None:
            self._logger.info("state_initialized", extra={"template": self._settings.default_template})
            return default_document(self._settings.default_template)
        return document

    @property
    def settings(self) -> RaceSafetySettings:
        return self._settings

    @property
    def baseline(self) -> float | None:
        return self._baseline

    @property
    def document(self) -> Document:
        return self._store.document.model_copy(deep=True)

    @property
    def snapshot(self) -> ScoreSnapshot:
        return self._snapshot

    def _commit(self, event: str, incident: Incident | None = None, **context: Any) -> SessionUpdate:
        document = self._store.document
        self._snapshot = recompute(document, self._settings, self._baseline)
        document.last_holistic = self._snapshot.persisted_value
        try:
            self._adapter.save(document)
        except PersistenceError as exc:
            self._logger.warning("state_save_failed", extra={"event": event, "error": str(exc)})
        except Exception:
            self._logger.exception("state_save_failed", extra={"event": event})
        self._logger.info(
            event,
            extra={
                **context,
                "holistic": round(self._snapshot.holistic, 2),
                "status": self._snapshot.status.value,
            },
        )
        return SessionUpdate(document=self.document, snapshot=self._snapshot, incident=incident)

    def select_template(self, key: str) -> SessionUpdate:
        self._store.apply_template(get_template(key))
        return self._commit("template_selected", template=key)

    def select_role(self, role: str) -> SessionUpdate:
        self._store.set_role(role)
        return self._commit("role_selected", role=role)

    def set_language(self, lang: str) -> SessionUpdate:
        self._store.set_language(lang)
        return self._commit("language_selected", lang=lang)

    def set_domain_filter(self, domain: str | None) -> SessionUpdate:
        self._store.set_domain_filter(domain)
        return self._commit("domain_filter_set", domain=domain)

    def set_segment_filter(self, segment_id: str | None) -> SessionUpdate:
        self._store.set_segment_filter(segment_id)
        return self._commit("segment_filter_set", segment=segment_id)

    def clear_filters(self) -> SessionUpdate:
        self._store.clear_filters()
        return self._commit("filters_cleared")

    def update_hazard(self, hazard_id: str, **changes: Any) -> SessionUpdate:
        self._store.update_hazard(hazard_id, **changes)
        return self._commit("hazard_updated", hazard=hazard_id, fields=sorted(changes))

    def update_control(
        self,
        control_id: str,
        readiness: float | None = None,
        uca_count: int | None = None,
    ) -> SessionUpdate:
        self._store.update_control(control_id, readiness=readiness, uca_count=uca_count)
        return self._commit("control_updated", control=control_id)

    def set_constraint_status(self, constraint_id: str, status: str) -> SessionUpdate:
        self._store.set_constraint_status(constraint_id, status)
        return self._commit("constraint_status_set", constraint=constraint_id, constraint_status=status)

    def set_readiness_score(self, domain: str, criterion_id: str, value: float) -> SessionUpdate:
        self._store.set_readiness_score(domain, criterion_id, value)
        return self._commit("readiness_scored", domain=domain, criterion=criterion_id)

    def set_hazard_notes(self, hazard_id: str, notes: str) -> SessionUpdate:
        self._store.set_hazard_notes(hazard_id, notes)
        return self._commit("hazard_notes_set", hazard=hazard_id)

    def log_incident(self, hazard_id: str, incident_type: str, notes: str = "") -> SessionUpdate:
        incident, hazard = self._store.apply_incident(
            hazard_id,
            incident_type,
            notes,
            max_incidents=self._settings.incidents.max_incidents,
        )
        return self._commit(
            "incident_logged",
            incident=incident,
            hazard=hazard_id,
            occurrence=hazard.occurrence,
            incident_type=incident.type,
        )
