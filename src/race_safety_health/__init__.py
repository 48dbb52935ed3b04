"""Top-level package for race safety health scoring (EMBOK × FMEA × STPA/STAMP)."""

from .api import build_controller
from .catalog import (
    DOMAINS,
    INCIDENT_TYPES,
    READINESS_CRITERIA,
    ROLES,
    WHOLE_COURSE,
    ReadinessCriterion,
    RoleLens,
)
from .config import (
    IncidentConfig,
    LoggingConfig,
    PersistenceConfig,
    RaceSafetySettings,
    ScoringConfig,
    StatusConfig,
)
from .controller import SafetyController, SessionUpdate
from .engine import ScoreSnapshot, recompute
from .errors import NotFoundError, PersistenceError, RaceSafetyError, ValidationError
from .health import GateResult, Status, StatusBands, Trend, TrendReading, classify, gate, trend
from .logging_utils import JsonFormatter, configure_logging
from .models import Constraint, Control, Document, Hazard, Incident, Segment
from .persistence import JsonFileAdapter, MemoryAdapter, StateAdapter, default_document
from .report import Report, Table, build_report
from .scoring import (
    HealthWeights,
    control_health_pct,
    domain_readiness,
    domain_risk,
    holistic_health,
    readiness_pct,
    residual_risk,
    risk_load_pct,
)
from .store import RecordStore
from .templates import TEMPLATES, Template, get_template
from .views import visible_controls, visible_domains, visible_hazards

__all__ = [
    "build_controller",
    "DOMAINS",
    "INCIDENT_TYPES",
    "READINESS_CRITERIA",
    "ROLES",
    "WHOLE_COURSE",
    "ReadinessCriterion",
    "RoleLens",
    "IncidentConfig",
    "LoggingConfig",
    "PersistenceConfig",
    "RaceSafetySettings",
    "ScoringConfig",
    "StatusConfig",
    "SafetyController",
    "SessionUpdate",
    "ScoreSnapshot",
    "recompute",
    "NotFoundError",
    "PersistenceError",
    "RaceSafetyError",
    "ValidationError",
    "GateResult",
    "Status",
    "StatusBands",
    "Trend",
    "TrendReading",
    "classify",
    "gate",
    "trend",
    "JsonFormatter",
    "configure_logging",
    "Constraint",
    "Control",
    "Document",
    "Hazard",
    "Incident",
    "Segment",
    "JsonFileAdapter",
    "MemoryAdapter",
    "StateAdapter",
    "default_document",
    "Report",
    "Table",
    "build_report",
    "HealthWeights",
    "control_health_pct",
    "domain_readiness",
    "domain_risk",
    "holistic_health",
    "readiness_pct",
    "residual_risk",
    "risk_load_pct",
    "RecordStore",
    "TEMPLATES",
    "Template",
    "get_template",
    "visible_controls",
    "visible_domains",
    "visible_hazards",
]
