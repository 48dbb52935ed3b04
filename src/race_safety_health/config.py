"""Configuration management for race safety sessions."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import tomllib

from .health import StatusBands
from .scoring import HealthWeights
from .templates import DEFAULT_TEMPLATE, TEMPLATES


class LoggingConfig(BaseModel):
    """Logging configuration settings."""

    # Logging severity threshold (INFO/DEBUG/etc.).
    level: str = Field(default="INFO", description="Logging level")
    # Emit JSON if True; otherwise emit a human-readable format.
    json_format: bool = Field(default=True, description="Emit JSON logs")
    # Optional file path for log output; if None, logs go to stderr.
    log_file: str | None = Field(default=None, description="Optional log file path")
    max_bytes: int = Field(default=1_000_000, description="Max log file size before rotation")
    backup_count: int = Field(default=3, description="Number of rotated log files to keep")


class ScoringConfig(BaseModel):
    """Pillar weights and scoring constants."""

    readiness_weight: float = Field(default=1.0 / 3.0, ge=0.0, description="Weight of EMBOK readiness")
    control_weight: float = Field(default=1.0 / 3.0, ge=0.0, description="Weight of STPA control health")
    risk_weight: float = Field(default=1.0 / 3.0, ge=0.0, description="Weight of FMEA risk load")
    # Readiness lost per unsafe control action finding.
    penalty_per_uca: float = Field(default=0.1, ge=0.0, le=1.0, description="Readiness penalty per UCA")
    # Maps a mean residual RPN (max ~1000) onto 0..100.
    risk_divisor: float = Field(default=10.0, gt=0.0, description="Residual risk divisor")

    @model_validator(mode="after")
    def weights_sum_to_one(self) -> "ScoringConfig":
        self.weights()
        return self

    def weights(self) -> HealthWeights:
        return HealthWeights(
            readiness=self.readiness_weight,
            control=self.control_weight,
            risk=self.risk_weight,
        )


class StatusConfig(BaseModel):
    """Status bands and trend policy."""

    not_healthy_below: float = Field(default=60.0, ge=0.0, le=100.0)
    watch_below: float = Field(default=80.0, ge=0.0, le=100.0)
    # Deltas within +/- tolerance read as stable.
    trend_tolerance: float = Field(default=1.0, ge=0.0)
    # Which holistic value is stored and compared for the trend: raw or gated.
    trend_baseline: Literal["raw", "gated"] = "raw"

    @model_validator(mode="after")
    def ordered_bands(self) -> "StatusConfig":
        self.bands()
        return self

    def bands(self) -> StatusBands:
        return StatusBands(not_healthy_below=self.not_healthy_below, watch_below=self.watch_below)


class IncidentConfig(BaseModel):
    # Size of the newest-first incident ring.
    max_incidents: int = Field(default=50, ge=1, description="Incidents retained in the log")


class PersistenceConfig(BaseModel):
    state_dir: str = Field(default=".race-safety", description="Directory holding state files")
    # Changing the key starts from an empty document.
    storage_key: str = Field(default="raceSafetyMVP.v4", description="State file key")


class RaceSafetySettings(BaseSettings):
    """Configuration settings loaded from env or optional TOML."""

    # Environment keys use RACESAFETY_ prefix and "__" nesting.
    model_config = SettingsConfigDict(env_prefix="RACESAFETY_", env_nested_delimiter="__", extra="ignore")

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    status: StatusConfig = Field(default_factory=StatusConfig)
    incidents: IncidentConfig = Field(default_factory=IncidentConfig)
    persistence: PersistenceConfig = Field(default_factory=PersistenceConfig)
    default_template: str = Field(default=DEFAULT_TEMPLATE, description="Template for a fresh document")

    @field_validator("default_template")
    @classmethod
    def known_template(cls, value: str) -> str:
        if value not in TEMPLATES:
            raise ValueError(f"unknown template {value!r}; expected one of {sorted(TEMPLATES)}")
        return value

    @classmethod
    def from_toml(cls, path: str | Path) -> "RaceSafetySettings":
        data = tomllib.loads(Path(path).read_text())
        return cls(**data)
