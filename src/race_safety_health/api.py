"""Public API facade for race safety sessions.

This module provides a single, discoverable entry point that assembles the
store, the scoring engine and persistence into a ready session.
"""

from __future__ import annotations

import logging

from .config import RaceSafetySettings
from .controller import SafetyController
from .logging_utils import configure_logging
from .persistence import JsonFileAdapter, StateAdapter


def build_controller(
    settings: RaceSafetySettings | None = None,
    adapter: StateAdapter | None = None,
    logger: logging.Logger | None = None,
) -> SafetyController:
    """Create a SafetyController with file persistence and logging configured."""

    settings = settings or RaceSafetySettings()
    configure_logging(settings.logging)

    logger = logger or logging.getLogger("race_safety_health")
    if adapter is None:
        adapter = JsonFileAdapter(settings.persistence.state_dir, settings.persistence.storage_key)
    return SafetyController(adapter, settings=settings, logger=logger)
