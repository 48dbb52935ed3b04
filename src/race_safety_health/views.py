"""Role and selector filtering over the record collections."""

from __future__ import annotations

from typing import Iterable

from .catalog import ALL, DOMAINS, NONE, WHOLE_COURSE, RoleLens
from .models import Control, Hazard


def visible_domains(role: RoleLens) -> list[str]:
    """Domains the role can see, in catalog order."""

    if role.visible_domains == ALL:
        return list(DOMAINS)
    return [domain for domain in DOMAINS if domain in role.visible_domains]


def visible_controls(role: RoleLens, controls: Iterable[Control]) -> list[Control]:
    if role.visible_controls == ALL:
        return list(controls)
    if role.visible_controls == NONE:
        return []
    return [control for control in controls if control.name in role.visible_controls]


def visible_hazards(
    role: RoleLens,
    hazards: Iterable[Hazard],
    domain_filter: str | None = None,
    segment_filter: str | None = None,
) -> list[Hazard]:
    """Hazards in the role's domains matching the optional domain and segment selectors.

    Whole-course hazards pass every segment selector.
    """

    domains = set(visible_domains(role))
    selected: list[Hazard] = []
    for hazard in hazards:
        if hazard.domain not in domains:
            continue
        if domain_filter and hazard.domain != domain_filter:
            continue
        if segment_filter and hazard.segment_id not in (segment_filter, WHOLE_COURSE):
            continue
        selected.append(hazard)
    return selected
