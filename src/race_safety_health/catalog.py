"""Static catalogs: EMBOK domains, readiness criteria, roles, controls and incident types.

Everything here is fixed reference data. Other modules treat these as closed
sets and never mutate them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

# Sentinels used by role lenses.
ALL = "all"
NONE = "none"

# Segment id for hazards that apply to the whole course.
WHOLE_COURSE = "SEG-ALL"

# Score assumed for readiness criteria nobody has scored yet.
DEFAULT_READINESS = 0.75

DOMAINS: tuple[str, ...] = (
    "Financial",
    "Organizational",
    "Health / Sanitary",
    "Legal",
    "Operational",
    "Sports",
    "Public Relations / Publicity",
    "Human Resources",
    "Environmental",
    "Security – Threats",
)

LANGUAGES: tuple[str, ...] = ("en", "el")

INCIDENT_TYPES: tuple[str, ...] = (
    "Heat illness",
    "Runner collision",
    "Course confusion",
    "Traffic incursion",
    "Security concern",
    "Lightning / storm",
    "Trail fall",
)


def is_domain(label: str | None) -> bool:
    return label in DOMAINS


@dataclass(frozen=True)
class ReadinessCriterion:
    """One line of a domain readiness checklist."""

    id: str
    domain: str
    label: str


def _criteria(domain: str, *items: tuple[str, str]) -> tuple[ReadinessCriterion, ...]:
    return tuple(ReadinessCriterion(id=cid, domain=domain, label=label) for cid, label in items)


READINESS_CRITERIA: Mapping[str, tuple[ReadinessCriterion, ...]] = {
    "Financial": _criteria(
        "Financial",
        ("budget", "Budget approved with contingency"),
        ("insurance", "Event insurance in force"),
        ("sponsors", "Sponsor obligations confirmed"),
    ),
    "Organizational": _criteria(
        "Organizational",
        ("org-chart", "Command structure published"),
        ("briefings", "Team briefings scheduled"),
        ("timeline", "Race-week timeline locked"),
    ),
    "Health / Sanitary": _criteria(
        "Health / Sanitary",
        ("medical-plan", "Medical plan signed off"),
        ("aed", "AED positions mapped"),
        ("sanitation", "Toilets and hygiene stations ordered"),
    ),
    "Legal": _criteria(
        "Legal",
        ("permits", "Road closure permits granted"),
        ("waivers", "Participant waivers collected"),
        ("privacy", "Data protection notice published"),
    ),
    "Operational": _criteria(
        "Operational",
        ("signage", "Course signage installed"),
        ("water", "Water stations supplied"),
        ("logistics", "Vendor deliveries scheduled"),
    ),
    "Sports": _criteria(
        "Sports",
        ("course-measured", "Course measured and certified"),
        ("timing", "Timing system tested"),
        ("marshals", "Course marshals assigned"),
    ),
    "Public Relations / Publicity": _criteria(
        "Public Relations / Publicity",
        ("comms-plan", "Crisis communications plan ready"),
        ("residents", "Residents notified of closures"),
        ("media", "Media accreditation handled"),
    ),
    "Human Resources": _criteria(
        "Human Resources",
        ("staffing", "Volunteer roster filled"),
        ("training", "Volunteer training completed"),
        ("shifts", "Shift relief planned"),
    ),
    "Environmental": _criteria(
        "Environmental",
        ("weather", "Weather monitoring arranged"),
        ("waste", "Waste and recycling plan ready"),
        ("heat-plan", "Heat / cold contingencies defined"),
    ),
    "Security – Threats": _criteria(
        "Security – Threats",
        ("threat-assessment", "Threat assessment reviewed"),
        ("radio", "Radio comms tested"),
        ("barriers", "Vehicle barriers placed"),
    ),
}


def criteria_for(domain: str) -> tuple[ReadinessCriterion, ...]:
    return READINESS_CRITERIA.get(domain, ())


@dataclass(frozen=True)
class RoleLens:
    """Read-only view over the risk model for one role.

    ``visible_domains`` is a set of domains or ``ALL``. ``visible_controls``
    is a set of control names, ``ALL`` or ``NONE``.
    """

    name: str
    visible_domains: frozenset[str] | str = ALL
    visible_controls: frozenset[str] | str = ALL


def _lens(name: str, domains: tuple[str, ...] | str, controls: tuple[str, ...] | str) -> RoleLens:
    if not isinstance(domains, str):
        domains = frozenset(domains)
    if not isinstance(controls, str):
        controls = frozenset(controls) if controls else NONE
    return RoleLens(name=name, visible_domains=domains, visible_controls=controls)


DEFAULT_ROLE = "Race Director"

ROLES: Mapping[str, RoleLens] = {
    lens.name: lens
    for lens in (
        _lens("Race Director", ALL, ALL),
        _lens(
            "Operations Lead",
            ("Organizational", "Operational", "Sports"),
            ("Traffic / Course Separation", "Crowd Flow at Start/Finish"),
        ),
        _lens(
            "Medical Lead",
            ("Health / Sanitary", "Sports"),
            ("Heat / Cold Protocol", "Medical Response & AED coverage"),
        ),
        _lens(
            "Security Lead",
            ("Security – Threats", "Operational"),
            ("Security Screening Perimeter", "Traffic / Course Separation"),
        ),
        _lens("PR / Media Lead", ("Public Relations / Publicity",), ()),
        _lens("Finance Lead", ("Financial",), ()),
        _lens("HR / Volunteers Lead", ("Human Resources", "Organizational"), ()),
        _lens("Environmental Lead", ("Environmental",), ("Heat / Cold Protocol",)),
        _lens("Legal / Compliance Lead", ("Legal",), ()),
        _lens(
            "Sports / Course Lead",
            ("Sports", "Operational", "Environmental"),
            ("Trail Sweep / Search & Rescue", "Crowd Flow at Start/Finish"),
        ),
    )
}

# Control loops are scenario-independent: (id, name, readiness, uca_count).
DEFAULT_CONTROLS: tuple[tuple[str, str, float, int], ...] = (
    ("C1", "Heat / Cold Protocol", 0.7, 1),
    ("C2", "Traffic / Course Separation", 0.8, 0),
    ("C3", "Medical Response & AED coverage", 0.75, 1),
    ("C4", "Crowd Flow at Start/Finish", 0.85, 0),
    ("C5", "Security Screening Perimeter", 0.6, 2),
    ("C6", "Trail Sweep / Search & Rescue", 0.65, 1),
)
