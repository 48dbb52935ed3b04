"""Command-line access to a persisted race safety session."""

from __future__ import annotations

import argparse
import json
import sys

from pydantic import ValidationError as SchemaError

from .api import build_controller
from .config import RaceSafetySettings
from .controller import SafetyController, SessionUpdate
from .errors import NotFoundError, ValidationError
from .report import build_report


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="race-safety", description="Race safety health scoring")
    parser.add_argument("--config", help="Path to TOML configuration file")
    parser.add_argument("--state-dir", help="Directory holding the session state file")
    parser.add_argument("--storage-key", help="State file key (a new key starts a fresh session)")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("score", help="Print the current score snapshot")

    report = commands.add_parser("report", help="Print the tabular report")
    report.add_argument("--csv", action="store_true", help="Emit CSV instead of JSON")

    template = commands.add_parser("template", help="Reset to a scenario template")
    template.add_argument("key")

    role = commands.add_parser("role", help="Switch the role view")
    role.add_argument("name")

    incident = commands.add_parser("incident", help="Log an incident against a hazard")
    incident.add_argument("hazard_id")
    incident.add_argument("type")
    incident.add_argument("--notes", default="")

    constraint = commands.add_parser("constraint", help="Set a constraint status")
    constraint.add_argument("constraint_id")
    constraint.add_argument("status", choices=["pass", "warn", "fail"])

    selectors = commands.add_parser("filter", help="Set or clear domain/segment filters")
    selectors.add_argument("--domain")
    selectors.add_argument("--segment")
    selectors.add_argument("--clear", action="store_true")
    return parser


def _settings(args: argparse.Namespace) -> RaceSafetySettings:
    settings = RaceSafetySettings.from_toml(args.config) if args.config else RaceSafetySettings()
    if args.state_dir:
        settings.persistence.state_dir = args.state_dir
    if args.storage_key:
        settings.persistence.storage_key = args.storage_key
    return settings


def _run(controller: SafetyController, args: argparse.Namespace) -> str:
    update: SessionUpdate | None = None
    if args.command == "template":
        update = controller.select_template(args.key)
    elif args.command == "role":
        update = controller.select_role(args.name)
    elif args.command == "incident":
        update = controller.log_incident(args.hazard_id, args.type, args.notes)
    elif args.command == "constraint":
        update = controller.set_constraint_status(args.constraint_id, args.status)
    elif args.command == "filter":
        if args.clear:
            update = controller.clear_filters()
        if args.domain:
            update = controller.set_domain_filter(args.domain)
        if args.segment:
            update = controller.set_segment_filter(args.segment)

    snapshot = update.snapshot if update else controller.snapshot
    if args.command == "report":
        report = build_report(
            controller.document,
            snapshot,
            penalty_per_uca=controller.settings.scoring.penalty_per_uca,
        )
        return report.to_csv() if args.csv else json.dumps(report.to_dict(), indent=2, ensure_ascii=False)
    return json.dumps(snapshot.to_dict(), indent=2, ensure_ascii=False)


def main(argv: list[str] | None = None) -> int:
    args = _parser().parse_args(argv)
    try:
        controller = build_controller(_settings(args))
        output = _run(controller, args)
    except (NotFoundError, ValidationError, SchemaError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
