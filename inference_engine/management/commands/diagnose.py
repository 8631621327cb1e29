"""
inference_engine/management/commands/diagnose.py
================================================
Run a diagnosis from the command line against the configured rule base.

Usage:
    python manage.py diagnose --fact battery_low --fact charging_not_working
    python manage.py diagnose --fact battery_low --goal fault_power_supply --json
"""

import json

from django.core.management.base import BaseCommand, CommandError

from inference_engine.services import (
    BackwardChainingStrategy,
    DiagnosisService,
    ForwardChainingStrategy,
    InferenceEngineError,
    diagnosis_settings,
    get_rule_base,
)


class Command(BaseCommand):
    help = (
        "Derive faults from observed facts (forward chaining), or prove a "
        "goal with --goal (backward chaining)."
    )

    def add_arguments(self, parser):
        parser.add_argument(
            "--fact",
            dest="facts",
            action="append",
            default=[],
            help="An observed fact. Repeat for several facts.",
        )
        parser.add_argument(
            "--goal",
            help="Fact to prove with backward chaining.",
        )
        parser.add_argument(
            "--json",
            action="store_true",
            dest="as_json",
            help="Print the raw result as JSON instead of the report.",
        )

    def handle(self, *args, **options):
        rule_base = get_rule_base()
        goal: str | None = options.get("goal")
        if goal is not None and not goal.strip():
            raise CommandError("--goal must not be blank.")

        if goal:
            config: dict = diagnosis_settings()
            strategy = BackwardChainingStrategy(
                rule_base,
                max_depth=config["MAX_PROOF_DEPTH"],
                max_steps=config["MAX_PROOF_STEPS"],
            )
            kwargs: dict = {"goal": goal.strip()}
        else:
            strategy = ForwardChainingStrategy(rule_base)
            kwargs = {}

        service = DiagnosisService(strategy=strategy)
        try:
            result: dict = service.diagnose(facts=options["facts"], **kwargs)
        except InferenceEngineError as exc:
            raise CommandError(exc.message) from exc

        if options["as_json"]:
            self.stdout.write(json.dumps(result, indent=2))
        else:
            self.stdout.write(service.explain(result))
