"""
knowledge_base/management/commands/seed_data.py
================================================
Management command to seed the database with the built-in rule sets.

Usage:
    python manage.py seed_data [--clear]
"""

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from inference_engine.services.exceptions import InvalidRuleError
from inference_engine.services.rule_base import RuleBase
from knowledge_base.defaults import default_rule_data
from knowledge_base.models import RuleModel


class Command(BaseCommand):
    help = "Seed the knowledge base with the built-in forward and backward rule sets."

    def add_arguments(self, parser):
        parser.add_argument(
            "--clear",
            action="store_true",
            help="Delete every stored rule before seeding.",
        )

    def handle(self, *args, **options):
        self.stdout.write(self.style.MIGRATE_HEADING("\n=== Seeding Knowledge Base ===\n"))

        data: dict = default_rule_data()
        # refuse to store anything the engine could not load
        try:
            RuleBase.from_dict(data)
        except InvalidRuleError as exc:
            raise CommandError(f"Built-in rules are invalid: {exc.message}") from exc

        with transaction.atomic():
            if options["clear"]:
                deleted, _ = RuleModel.objects.all().delete()
                self.stdout.write(f"  [DELETED] {deleted} stored rules")

            for chain, key in (
                (RuleModel.Chain.FORWARD, "forward_rules"),
                (RuleModel.Chain.BACKWARD, "backward_rules"),
            ):
                for position, rule in enumerate(data[key]):
                    obj, created = RuleModel.objects.update_or_create(
                        chain=chain,
                        position=position,
                        defaults={
                            "antecedents": rule["antecedents"],
                            "consequent": rule["consequent"],
                            "description": rule.get("description") or "",
                        },
                    )
                    status = "CREATED" if created else "UPDATED"
                    self.stdout.write(f"  [{status}] {obj}")

        # ------------------------------------------------------------------
        # Summary
        # ------------------------------------------------------------------
        self.stdout.write(
            self.style.SUCCESS(
                f"\n✔ Seeding complete: "
                f"{RuleModel.objects.filter(chain=RuleModel.Chain.FORWARD).count()} forward rules, "
                f"{RuleModel.objects.filter(chain=RuleModel.Chain.BACKWARD).count()} backward rules.\n"
            )
        )
