from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="RuleModel",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "chain",
                    models.CharField(
                        choices=[("FORWARD", "Forward"), ("BACKWARD", "Backward")],
                        help_text="Rule set consumed by forward or backward chaining.",
                        max_length=10,
                    ),
                ),
                (
                    "position",
                    models.PositiveIntegerField(
                        default=0,
                        help_text="Declared order of the rule within its set.",
                    ),
                ),
                (
                    "antecedents",
                    models.JSONField(
                        blank=True,
                        default=list,
                        help_text='JSON list of required facts, e.g. ["battery_low", "old_battery"].',
                    ),
                ),
                (
                    "consequent",
                    models.CharField(
                        help_text="Fact asserted when every antecedent holds.",
                        max_length=200,
                    ),
                ),
                (
                    "description",
                    models.TextField(
                        blank=True,
                        default="",
                        help_text="Optional explanation shown alongside the rule.",
                    ),
                ),
            ],
            options={
                "verbose_name": "Rule",
                "verbose_name_plural": "Rules",
                "ordering": ["chain", "position", "id"],
                "indexes": [
                    models.Index(
                        fields=["chain", "position"],
                        name="rule_chain_position_idx",
                    )
                ],
            },
        ),
    ]
