"""
knowledge_base/admin.py
=======================
Django admin configuration for the stored rule sets.

Customized RuleModelAdmin with:
    - Antecedents edited as a comma-separated list of facts.
    - Fault consequents highlighted in the list view.
"""

from django import forms
from django.contrib import admin
from django.utils.html import format_html

from inference_engine.services import diagnosis_settings

from .models import RuleModel


# ─────────────────────────────────────────────────────────────────────
# Rule Admin — Custom Form with comma-separated antecedents
# ─────────────────────────────────────────────────────────────────────


class RuleAdminForm(forms.ModelForm):
    """Custom form for :class:`RuleModel` in the admin.

    Renders the JSON ``antecedents`` list as a single text input where
    facts are separated by commas.
    """

    antecedents = forms.CharField(
        required=False,
        widget=forms.TextInput(attrs={"style": "width: 480px;"}),
        help_text="Comma-separated facts, e.g. battery_low, old_battery. Leave empty for an unconditional rule.",
    )

    class Meta:
        model = RuleModel
        fields = "__all__"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if self.instance and self.instance.pk:
            self.initial["antecedents"] = ", ".join(self.instance.antecedents or [])

    def clean_antecedents(self) -> list[str]:
        raw: str = self.cleaned_data.get("antecedents") or ""
        return [fact.strip() for fact in raw.split(",") if fact.strip()]


@admin.register(RuleModel)
class RuleModelAdmin(admin.ModelAdmin):
    """Admin view for :class:`RuleModel`."""

    form = RuleAdminForm

    list_display: list[str] = [
        "position",
        "chain",
        "conditions",
        "consequent_badge",
        "description",
    ]
    list_display_links: list[str] = ["conditions"]
    list_filter: list[str] = ["chain"]
    search_fields: list[str] = ["consequent", "description"]
    ordering: list[str] = ["chain", "position"]
    list_per_page: int = 25

    fieldsets = (
        (
            "Rule Set",
            {
                "fields": ("chain", "position"),
            },
        ),
        (
            "Implication",
            {
                "fields": ("antecedents", "consequent", "description"),
                "description": "All antecedents must hold for the consequent to be asserted.",
            },
        ),
    )

    @admin.display(description="If")
    def conditions(self, obj: RuleModel) -> str:
        return " ∧ ".join(obj.antecedents or []) or "TRUE"

    @admin.display(description="Then", ordering="consequent")
    def consequent_badge(self, obj: RuleModel) -> str:
        """Render fault consequents in red."""
        prefix: str = diagnosis_settings()["FAULT_PREFIX"]
        colour: str = "#ef4444" if obj.consequent.startswith(prefix) else "#334155"
        return format_html(
            '<span style="font-family:monospace; font-weight:600; color:{};">{}</span>',
            colour,
            obj.consequent,
        )
