import pytest
from django.contrib import admin

from knowledge_base.admin import RuleModelAdmin
from knowledge_base.models import RuleModel


@pytest.fixture
def rule_admin():
    return RuleModelAdmin(RuleModel, admin.site)


class TestRuleModelAdmin:

    def test_conditions(self, rule_admin):
        rule = RuleModel(chain=RuleModel.Chain.FORWARD, antecedents=["a", "b"], consequent="c")
        assert rule_admin.conditions(rule) == "a ∧ b"
        assert rule_admin.conditions(RuleModel(antecedents=[], consequent="c")) == "TRUE"

    def test_fault_consequent_is_highlighted(self, rule_admin):
        badge = rule_admin.consequent_badge(RuleModel(consequent="fault_battery"))
        assert "#ef4444" in badge

    def test_badge_without_diagnosis_settings(self, rule_admin, settings):
        del settings.FAULT_DIAGNOSIS
        assert "#ef4444" in rule_admin.consequent_badge(RuleModel(consequent="fault_battery"))
        assert "#334155" in rule_admin.consequent_badge(RuleModel(consequent="battery_low"))

    def test_badge_follows_configured_prefix(self, rule_admin, settings):
        settings.FAULT_DIAGNOSIS = {**settings.FAULT_DIAGNOSIS, "FAULT_PREFIX": "err_"}
        assert "#ef4444" in rule_admin.consequent_badge(RuleModel(consequent="err_disk"))
        assert "#334155" in rule_admin.consequent_badge(RuleModel(consequent="fault_disk"))
