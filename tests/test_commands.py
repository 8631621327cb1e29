import io
import json

import pytest
from django.core.management import CommandError, call_command

from knowledge_base.models import RuleModel


def run(*args, **kwargs):
    out = io.StringIO()
    call_command(*args, stdout=out, **kwargs)
    return out.getvalue()


class TestDiagnoseCommand:

    def test_forward_report(self):
        output = run("diagnose", "--fact", "battery_low", "--fact", "charging_not_working")
        assert "=== forward chaining diagnosis report ===" in output
        assert "candidate faults: fault_battery, fault_power_supply" in output

    def test_backward_report(self):
        output = run("diagnose", "--fact", "mains_fluctuation", "--goal", "fault_power_supply")
        assert "goal is provable" in output
        assert "- fault_power_supply <= power_unstable AND system_restarts" in output

    def test_json_output(self):
        output = run("diagnose", "--goal", "fault_network", "--json")
        result = json.loads(output)
        assert result["provable"] is False
        assert result["proof"] is None

    def test_blank_goal(self):
        with pytest.raises(CommandError, match="--goal"):
            run("diagnose", "--goal", "  ")


@pytest.mark.django_db
class TestSeedDataCommand:

    def test_seeds_both_chains(self):
        output = run("seed_data")
        assert RuleModel.objects.filter(chain=RuleModel.Chain.FORWARD).count() == 7
        assert RuleModel.objects.filter(chain=RuleModel.Chain.BACKWARD).count() == 9
        assert "Seeding complete: 7 forward rules, 9 backward rules" in output

    def test_is_idempotent(self):
        run("seed_data")
        output = run("seed_data")
        assert RuleModel.objects.count() == 16
        assert "[CREATED]" not in output

    def test_clear_removes_extra_rules(self):
        RuleModel.objects.create(chain=RuleModel.Chain.FORWARD, position=99, antecedents=[], consequent="stale")
        run("seed_data", "--clear")
        assert not RuleModel.objects.filter(consequent="stale").exists()
        assert RuleModel.objects.count() == 16


@pytest.mark.django_db
class TestRuleModel:

    def test_clean_rejects_blank_consequent(self):
        from django.core.exceptions import ValidationError

        rule = RuleModel(chain=RuleModel.Chain.FORWARD, antecedents=["a"], consequent="  ")
        with pytest.raises(ValidationError) as excinfo:
            rule.full_clean()
        assert "consequent" in excinfo.value.message_dict

    def test_clean_rejects_bad_antecedents(self):
        from django.core.exceptions import ValidationError

        rule = RuleModel(chain=RuleModel.Chain.FORWARD, antecedents=["a", 1], consequent="b")
        with pytest.raises(ValidationError) as excinfo:
            rule.full_clean()
        assert "antecedents" in excinfo.value.message_dict

    def test_str(self):
        rule = RuleModel(chain=RuleModel.Chain.BACKWARD, position=2, antecedents=[], consequent="b")
        assert str(rule) == "[Backward #2] TRUE → b"
