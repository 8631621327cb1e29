import pytest
from django.apps import apps
from rest_framework.test import APIClient

from inference_engine.services import RuleBase
from knowledge_base.defaults import default_rule_data


def make_rule_base(forward=(), backward=None, fault_prefix="fault_"):
    """Build a rule base from ``(antecedents, consequent)`` pairs."""
    def to_dicts(rules):
        return [
            {"antecedents": list(antecedents), "consequent": consequent}
            for antecedents, consequent in rules
        ]

    return RuleBase.from_dict(
        {
            "forward_rules": to_dicts(forward),
            "backward_rules": to_dicts(forward if backward is None else backward),
            "fault_prefix": fault_prefix,
        }
    )


@pytest.fixture
def power_rules():
    """``{} -> battery_low``, ``[battery_low] -> fault_power_supply``."""
    return make_rule_base(
        forward=[
            ((), "battery_low"),
            (("battery_low",), "fault_power_supply"),
        ]
    )


@pytest.fixture
def cyclic_rules():
    """``[x] -> y``, ``[y] -> x``."""
    return make_rule_base(
        forward=[
            (("x",), "y"),
            (("y",), "x"),
        ]
    )


@pytest.fixture
def default_rules():
    return RuleBase.from_dict(default_rule_data())


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def use_rule_base(monkeypatch):
    """Swap the process-wide rule base for the duration of a test."""
    config = apps.get_app_config("inference_engine")

    def install(rule_base):
        monkeypatch.setattr(config, "_rule_base", rule_base)
        return rule_base

    return install
