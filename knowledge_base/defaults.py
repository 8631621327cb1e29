"""
knowledge_base/defaults.py
==========================
Built-in rule sets for device fault diagnosis.

Forward rules are permissive and generate hypotheses; backward rules
are stricter and require stronger evidence before a fault is proved.
Served by the ``static`` rule source and written to the database by
``manage.py seed_data``.
"""

from __future__ import annotations

FAULT_PREFIX: str = "fault_"

FORWARD_RULES: list[dict] = [
    {
        "antecedents": ["battery_low"],
        "consequent": "power_unstable",
        "description": "Low battery can cause unstable power",
    },
    {
        "antecedents": ["power_unstable"],
        "consequent": "system_restarts",
        "description": "Unstable power can trigger restarts",
    },
    {
        "antecedents": ["no_wifi", "router_off"],
        "consequent": "network_down",
        "description": "No WiFi and router off implies network down",
    },
    {
        "antecedents": ["network_down"],
        "consequent": "cannot_sync",
        "description": "If the network is down, syncing fails",
    },
    # fault hypotheses
    {
        "antecedents": ["power_unstable"],
        "consequent": "fault_power_supply",
        "description": "Unstable power suggests power supply fault",
    },
    {
        "antecedents": ["battery_low", "charging_not_working"],
        "consequent": "fault_battery",
        "description": "Low battery + charging not working suggests battery fault",
    },
    {
        "antecedents": ["network_down"],
        "consequent": "fault_network",
        "description": "Network down suggests network fault",
    },
]

BACKWARD_RULES: list[dict] = [
    # intermediate states
    {
        "antecedents": ["battery_low"],
        "consequent": "power_unstable",
        "description": "Low battery can cause unstable power",
    },
    {
        "antecedents": ["mains_fluctuation"],
        "consequent": "power_unstable",
        "description": "Mains fluctuation can cause unstable power",
    },
    {
        "antecedents": ["power_unstable"],
        "consequent": "system_restarts",
        "description": "Unstable power can trigger restarts",
    },
    {
        "antecedents": ["interference", "weak_signal"],
        "consequent": "no_wifi",
        "description": "Interference and weak signal cause Wi-Fi loss",
    },
    {
        "antecedents": ["no_wifi", "router_off"],
        "consequent": "network_down",
        "description": "Router off with no Wi-Fi implies network is down",
    },
    {
        "antecedents": ["network_down"],
        "consequent": "cannot_sync",
        "description": "No network means syncing fails",
    },
    # fault hypotheses
    {
        "antecedents": ["power_unstable", "system_restarts"],
        "consequent": "fault_power_supply",
        "description": "Unstable power AND restarts indicate power supply fault",
    },
    {
        "antecedents": ["battery_low", "charging_not_working", "old_battery"],
        "consequent": "fault_battery",
        "description": "Low, not charging, and aged battery indicates battery fault",
    },
    {
        "antecedents": ["no_wifi", "router_off", "cannot_sync"],
        "consequent": "fault_network",
        "description": "No Wi-Fi, router off, and cannot sync indicates network fault",
    },
]


def default_rule_data(fault_prefix: str = FAULT_PREFIX) -> dict:
    """Return the built-in rule base in its serialised form."""
    return {
        "forward_rules": FORWARD_RULES,
        "backward_rules": BACKWARD_RULES,
        "fault_prefix": fault_prefix,
    }
