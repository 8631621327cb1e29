import pytest
from django.apps import apps
from django.urls import reverse

from inference_engine.services import ForwardChainingStrategy
from inference_engine.services.backward_chaining import depth_ceiling
from knowledge_base.models import RuleModel

from .conftest import make_rule_base


class TestServiceStatus:

    def test_root(self, api_client):
        response = api_client.get("/")
        assert response.status_code == 200
        assert response.json() == {"message": "Symbolic Fault Diagnosis API"}

    @pytest.mark.django_db
    def test_health(self, api_client):
        response = api_client.get("/test")
        assert response.status_code == 200
        assert response.json()["backend"] == "running"
        assert response.json()["database"] == "ok"


class TestRuleList:

    def test_lists_loaded_rule_sets(self, api_client):
        response = api_client.get(reverse("api:rule-list"))

        assert response.status_code == 200
        body = response.json()
        assert body["fault_prefix"] == "fault_"
        assert len(body["forward_rules"]) == 7
        assert len(body["backward_rules"]) == 9
        assert body["forward_rules"][0] == {
            "antecedents": ["battery_low"],
            "consequent": "power_unstable",
            "description": "Low battery can cause unstable power",
        }

    def test_description_is_omitted_when_absent(self, api_client, use_rule_base, power_rules):
        use_rule_base(power_rules)
        body = api_client.get("/rules").json()
        assert body["forward_rules"] == [
            {"antecedents": [], "consequent": "battery_low"},
            {"antecedents": ["battery_low"], "consequent": "fault_power_supply"},
        ]


@pytest.mark.django_db
class TestRuleRecordList:

    @pytest.fixture(autouse=True)
    def rules(self):
        RuleModel.objects.create(chain=RuleModel.Chain.FORWARD, position=0, antecedents=["a"], consequent="fault_a", description="a breaks")
        RuleModel.objects.create(chain=RuleModel.Chain.BACKWARD, position=0, antecedents=["b"], consequent="fault_b")
        RuleModel.objects.create(chain=RuleModel.Chain.BACKWARD, position=1, antecedents=["c"], consequent="fault_b")

    def test_lists_all(self, api_client):
        response = api_client.get("/rules/records")
        assert response.status_code == 200
        assert [r["chain"] for r in response.json()] == ["BACKWARD", "BACKWARD", "FORWARD"]

    def test_filter_by_chain(self, api_client):
        body = api_client.get("/rules/records", {"chain": "FORWARD"}).json()
        assert [r["consequent"] for r in body] == ["fault_a"]
        assert body[0]["chain_display"] == "Forward"

    def test_filter_by_consequent(self, api_client):
        body = api_client.get("/rules/records", {"consequent": "fault_b"}).json()
        assert [r["antecedents"] for r in body] == [["b"], ["c"]]

    def test_search_description(self, api_client):
        body = api_client.get("/rules/records", {"search": "breaks"}).json()
        assert len(body) == 1


class TestForwardDiagnosis:

    def test_scenario_from_observed_battery(self, api_client):
        response = api_client.post(
            "/diagnose/forward",
            {"facts": ["battery_low", "charging_not_working"]},
            format="json",
        )

        assert response.status_code == 200
        body = response.json()
        assert body["input_facts"] == ["battery_low", "charging_not_working"]
        assert body["derived_facts"] == [
            "fault_battery",
            "fault_power_supply",
            "power_unstable",
            "system_restarts",
        ]
        assert body["faults"] == ["fault_battery", "fault_power_supply"]
        assert [t["consequent"] for t in body["trace"]] == [
            "power_unstable",
            "system_restarts",
            "fault_power_supply",
            "fault_battery",
        ]

    def test_unconditional_rules(self, api_client, use_rule_base, power_rules):
        use_rule_base(power_rules)
        body = api_client.post("/diagnose/forward", {"facts": []}, format="json").json()
        assert body["derived_facts"] == ["battery_low", "fault_power_supply"]
        assert body["faults"] == ["fault_power_supply"]
        assert len(body["trace"]) == 2

    def test_empty_result_is_not_an_error(self, api_client):
        response = api_client.post("/diagnose/forward", {"facts": ["unrelated"]}, format="json")
        assert response.status_code == 200
        assert response.json()["derived_facts"] == []
        assert response.json()["faults"] == []

    def test_whitespace_and_blank_facts(self, api_client):
        body = api_client.post(
            "/diagnose/forward",
            {"facts": [" battery_low ", "", "battery_low"]},
            format="json",
        ).json()
        assert body["input_facts"] == ["battery_low"]

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"facts": "battery_low"},
            {"facts": ["battery_low", 3]},
            {"facts": [None]},
            {"facts": [{"name": "battery_low"}]},
            {"facts": [True]},
        ],
    )
    def test_malformed_bodies_are_rejected(self, api_client, payload):
        response = api_client.post("/diagnose/forward", payload, format="json")
        assert response.status_code == 400
        assert "facts" in response.json()

    def test_long_fact_names_are_accepted(self, api_client):
        fact = "x" * 201
        response = api_client.post("/diagnose/forward", {"facts": [fact]}, format="json")
        assert response.status_code == 200
        assert response.json()["input_facts"] == [fact]

    def test_non_json_body_is_rejected(self, api_client):
        response = api_client.post("/diagnose/forward", "facts", content_type="application/json")
        assert response.status_code == 400

    def test_get_is_not_allowed(self, api_client):
        assert api_client.get("/diagnose/forward").status_code == 405


class TestBackwardDiagnosis:

    def test_provable_goal(self, api_client):
        response = api_client.post(
            "/diagnose/backward",
            {"facts": ["mains_fluctuation"], "goal": "fault_power_supply"},
            format="json",
        )

        assert response.status_code == 200
        body = response.json()
        assert body["goal"] == "fault_power_supply"
        assert body["facts"] == ["mains_fluctuation"]
        assert body["provable"] is True
        assert body["proof"]["rule"]["antecedents"] == ["power_unstable", "system_restarts"]
        assert body["proof"]["subproofs"][0]["subproofs"] == [
            {"goal": "mains_fluctuation", "subproofs": []}
        ]

    def test_proof_through_unconditional_rule(self, api_client, use_rule_base, power_rules):
        use_rule_base(power_rules)
        body = api_client.post(
            "/diagnose/backward", {"facts": [], "goal": "fault_power_supply"}, format="json"
        ).json()
        assert body["provable"] is True
        assert body["proof"]["subproofs"][0]["rule"] == {"antecedents": [], "consequent": "battery_low"}

    def test_unprovable_goal_is_a_normal_response(self, api_client):
        response = api_client.post(
            "/diagnose/backward", {"facts": [], "goal": "fault_unknown"}, format="json"
        )
        assert response.status_code == 200
        assert response.json()["provable"] is False
        assert response.json()["proof"] is None

    def test_cycle_terminates(self, api_client, use_rule_base, cyclic_rules):
        use_rule_base(cyclic_rules)
        body = api_client.post("/diagnose/backward", {"facts": [], "goal": "x"}, format="json").json()
        assert body["provable"] is False

    def test_goal_is_trimmed(self, api_client):
        body = api_client.post(
            "/diagnose/backward", {"facts": ["battery_low"], "goal": " battery_low "}, format="json"
        ).json()
        assert body["goal"] == "battery_low"
        assert body["proof"] == {"goal": "battery_low", "subproofs": []}

    @pytest.mark.parametrize(
        "payload",
        [
            {"facts": []},
            {"facts": [], "goal": ""},
            {"facts": [], "goal": "   "},
            {"facts": [], "goal": 5},
            {"goal": "fault_battery"},
        ],
    )
    def test_malformed_bodies_are_rejected(self, api_client, payload):
        response = api_client.post("/diagnose/backward", payload, format="json")
        assert response.status_code == 400

    def test_search_limit_is_reported(self, api_client, use_rule_base, settings):
        use_rule_base(make_rule_base(forward=[((f"f{i + 1}",), f"f{i}") for i in range(30)]))
        settings.FAULT_DIAGNOSIS = {**settings.FAULT_DIAGNOSIS, "MAX_PROOF_DEPTH": 5}

        response = api_client.post("/diagnose/backward", {"facts": [], "goal": "f0"}, format="json")

        assert response.status_code == 422
        assert response.json()["details"] == {"goal": "f0", "limit": "max_depth", "value": 5}

    def test_chain_deeper_than_the_interpreter_allows(self, api_client, use_rule_base, settings):
        use_rule_base(make_rule_base(forward=[((f"f{i + 1}",), f"f{i}") for i in range(3000)]))
        settings.FAULT_DIAGNOSIS = {**settings.FAULT_DIAGNOSIS, "MAX_PROOF_DEPTH": 5000}

        response = api_client.post(
            "/diagnose/backward", {"facts": ["f3000"], "goal": "f0"}, format="json"
        )

        assert response.status_code == 422
        assert response.json()["details"] == {
            "goal": "f0",
            "limit": "max_depth",
            "value": depth_ceiling(),
        }


class TestServerErrors:

    def test_strategy_failure_is_a_generic_500(self, api_client, monkeypatch):
        def explode(self, facts, **kwargs):
            raise RuntimeError("internal bug")

        monkeypatch.setattr(ForwardChainingStrategy, "execute_inference", explode)

        response = api_client.post("/diagnose/forward", {"facts": ["battery_low"]}, format="json")

        assert response.status_code == 500
        assert response.json() == {"error": "An unexpected error occurred."}

    @pytest.fixture
    def broken_database_rules(self, db, settings, monkeypatch):
        RuleModel.objects.create(chain=RuleModel.Chain.FORWARD, antecedents=["a", ""], consequent="b")
        settings.FAULT_DIAGNOSIS = {**settings.FAULT_DIAGNOSIS, "RULE_SOURCE": "database"}
        monkeypatch.setattr(apps.get_app_config("inference_engine"), "_rule_base", None)

    @pytest.mark.parametrize(
        "method, path, payload",
        [
            ("get", "/rules", None),
            ("post", "/diagnose/forward", {"facts": ["a"]}),
            ("post", "/diagnose/backward", {"facts": ["a"], "goal": "b"}),
        ],
    )
    def test_invalid_stored_rules_give_a_json_500(
        self, api_client, broken_database_rules, method, path, payload
    ):
        response = getattr(api_client, method)(path, payload, format="json")

        assert response.status_code == 500
        assert response.json() == {"error": "The rule base is unavailable."}
