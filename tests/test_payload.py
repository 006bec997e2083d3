"""Tests for the JSON boundary and the assistant tool."""

import json

import pytest
from pydantic import ValidationError

from payoffsim.engine import Strategy, simulate
from payoffsim.tools import (
    CALCULATE_CREDIT_IMPACT_TOOL,
    SIMULATE_DEBT_PAYOFF_TOOL,
    TOOLS,
    PayloadError,
    SimulationRequest,
    handle_tool_call,
    parse_simulation_input,
    parse_strategy,
    result_to_payload,
    simulate_payload,
)


@pytest.fixture
def body() -> dict:
    return {
        "cards": [
            {"id": "x", "balance": 5000, "apr": 0.25, "minPayment": 25, "limit": 8000, "dueDayOfMonth": 12},
            {"id": "y", "balance": 500, "apr": 0.10, "minPayment": 100},
        ],
        "monthlyBudget": 200,
        "strategy": "snowball",
    }


class TestParseInput:

    def test_valid_body(self, body):
        sim_input = parse_simulation_input(body)
        assert sim_input.monthly_budget == 200.0
        assert [a.id for a in sim_input.accounts] == ["x", "y"]
        x = sim_input.accounts[0]
        assert x.min_payment == 25.0
        assert x.limit == 8000.0
        assert x.due_day_of_month == 12

    def test_accounts_alias(self, body):
        body["accounts"] = body.pop("cards")
        assert len(parse_simulation_input(body).accounts) == 2

    def test_id_falls_back_to_name(self):
        sim_input = parse_simulation_input({
            "cards": [
                {"name": "Chase", "balance": 100, "apr": 0.2, "minPayment": 25},
                {"balance": 100, "apr": 0.2, "minPayment": 25},
            ],
            "monthlyBudget": 0,
        })
        assert [a.id for a in sim_input.accounts] == ["Chase", "card-2"]

    @pytest.mark.parametrize("payload, match", [
        (None, "Invalid JSON body"),
        ({"monthlyBudget": 100}, "cards"),
        ({"cards": "visa", "monthlyBudget": 100}, "cards"),
        ({"cards": []}, "monthlyBudget"),
        ({"cards": [], "monthlyBudget": -5}, "monthlyBudget"),
        ({"cards": [], "monthlyBudget": "100"}, "monthlyBudget"),
        ({"cards": [], "monthlyBudget": True}, "monthlyBudget"),
        ({"cards": [], "monthlyBudget": float("nan")}, "monthlyBudget"),
        ({"cards": ["visa"], "monthlyBudget": 0}, r"cards\[0\]"),
        ({"cards": [{"id": "a", "apr": 0.2}], "monthlyBudget": 0}, r"cards\[0\].balance"),
        ({"cards": [{"id": "a", "balance": 10}], "monthlyBudget": 0}, r"cards\[0\].apr"),
        ({"cards": [{"id": "a", "balance": -10, "apr": 0.2}], "monthlyBudget": 0}, "balance"),
        ({"cards": [{"id": "a", "balance": 10, "apr": 0.2, "minPayment": "25"}], "monthlyBudget": 0}, "minPayment"),
        ({"cards": [{"id": "a", "balance": 10, "apr": 0.2, "dueDayOfMonth": "5"}], "monthlyBudget": 0}, "dueDayOfMonth"),
        ({"cards": [{"id": "a", "balance": 10, "apr": 0.2, "dueDayOfMonth": 40}], "monthlyBudget": 0}, "dueDayOfMonth"),
        ({"cards": [{"id": "a", "balance": 10, "apr": float("inf")}], "monthlyBudget": 0}, r"cards\[0\].apr"),
        ({"cards": [], "monthlyBudget": 0, "strategy": "custom"}, "strategy"),
    ])
    def test_rejects_malformed(self, payload, match):
        with pytest.raises(PayloadError, match=match):
            parse_simulation_input(payload)

    def test_duplicate_ids_rejected(self):
        card = {"id": "a", "balance": 10, "apr": 0.2, "minPayment": 5}
        with pytest.raises(PayloadError, match="unique"):
            parse_simulation_input({"cards": [card, dict(card)], "monthlyBudget": 0})

    def test_validation_error_is_chained(self):
        with pytest.raises(PayloadError) as excinfo:
            parse_simulation_input({"cards": [], "monthlyBudget": -1})
        assert isinstance(excinfo.value.__cause__, ValidationError)

    def test_request_model_by_alias(self, body):
        request = SimulationRequest.model_validate(body)
        assert request.monthly_budget == 200.0
        assert request.strategy == "snowball"
        assert request.cards[0].min_payment == 25.0
        assert request.cards[1].limit == 0.0

    def test_payload_error_is_value_error(self):
        assert issubclass(PayloadError, ValueError)


class TestParseStrategy:

    def test_default(self):
        assert parse_strategy(None) is Strategy.AVALANCHE

    def test_named(self):
        assert parse_strategy("snowball") is Strategy.SNOWBALL

    def test_unknown(self):
        with pytest.raises(PayloadError, match="Unknown strategy"):
            parse_strategy("custom")


class TestSerialize:

    def test_result_shape(self, body):
        result = simulate(parse_simulation_input(body), Strategy.SNOWBALL)
        payload = result_to_payload(result)
        assert set(payload) == {"totalInterest", "monthsToDebtFree", "status", "steps"}
        assert payload["status"] == "debt_free"
        assert payload["monthsToDebtFree"] == len(payload["steps"])
        first = payload["steps"][0]
        assert set(first) == {"monthIndex", "allocations", "balances", "interestAccrued"}
        assert first["allocations"]["y"] == pytest.approx(300)
        assert first["allocations"]["x"] == pytest.approx(25)

    def test_simulate_payload(self, body):
        response = simulate_payload(body)
        assert response["strategy"] == "snowball"
        assert response["result"]["totalInterest"] > 0
        assert response["recommendation"].startswith("Using the snowball method")

    def test_simulate_payload_default_strategy(self, body):
        del body["strategy"]
        assert simulate_payload(body)["strategy"] == "avalanche"


class TestAssistantTool:

    def test_schema(self):
        assert SIMULATE_DEBT_PAYOFF_TOOL["name"] == "simulate_debt_payoff"
        params = SIMULATE_DEBT_PAYOFF_TOOL["parameters"]
        assert set(params["required"]) == {"cards", "monthlyBudget", "strategy"}
        assert params["properties"]["strategy"]["enum"] == ["avalanche", "snowball"]
        card = params["properties"]["cards"]["items"]
        assert {"name", "balance", "apr", "minPayment", "limit"} <= set(card["properties"])
        assert set(card["required"]) == {"balance", "apr"}
        assert card["properties"]["balance"]["minimum"] == 0

    def test_schemas_have_no_refs(self):
        for tool in TOOLS:
            assert "$ref" not in json.dumps(tool["parameters"])

    def test_credit_impact_schema(self):
        assert [t["name"] for t in TOOLS] == ["simulate_debt_payoff", "calculate_credit_impact"]
        params = CALCULATE_CREDIT_IMPACT_TOOL["parameters"]
        assert set(params["required"]) == {"cards", "paymentScenarios"}
        scenario = params["properties"]["paymentScenarios"]["items"]
        assert set(scenario["required"]) == {"label", "amount"}

    def test_called_twice_to_compare(self):
        arguments = {
            "cards": [
                {"name": "X", "balance": 5000, "apr": 0.25, "minPayment": 25},
                {"name": "Y", "balance": 500, "apr": 0.10, "minPayment": 100},
            ],
            "monthlyBudget": 200,
        }
        avalanche = handle_tool_call("simulate_debt_payoff", {**arguments, "strategy": "avalanche"})
        snowball = handle_tool_call("simulate_debt_payoff", {**arguments, "strategy": "snowball"})
        assert avalanche["strategy"] == "avalanche"
        assert snowball["strategy"] == "snowball"
        assert avalanche["steps"][0]["allocations"]["X"] == pytest.approx(225)
        assert snowball["steps"][0]["allocations"]["Y"] == pytest.approx(300)
        assert avalanche["totalInterest"] <= snowball["totalInterest"]

    def test_unknown_tool(self):
        with pytest.raises(ValueError, match="Unknown tool"):
            handle_tool_call("get_user_context", {})

    def test_bad_arguments(self):
        with pytest.raises(PayloadError):
            handle_tool_call("simulate_debt_payoff", {"cards": [], "strategy": "avalanche"})

    def test_strategy_required_for_tool(self):
        arguments = {"cards": [{"name": "X", "balance": 100, "apr": 0.2}], "monthlyBudget": 50}
        with pytest.raises(PayloadError, match="strategy"):
            handle_tool_call("simulate_debt_payoff", arguments)

    def test_credit_impact_call(self):
        arguments = {
            "cards": [
                {"name": "Visa", "balance": 4000, "limit": 5000},
                {"name": "MC", "balance": 2000, "limit": 5000},
            ],
            "paymentScenarios": [
                {"label": "Minimum Payment", "amount": 200},
                {"label": "Pay Down", "amount": 5400},
            ],
            "currentScore": 650,
        }
        payload = handle_tool_call("calculate_credit_impact", arguments)
        assert payload["currentState"]["utilization"] == pytest.approx(60.0)
        assert payload["currentState"]["currentScore"] == 650
        minimum, pay_down = payload["scenarios"]
        assert minimum["label"] == "Minimum Payment"
        assert minimum["impactLevel"] == "minimal"
        assert pay_down["newUtilization"] == pytest.approx(6.0)
        assert pay_down["impactLevel"] == "excellent"
        assert pay_down["estimatedScoreImpact"] == 219
        assert pay_down["projectedScore"] == 869
        assert payload["disclaimer"]

    def test_credit_impact_bad_arguments(self):
        with pytest.raises(PayloadError, match=r"paymentScenarios\[0\].amount"):
            handle_tool_call("calculate_credit_impact", {
                "cards": [{"balance": 100, "limit": 1000}],
                "paymentScenarios": [{"label": "x", "amount": -1}],
            })
