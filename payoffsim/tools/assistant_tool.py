"""Tool definitions and dispatch for an AI assistant's function calling."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, Field

from payoffsim.engine.simulator import simulate
from payoffsim.engine.strategy import Strategy
from payoffsim.evaluation.metrics import calculate_credit_impact
from payoffsim.tools.payload import (
    CreditImpactRequest,
    SimulationRequest,
    StrategyName,
    credit_impact_to_payload,
    result_to_payload,
    validate_payload,
)

logger = logging.getLogger(__name__)

SIMULATE_DEBT_PAYOFF = "simulate_debt_payoff"
CALCULATE_CREDIT_IMPACT = "calculate_credit_impact"


class SimulateDebtPayoffArguments(SimulationRequest):
    """Simulation request where the assistant must name the strategy."""

    strategy: StrategyName = Field(description="Payoff strategy to use")


def tool_parameters(model: type[BaseModel]) -> dict[str, Any]:
    """JSON schema for a model's validation shape, with ``$defs`` inlined.

    Function-calling APIs do not all resolve ``$ref``, so nested models are
    expanded in place.
    """
    schema = model.model_json_schema(by_alias=True)
    defs = schema.pop("$defs", {})

    def inline(node: Any) -> Any:
        if isinstance(node, dict):
            ref = node.get("$ref")
            if ref is not None:
                return inline(defs[ref.rsplit("/", 1)[-1]])
            return {k: inline(v) for k, v in node.items()}
        if isinstance(node, list):
            return [inline(v) for v in node]
        return node

    return inline(schema)


SIMULATE_DEBT_PAYOFF_TOOL: dict[str, Any] = {
    "name": SIMULATE_DEBT_PAYOFF,
    "description": (
        "REQUIRED for debt payoff questions. Simulates credit card debt payoff "
        "strategies (avalanche or snowball). Returns exact months to payoff, total "
        "interest paid, whether the plan pays off within 50 years, and a monthly "
        "breakdown. Call it TWICE to compare both avalanche and snowball strategies."
    ),
    "parameters": tool_parameters(SimulateDebtPayoffArguments),
}

CALCULATE_CREDIT_IMPACT_TOOL: dict[str, Any] = {
    "name": CALCULATE_CREDIT_IMPACT,
    "description": (
        "Predict how different payment scenarios will impact credit score. Shows "
        "effect of paying down balances on credit utilization and score."
    ),
    "parameters": tool_parameters(CreditImpactRequest),
}

TOOLS = [SIMULATE_DEBT_PAYOFF_TOOL, CALCULATE_CREDIT_IMPACT_TOOL]


def _simulate_debt_payoff(arguments: Any) -> dict[str, Any]:
    request = validate_payload(SimulateDebtPayoffArguments, arguments)
    strategy = Strategy(request.strategy)
    result = simulate(request.to_simulation_input(), strategy)
    payload = result_to_payload(result)
    payload["strategy"] = strategy.value
    return payload


def _calculate_credit_impact(arguments: Any) -> dict[str, Any]:
    request = validate_payload(CreditImpactRequest, arguments)
    impact = calculate_credit_impact(
        request.accounts(),
        [(s.label, s.amount) for s in request.payment_scenarios],
        current_score=request.current_score,
    )
    return credit_impact_to_payload(impact)


_HANDLERS = {
    SIMULATE_DEBT_PAYOFF: _simulate_debt_payoff,
    CALCULATE_CREDIT_IMPACT: _calculate_credit_impact,
}


def handle_tool_call(name: str, arguments: dict[str, Any]) -> dict[str, Any]:
    """Execute a tool call requested by the assistant.

    Raises:
        ValueError: If the tool name is unknown.
        PayloadError: If the arguments fail validation.
    """
    handler = _HANDLERS.get(name)
    if handler is None:
        valid = ", ".join(t["name"] for t in TOOLS)
        raise ValueError(f"Unknown tool {name!r}. Valid: {valid}")

    logger.debug("Executing tool %s", name)
    return handler(arguments)
