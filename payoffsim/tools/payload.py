"""JSON wire shape for simulation requests and results.

Requests use the camelCase shape shared by the web, mobile and assistant
callers::

    {
      "cards": [{"id": "visa", "balance": 1200.0, "apr": 0.1999,
                 "minPayment": 35, "limit": 5000, "dueDayOfMonth": 12}],
      "monthlyBudget": 200,
      "strategy": "avalanche"
    }
"""

from __future__ import annotations

import logging
from typing import Annotated, Any, Literal, Optional

from pydantic import AliasChoices, BaseModel, Field, ValidationError, field_validator, model_validator

from payoffsim.engine.accounts import Account
from payoffsim.engine.simulator import (
    MonthlyStep,
    SimulationInput,
    SimulationResult,
    simulate,
)
from payoffsim.engine.strategy import Strategy
from payoffsim.evaluation.metrics import CreditImpact, recommendation_text

logger = logging.getLogger(__name__)

# Non-negative finite dollars or rates; bools and numeric strings are rejected
Amount = Annotated[float, Field(ge=0, allow_inf_nan=False, strict=True)]
StrategyName = Literal["avalanche", "snowball"]


class PayloadError(ValueError):
    """A request body failed boundary validation."""


# ── Request models ────────────────────────────────────────────────────────

class CardPayload(BaseModel):
    """Credit card details."""

    id: Optional[str] = Field(None, description="Stable card identifier")
    name: Optional[str] = Field(None, description="Card name or nickname")
    balance: Amount = Field(description="Current balance in dollars")
    apr: Amount = Field(description="Annual percentage rate as decimal (e.g., 0.1899 for 18.99%)")
    min_payment: Amount = Field(0.0, alias="minPayment", description="Minimum monthly payment in dollars")
    limit: Amount = Field(0.0, description="Credit limit in dollars")
    due_day_of_month: int = Field(1, alias="dueDayOfMonth", strict=True, ge=1, le=31)

    def resolved_id(self, index: int) -> str:
        """``id``, then ``name`` (assistant payloads), then ``card-<n>``."""
        return self.id or self.name or f"card-{index + 1}"

    def to_account(self, index: int) -> Account:
        return Account(
            id=self.resolved_id(index),
            balance=self.balance,
            apr=self.apr,
            min_payment=self.min_payment,
            limit=self.limit,
            due_day_of_month=self.due_day_of_month,
        )


class SimulationRequest(BaseModel):
    """Accounts, budget and strategy for one payoff simulation."""

    cards: list[CardPayload] = Field(
        validation_alias=AliasChoices("cards", "accounts"),
        description="Array of credit card details",
    )
    monthly_budget: Amount = Field(
        alias="monthlyBudget",
        description="Monthly amount available for debt payment beyond minimums (in dollars)",
    )
    strategy: StrategyName = Field("avalanche", description="Payoff strategy to use")

    @field_validator("strategy", mode="before")
    @classmethod
    def normalise_strategy(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @model_validator(mode="after")
    def check_unique_ids(self) -> "SimulationRequest":
        ids = [card.resolved_id(i) for i, card in enumerate(self.cards)]
        if len(set(ids)) != len(ids):
            raise ValueError("Card ids must be unique")
        return self

    def to_simulation_input(self) -> SimulationInput:
        return SimulationInput(
            accounts=tuple(card.to_account(i) for i, card in enumerate(self.cards)),
            monthly_budget=self.monthly_budget,
        )


class UtilizationCard(BaseModel):
    """Credit card for utilization calculation."""

    name: Optional[str] = Field(None, description="Card name")
    balance: Amount = Field(description="Current balance")
    limit: Amount = Field(description="Credit limit")


class PaymentScenario(BaseModel):
    """Payment scenario."""

    label: str = Field(description='Scenario name (e.g., "Minimum Payment", "Double Payment")')
    amount: Amount = Field(description="Payment amount in dollars")


class CreditImpactRequest(BaseModel):
    """Cards and payment amounts to compare for credit utilization."""

    cards: list[UtilizationCard] = Field(description="Credit cards with current balances and limits")
    payment_scenarios: list[PaymentScenario] = Field(
        alias="paymentScenarios", description="Different payment amounts to compare"
    )
    current_score: Optional[int] = Field(
        None,
        alias="currentScore",
        ge=300,
        le=850,
        description="Current credit score (optional, for more accurate predictions)",
    )

    def accounts(self) -> list[Account]:
        return [
            Account(
                id=card.name or f"card-{i + 1}",
                balance=card.balance,
                apr=0.0,
                min_payment=0.0,
                limit=card.limit,
            )
            for i, card in enumerate(self.cards)
        ]


# ── Validation ────────────────────────────────────────────────────────────

def _describe(error: dict[str, Any]) -> str:
    where = ""
    for part in error["loc"]:
        if isinstance(part, int):
            where += f"[{part}]"
        else:
            where += f".{part}" if where else str(part)
    if not where:
        return error["msg"]
    return f"Invalid '{where}': {error['msg']}"


def validate_payload(model: type[BaseModel], payload: Any) -> Any:
    """Validate a decoded JSON body against ``model``.

    Raises:
        PayloadError: If the body is not an object or any field is invalid.
    """
    if not isinstance(payload, dict):
        raise PayloadError("Invalid JSON body")
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        message = "; ".join(_describe(e) for e in exc.errors())
        raise PayloadError(message) from exc


def parse_simulation_input(payload: Any) -> SimulationInput:
    """Validate a request body and build a SimulationInput.

    Accepts ``cards`` or ``accounts`` for the account list.

    Raises:
        PayloadError: On any missing or malformed field.
    """
    return validate_payload(SimulationRequest, payload).to_simulation_input()


def parse_strategy(value: Any, default: str = "avalanche") -> Strategy:
    """Read an optional strategy name, rejecting unknown values."""
    if value is None:
        value = default
    try:
        return Strategy.parse(value)
    except ValueError as exc:
        raise PayloadError(str(exc)) from None


# ── Responses ─────────────────────────────────────────────────────────────

def step_to_payload(step: MonthlyStep) -> dict[str, Any]:
    return {
        "monthIndex": step.month_index,
        "allocations": dict(step.allocations),
        "balances": dict(step.balances),
        "interestAccrued": dict(step.interest_accrued),
    }


def result_to_payload(result: SimulationResult) -> dict[str, Any]:
    """Serialize a SimulationResult to its camelCase JSON shape."""
    return {
        "totalInterest": result.total_interest,
        "monthsToDebtFree": result.months_to_debt_free,
        "status": result.status.value,
        "steps": [step_to_payload(s) for s in result.steps],
    }


def credit_impact_to_payload(impact: CreditImpact) -> dict[str, Any]:
    """Serialize a CreditImpact with utilizations as percentages."""
    return {
        "currentState": {
            "totalDebt": impact.total_debt,
            "totalLimit": impact.total_limit,
            "utilization": impact.utilization_percent,
            "currentScore": impact.current_score,
        },
        "scenarios": [
            {
                "label": s.label,
                "paymentAmount": s.payment,
                "newDebt": s.new_debt,
                "newUtilization": s.new_utilization_percent,
                "utilizationChange": s.utilization_change_percent,
                "estimatedScoreImpact": s.score_impact,
                "impactLevel": s.impact_level,
                "projectedScore": s.projected_score,
            }
            for s in impact.scenarios
        ],
        "recommendations": list(impact.recommendations),
        "disclaimer": impact.disclaimer,
    }


def simulate_payload(body: Any) -> dict[str, Any]:
    """Validate a request body, run the simulation, and build the response body.

    Returns:
        {"strategy", "result", "recommendation"}
    """
    request = validate_payload(SimulationRequest, body)
    sim_input = request.to_simulation_input()
    strategy = Strategy(request.strategy)
    result = simulate(sim_input, strategy)

    logger.info(
        "Payoff simulation strategy=%s accounts=%d months=%d status=%s",
        strategy.value, len(sim_input.accounts), result.months_to_debt_free, result.status.value,
    )

    return {
        "strategy": strategy.value,
        "result": result_to_payload(result),
        "recommendation": recommendation_text(result, strategy),
    }
