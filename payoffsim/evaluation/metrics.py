"""Strategy comparison, budget sweeps, credit utilization impact and summaries."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, Sequence

import pandas as pd

from payoffsim.engine.accounts import (
    Account,
    AccountState,
    compute_overall_utilization,
    round_currency,
)
from payoffsim.engine.simulator import (
    MAX_SIMULATION_MONTHS,
    SimulationInput,
    SimulationResult,
    simulate,
)
from payoffsim.engine.strategy import Strategy


@dataclass
class StrategyComparison:
    """Avalanche and snowball results for the same input."""

    avalanche: SimulationResult
    snowball: SimulationResult

    @property
    def interest_savings(self) -> float:
        """Interest avalanche saves over snowball (≥ 0 for feasible plans)."""
        return round(self.snowball.total_interest - self.avalanche.total_interest, 2)

    @property
    def months_difference(self) -> int:
        """Snowball months minus avalanche months."""
        return self.snowball.months_to_debt_free - self.avalanche.months_to_debt_free

    @property
    def recommended(self) -> Strategy:
        """Lower interest wins, then fewer months; avalanche on a full tie.

        A plan that pays off beats one that hits the horizon.
        """
        a, s = self.avalanche, self.snowball
        if a.is_debt_free != s.is_debt_free:
            return Strategy.AVALANCHE if a.is_debt_free else Strategy.SNOWBALL
        if s.total_interest < a.total_interest:
            return Strategy.SNOWBALL
        if s.total_interest == a.total_interest and s.months_to_debt_free < a.months_to_debt_free:
            return Strategy.SNOWBALL
        return Strategy.AVALANCHE

    def result_for(self, strategy: Strategy | str) -> SimulationResult:
        strategy = Strategy.parse(strategy)
        return self.avalanche if strategy is Strategy.AVALANCHE else self.snowball


def compare_strategies(
    sim_input: SimulationInput,
    max_months: int = MAX_SIMULATION_MONTHS,
) -> StrategyComparison:
    """Simulate the same input under both strategies."""
    return StrategyComparison(
        avalanche=simulate(sim_input, Strategy.AVALANCHE, max_months=max_months),
        snowball=simulate(sim_input, Strategy.SNOWBALL, max_months=max_months),
    )


def budget_sweep(
    sim_input: SimulationInput,
    budgets: Iterable[float],
    strategy: Strategy | str = Strategy.AVALANCHE,
    max_months: int = MAX_SIMULATION_MONTHS,
) -> pd.DataFrame:
    """Simulate several monthly budget levels for the same accounts.

    Returns:
        DataFrame with one row per budget: monthly_budget, total_payment,
        months, total_interest, status.
    """
    strategy = Strategy.parse(strategy)
    rows = []
    for budget in budgets:
        variant = SimulationInput(accounts=sim_input.accounts, monthly_budget=float(budget))
        result = simulate(variant, strategy, max_months=max_months)
        rows.append({
            "strategy": strategy.value,
            "monthly_budget": float(budget),
            "total_payment": float(budget) + variant.total_min_payment,
            "months": result.months_to_debt_free,
            "total_interest": result.total_interest,
            "status": result.status.value,
        })
    return pd.DataFrame(
        rows,
        columns=["strategy", "monthly_budget", "total_payment", "months", "total_interest", "status"],
    )


def steps_to_frame(result: SimulationResult) -> pd.DataFrame:
    """Flatten a result's ledger into one row per (month, account)."""
    rows = [
        {
            "month": step.month_index,
            "account_id": account_id,
            "payment": step.allocations[account_id],
            "interest": step.interest_accrued[account_id],
            "balance": step.balances[account_id],
        }
        for step in result.steps
        for account_id in step.balances
    ]
    return pd.DataFrame(rows, columns=["month", "account_id", "payment", "interest", "balance"])


def format_duration(months: int) -> str:
    """'2 years and 3 months', '1 year and 0 months', '5 months'."""
    years, rem = divmod(months, 12)
    month_str = f"{rem} month{'' if rem == 1 else 's'}"
    if years > 0:
        return f"{years} year{'s' if years > 1 else ''} and {month_str}"
    return month_str


def recommendation_text(result: SimulationResult, strategy: Strategy | str) -> str:
    """One-sentence summary of a simulation for end users."""
    strategy = Strategy.parse(strategy)
    if not result.is_debt_free:
        return (
            f"Using the {strategy.value} method, your debt is not paid off within "
            f"{format_duration(result.months_to_debt_free)}, and ${result.total_interest:.2f} "
            f"in interest accrues over that period."
        )
    return (
        f"Using the {strategy.value} method, you'll be debt-free in "
        f"{format_duration(result.months_to_debt_free)} and pay "
        f"${result.total_interest:.2f} in total interest."
    )


# ── Credit utilization impact ─────────────────────────────────────────────

# Estimated score points per 10 percentage points of utilization reduction
POINTS_PER_TEN_PCT = 35

# (threshold, level, bonus) checked in order; the first threshold crossed wins
UTILIZATION_THRESHOLDS = (
    (0.10, "excellent", 30),
    (0.30, "significant", 20),
    (0.50, "moderate", 10),
)

CREDIT_IMPACT_DISCLAIMER = (
    "Credit score impact estimates are approximate. Actual changes depend on many "
    "factors including payment history, credit age, and credit mix."
)


@dataclass
class UtilizationScenario:
    """Utilization and estimated score change after one lump-sum payment."""

    label: str
    payment: float
    new_debt: float
    new_utilization: float
    utilization_change: float
    score_impact: int
    impact_level: str
    projected_score: int | None = None

    @property
    def new_utilization_percent(self) -> float:
        return round_currency(self.new_utilization * 100)

    @property
    def utilization_change_percent(self) -> float:
        return round_currency(self.utilization_change * 100)


@dataclass
class CreditImpact:
    total_debt: float
    total_limit: float
    utilization: float
    current_score: int | None
    scenarios: list[UtilizationScenario] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)
    disclaimer: str = CREDIT_IMPACT_DISCLAIMER

    @property
    def utilization_percent(self) -> float:
        return round_currency(self.utilization * 100)


def _utilization_advice(utilization: float) -> list[str]:
    advice = []
    if utilization > 0.5:
        advice.append("High utilization (>50%) significantly hurts your score. Prioritize getting under 30%.")
    if utilization > 0.3:
        advice.append("Getting under 30% utilization will have a noticeable positive impact on your credit score.")
    if utilization > 0.1:
        advice.append("Reaching under 10% utilization is ideal for maximizing your credit score.")
    else:
        advice.append("Excellent! Your utilization is under 10%, which is optimal for credit scores.")
    return advice


def calculate_credit_impact(
    accounts: Sequence[Account],
    payments: Iterable[tuple[str, float]],
    current_score: int | None = None,
) -> CreditImpact:
    """Estimate how lump-sum payments move overall utilization and credit score.

    Each 10 points of utilization reduction is worth about 35 score points,
    plus a bonus for dropping below 10%, 30% or 50% from at or above it.
    This is a rough heuristic, not a scoring model.

    Args:
        accounts: Cards with balances and limits; APR is ignored.
        payments: (label, amount) pairs, each applied to the total debt.
        current_score: Optional score to project from.
    """
    states = [AccountState.from_account(a) for a in accounts]
    total_debt = sum(s.balance for s in states)
    total_limit = sum(s.limit for s in states)
    current = compute_overall_utilization(states)

    scenarios = []
    for label, payment in payments:
        new_debt = max(0.0, total_debt - payment)
        new_utilization = new_debt / total_limit if total_limit > 0 else 0.0
        change = current - new_utilization

        score_impact = 0
        if change > 0:
            score_impact = math.floor(change * 10 * POINTS_PER_TEN_PCT + 0.5)

        impact_level = "minimal"
        for threshold, level, bonus in UTILIZATION_THRESHOLDS:
            if new_utilization < threshold <= current:
                impact_level = level
                score_impact += bonus
                break
        else:
            if change > 0.05:
                impact_level = "modest"

        scenarios.append(UtilizationScenario(
            label=label,
            payment=float(payment),
            new_debt=round_currency(new_debt),
            new_utilization=new_utilization,
            utilization_change=change,
            score_impact=score_impact,
            impact_level=impact_level,
            projected_score=None if current_score is None else current_score + score_impact,
        ))

    return CreditImpact(
        total_debt=round_currency(total_debt),
        total_limit=round_currency(total_limit),
        utilization=current,
        current_score=current_score,
        scenarios=scenarios,
        recommendations=_utilization_advice(current),
    )
