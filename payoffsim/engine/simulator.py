"""Month-by-month debt payoff simulation driver.

Each simulated month:
    1. Order active accounts by strategy (before interest)
    2. Accrue one month of interest on every account
    3. Pay minimums, then waterfall the extra pool in strategy order
    4. Record a ledger entry

The loop ends when every balance is ≤ 0.01 (debt free) or the safety
horizon is reached (cap reached: the plan does not resolve).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from payoffsim.engine.accounts import (
    Account,
    AccountState,
    accrue_interest,
    round_currency,
)
from payoffsim.engine.allocator import allocate_payments
from payoffsim.engine.strategy import Strategy, order_accounts

logger = logging.getLogger(__name__)

MAX_SIMULATION_MONTHS = 600  # 50 years


class PayoffStatus(str, Enum):
    """Terminal state of a simulation."""

    DEBT_FREE = "debt_free"
    CAP_REACHED = "cap_reached"


@dataclass(frozen=True)
class SimulationInput:
    """Accounts (order is the tie-break) plus budget above the minimums."""

    accounts: tuple[Account, ...]
    monthly_budget: float = 0.0

    def __post_init__(self) -> None:
        # Accept any sequence; store a tuple so the input stays immutable
        object.__setattr__(self, "accounts", tuple(self.accounts))

    @property
    def total_min_payment(self) -> float:
        return sum(a.min_payment for a in self.accounts)

    @property
    def total_balance(self) -> float:
        return sum(a.balance for a in self.accounts)


@dataclass
class MonthlyStep:
    """One ledger entry. Every map is keyed by every account id."""

    month_index: int
    allocations: dict[str, float]
    balances: dict[str, float]          # End of month, rounded to cents
    interest_accrued: dict[str, float]  # Unrounded

    @property
    def total_paid(self) -> float:
        return sum(self.allocations.values())

    @property
    def total_interest(self) -> float:
        return sum(self.interest_accrued.values())


@dataclass
class SimulationResult:
    """Outcome of a payoff simulation."""

    total_interest: float
    months_to_debt_free: int
    steps: list[MonthlyStep] = field(default_factory=list)
    status: PayoffStatus = PayoffStatus.DEBT_FREE

    @property
    def is_debt_free(self) -> bool:
        return self.status is PayoffStatus.DEBT_FREE


def run_month(
    states: list[AccountState],
    order: list[AccountState],
    min_payments: dict[str, float],
    monthly_budget: float,
    month_index: int,
) -> MonthlyStep:
    """Advance the working states by one month and return the ledger entry.

    Args:
        states: Working account states, in input order (mutated).
        order: Priority order for the extra pool, computed before accrual.
        min_payments: Original minimum payment per account id.
        monthly_budget: Funds committed above the sum of minimums.
        month_index: 0-based index recorded on the step.
    """
    interest = accrue_interest(states)
    allocations, _ = allocate_payments(states, order, min_payments, monthly_budget)
    balances = {s.id: round_currency(s.balance) for s in states}
    return MonthlyStep(
        month_index=month_index,
        allocations=allocations,
        balances=balances,
        interest_accrued=interest,
    )


def simulate(
    sim_input: SimulationInput,
    strategy: Strategy | str,
    max_months: int = MAX_SIMULATION_MONTHS,
) -> SimulationResult:
    """Project month-by-month payoff of every account under a strategy.

    The caller's accounts are never mutated; identical input always
    yields an identical result.

    Args:
        sim_input: Accounts and the monthly budget above minimums.
        strategy: Avalanche or snowball (enum or name).
        max_months: Safety horizon. Defaults to 600 months.

    Returns:
        SimulationResult. ``status`` is CAP_REACHED if debt remains at the
        horizon, in which case ``months_to_debt_free`` equals the horizon.

    Raises:
        ValueError: If the strategy is unknown or max_months is negative.
    """
    strategy = Strategy.parse(strategy)
    if max_months < 0:
        raise ValueError(f"max_months must be >= 0, got {max_months}")

    states = [AccountState.from_account(a) for a in sim_input.accounts]
    min_payments = {a.id: a.min_payment for a in sim_input.accounts}
    steps: list[MonthlyStep] = []
    total_interest = 0.0
    month = 0

    logger.debug(
        "Simulating %s payoff: %d accounts, budget=%.2f",
        strategy.value, len(states), sim_input.monthly_budget,
    )

    while any(s.is_active for s in states) and month < max_months:
        order = order_accounts(states, strategy)
        step = run_month(states, order, min_payments, sim_input.monthly_budget, month)
        total_interest += step.total_interest
        steps.append(step)
        month += 1

    if any(s.is_active for s in states):
        status = PayoffStatus.CAP_REACHED
        logger.warning(
            "%s payoff did not resolve within %d months; remaining debt %.2f",
            strategy.value, max_months, sum(s.balance for s in states),
        )
    else:
        status = PayoffStatus.DEBT_FREE
        logger.debug("%s payoff debt free after %d months", strategy.value, month)

    return SimulationResult(
        total_interest=round_currency(total_interest),
        months_to_debt_free=month,
        steps=steps,
        status=status,
    )
