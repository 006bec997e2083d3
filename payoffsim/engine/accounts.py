"""Account model and per-account financial math for payoff simulation.

Implements:
- Immutable input snapshot of a credit line (Account)
- Mutable working copy used across simulated months (AccountState)
- APR → monthly periodic rate conversion and interest accrual
- Payment application capped at the current balance
- Utilization / weighted APR summaries
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

# Balances at or below this are treated as paid off
PAID_OFF_EPSILON = 0.01


@dataclass(frozen=True)
class Account:
    """Caller-supplied snapshot of a single revolving credit account."""

    id: str
    balance: float              # Outstanding balance at simulation start
    apr: float                  # Annual percentage rate (e.g., 0.1999 for 19.99%)
    min_payment: float          # Fixed monthly minimum, not recalculated as balance shrinks
    limit: float = 0.0          # Credit limit (informational)
    due_day_of_month: int = 1   # Carried for display only


@dataclass
class AccountState:
    """Mutable working copy of an Account during a simulation."""

    id: str
    apr: float
    balance: float
    min_payment: float
    limit: float = 0.0

    @classmethod
    def from_account(cls, account: Account) -> AccountState:
        return cls(
            id=account.id,
            apr=account.apr,
            balance=account.balance,
            min_payment=account.min_payment,
            limit=account.limit,
        )

    @property
    def monthly_rate(self) -> float:
        """Monthly periodic rate (APR / 12)."""
        return self.apr / 12.0

    @property
    def is_active(self) -> bool:
        """True while the balance is above the paid-off epsilon."""
        return self.balance > PAID_OFF_EPSILON

    @property
    def utilization(self) -> float:
        """Current balance / credit limit. 0 if limit is 0."""
        if self.limit <= 0:
            return 0.0
        return self.balance / self.limit


def compute_interest(state: AccountState) -> float:
    """Compute one month of interest on the current balance.

    Formula: I_t = B_t × (APR / 12)

    Returns:
        Interest amount (≥ 0). Zero if the balance is not positive.
    """
    if state.balance <= 0:
        return 0.0
    return state.balance * state.monthly_rate


def accrue_interest(states: list[AccountState]) -> dict[str, float]:
    """Apply one month of interest to every account.

    Every account gets an entry, including zero-balance ones, so the
    ledger keeps a constant key set from month to month.

    Returns:
        Mapping of account id → interest added this month (unrounded).
    """
    accrued: dict[str, float] = {}
    for state in states:
        interest = compute_interest(state)
        state.balance += interest
        accrued[state.id] = interest
    return accrued


def apply_payment(state: AccountState, amount: float) -> float:
    """Pay down an account by up to ``amount``.

    The payment is capped at the current balance so balances never go
    negative.

    Returns:
        The amount actually applied.
    """
    if amount <= 0 or state.balance <= 0:
        return 0.0
    paid = min(state.balance, amount)
    state.balance -= paid
    return paid


def round_currency(value: float) -> float:
    """Round to currency minor units (cents), half away from zero."""
    return float(Decimal(repr(float(value))).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def compute_overall_utilization(states: list[AccountState]) -> float:
    """Overall utilization = sum(balances) / sum(limits).

    Returns 0 if total limit is 0.
    """
    total_balance = sum(s.balance for s in states)
    total_limit = sum(s.limit for s in states)
    if total_limit <= 0:
        return 0.0
    return total_balance / total_limit


def compute_weighted_avg_apr(states: list[AccountState]) -> float:
    """Balance-weighted average APR across all accounts.

    Returns 0 if total balance is 0 (all paid off).
    """
    total_balance = sum(s.balance for s in states if s.balance > 0)
    if total_balance <= 0:
        return 0.0
    return sum(s.apr * s.balance for s in states if s.balance > 0) / total_balance
