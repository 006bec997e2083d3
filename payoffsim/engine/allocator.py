"""Two-phase payment waterfall: minimums first, then strategy-ordered extra."""

from __future__ import annotations

from payoffsim.engine.accounts import AccountState, apply_payment


def allocate_payments(
    states: list[AccountState],
    order: list[AccountState],
    min_payments: dict[str, float],
    monthly_budget: float,
) -> tuple[dict[str, float], float]:
    """Apply one month of payments to post-accrual balances.

    The month's pool is ``monthly_budget + sum(min_payments)``.

    Phase A pays ``min(balance, min_payment)`` on every account in input
    order. Phase B walks ``order`` and pays ``min(balance, remaining)``
    until the pool is empty. Extra payments add to the Phase A amount.

    Args:
        states: Working account states, in input order (mutated).
        order: Priority order for Phase B (typically from order_accounts).
        min_payments: Original minimum payment per account id.
        monthly_budget: Funds committed above the sum of minimums.

    Returns:
        (allocations, leftover): amount paid per account id (every
        account present, zero if unpaid) and the unspent remainder of
        the pool.
    """
    remaining = monthly_budget + sum(min_payments.values())
    allocations = {s.id: 0.0 for s in states}

    # Phase A: minimums, input order
    for state in states:
        paid = apply_payment(state, min(min_payments.get(state.id, 0.0), remaining))
        remaining -= paid
        allocations[state.id] += paid

    # Phase B: extra waterfall, strategy order
    for state in order:
        if remaining <= 0:
            break
        paid = apply_payment(state, remaining)
        remaining -= paid
        allocations[state.id] += paid

    return allocations, max(0.0, remaining)
