"""Payoff strategies — ordering of active accounts for extra payments."""

from __future__ import annotations

from enum import Enum
from typing import Callable

from payoffsim.engine.accounts import AccountState


class Strategy(str, Enum):
    """Closed set of discretionary allocation policies."""

    AVALANCHE = "avalanche"  # Highest APR first
    SNOWBALL = "snowball"    # Smallest balance first

    @classmethod
    def parse(cls, value: Strategy | str) -> Strategy:
        """Accept a Strategy or its (case-insensitive) name.

        Raises:
            ValueError: If the name is not a known strategy.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(s.value for s in cls)
            raise ValueError(f"Unknown strategy {value!r}. Valid: {valid}") from None


_SORT_KEYS: dict[Strategy, Callable[[AccountState], float]] = {
    Strategy.AVALANCHE: lambda s: -s.apr,
    Strategy.SNOWBALL: lambda s: s.balance,
}


def order_accounts(
    states: list[AccountState],
    strategy: Strategy | str,
) -> list[AccountState]:
    """Return the active accounts in the order extra payments are applied.

    Paid-off accounts (balance ≤ 0.01) are excluded. Ties preserve the
    original input order: the input index is part of the sort key.

    Args:
        states: Working account states, in input order.
        strategy: Avalanche (APR descending) or snowball (balance ascending).

    Returns:
        Active account states, highest priority first.
    """
    key = _SORT_KEYS[Strategy.parse(strategy)]
    indexed = [(i, s) for i, s in enumerate(states) if s.is_active]
    indexed.sort(key=lambda pair: (key(pair[1]), pair[0]))
    return [s for _, s in indexed]
