"""ScenarioSampler — generates diverse debt profiles for strategy comparisons.

Produces random ScenarioConfig instances with varied numbers of accounts
(1–5), APRs (12%–29%), balances ($500–$15,000), fixed minimum payments
and extra monthly budgets. Also provides named presets for reproducible
benchmarking.
"""

from __future__ import annotations

import numpy as np

from payoffsim.engine.simulator import MAX_SIMULATION_MONTHS
from payoffsim.utils.config import AccountConfig, ScenarioConfig


# Account name pools for variety
_ACCOUNT_NAMES = [
    "Visa Platinum", "Mastercard Gold", "Store Card", "Rewards Card",
    "Travel Card", "Gas Card", "Medical Card", "Cash Back Card",
    "Student Card", "Department Store", "Airline Card", "Hotel Card",
]


class ScenarioSampler:
    """Generate randomized or preset debt scenarios."""

    def __init__(
        self,
        num_accounts_range: tuple[int, int] = (1, 5),
        apr_range: tuple[float, float] = (0.12, 0.29),
        balance_range: tuple[float, float] = (500.0, 15000.0),
        limit_multiplier_range: tuple[float, float] = (1.2, 3.0),
        min_payment_ratio_range: tuple[float, float] = (0.025, 0.04),
        min_payment_floor: float = 25.0,
        budget_range: tuple[float, float] = (0.0, 1000.0),
        max_months: int = MAX_SIMULATION_MONTHS,
    ):
        self.num_accounts_range = num_accounts_range
        self.apr_range = apr_range
        self.balance_range = balance_range
        self.limit_multiplier_range = limit_multiplier_range
        self.min_payment_ratio_range = min_payment_ratio_range
        self.min_payment_floor = min_payment_floor
        self.budget_range = budget_range
        self.max_months = max_months

    def sample(self, rng: np.random.Generator | None = None) -> ScenarioConfig:
        """Sample a random debt profile.

        Args:
            rng: Numpy random Generator for reproducibility.

        Returns:
            A randomized ScenarioConfig.
        """
        if rng is None:
            rng = np.random.default_rng()

        num_accounts = int(
            rng.integers(self.num_accounts_range[0], self.num_accounts_range[1] + 1)
        )

        # Pick unique account names
        name_indices = rng.choice(len(_ACCOUNT_NAMES), size=num_accounts, replace=False)
        names = [_ACCOUNT_NAMES[i] for i in name_indices]

        accounts = []
        for name in names:
            apr = round(float(rng.uniform(*self.apr_range)), 3)
            balance = round(float(rng.uniform(*self.balance_range)), 2)
            limit = round(balance * float(rng.uniform(*self.limit_multiplier_range)), 2)
            ratio = float(rng.uniform(*self.min_payment_ratio_range))
            min_payment = round(max(self.min_payment_floor, balance * ratio), 2)
            accounts.append(
                AccountConfig(
                    id=name,
                    balance=balance,
                    apr=apr,
                    min_payment=min_payment,
                    limit=limit,
                )
            )

        budget = round(float(rng.uniform(*self.budget_range)), 2)

        return ScenarioConfig(
            accounts=accounts,
            monthly_budget=budget,
            max_months=self.max_months,
        )

    @staticmethod
    def preset(name: str) -> ScenarioConfig:
        """Return a named preset scenario for reproducible experiments.

        Available presets:
            - "easy_3card": Low APRs, moderate balances, generous budget
            - "hard_5card": High APRs, high balances, tight budget
            - "single_high_apr": One card with 28.9% APR
            - "infeasible": Minimums below monthly interest, no extra budget

        Args:
            name: Preset name.

        Returns:
            ScenarioConfig for the named scenario.

        Raises:
            ValueError: If preset name is unknown.
        """
        presets = {
            "easy_3card": ScenarioConfig(
                accounts=[
                    AccountConfig("Visa Basic", balance=2000, apr=0.139, min_payment=50, limit=5000),
                    AccountConfig("MC Standard", balance=1500, apr=0.159, min_payment=40, limit=4000),
                    AccountConfig("Store Card", balance=800, apr=0.199, min_payment=25, limit=2000),
                ],
                monthly_budget=600,
            ),
            "hard_5card": ScenarioConfig(
                accounts=[
                    AccountConfig("Platinum", balance=12000, apr=0.289, min_payment=300, limit=15000),
                    AccountConfig("Medical", balance=8500, apr=0.249, min_payment=200, limit=10000),
                    AccountConfig("Rewards", balance=5000, apr=0.199, min_payment=125, limit=12000),
                    AccountConfig("Dept Store", balance=3000, apr=0.269, min_payment=75, limit=4000),
                    AccountConfig("Gas Card", balance=1500, apr=0.229, min_payment=35, limit=2500),
                ],
                monthly_budget=150,
            ),
            "single_high_apr": ScenarioConfig(
                accounts=[
                    AccountConfig("High APR Card", balance=10000, apr=0.289, min_payment=250, limit=12000),
                ],
                monthly_budget=300,
            ),
            "infeasible": ScenarioConfig(
                accounts=[
                    AccountConfig("Maxed Card", balance=10000, apr=0.24, min_payment=50, limit=10000),
                ],
                monthly_budget=0,
            ),
        }

        if name not in presets:
            valid = ", ".join(sorted(presets.keys()))
            raise ValueError(f"Unknown preset {name!r}. Valid: {valid}")

        return presets[name]
