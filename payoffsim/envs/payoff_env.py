"""PayoffEnv — Gymnasium environment stepping a payoff simulation one month at a time.

The month transition is the engine's own (accrue interest → pay minimums
→ waterfall the extra pool), but the priority order for the extra pool
comes from the agent instead of a fixed strategy.

Action space:
  Box(num_accounts,) priority scores in [0, 1]. The extra pool is applied
  to active accounts in descending score order (ties by input order).
  Accounts scored 0 receive no extra payment.

Observation space:
  Box(4 * num_accounts + 2): per-account features + global features, in [0, 1]
"""

from __future__ import annotations

import logging
from typing import Any

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from payoffsim.engine.accounts import (
    AccountState,
    compute_overall_utilization,
    round_currency,
)
from payoffsim.engine.simulator import (
    MonthlyStep,
    PayoffStatus,
    SimulationResult,
    run_month,
)
from payoffsim.utils.config import ScenarioConfig

logger = logging.getLogger(__name__)

APR_NORM = 0.30


class PayoffEnv(gym.Env):
    """Gymnasium environment simulating monthly multi-account debt payoff.

    Each step represents one month. Minimum payments are always made; the
    agent only decides the order in which the extra budget is applied.
    """

    metadata = {"render_modes": ["human", "ansi"], "render_fps": 1}

    def __init__(
        self,
        config: ScenarioConfig | None = None,
        render_mode: str | None = None,
    ):
        super().__init__()

        self.config = config or ScenarioConfig()
        self.render_mode = render_mode

        self.num_accounts = self.config.num_accounts
        self.max_months = self.config.max_months
        self.monthly_budget = self.config.monthly_budget
        self._account_configs = self.config.accounts
        self.min_payments = {a.id: a.min_payment for a in self._account_configs}

        # Per account: balance_norm, apr_norm, min_payment_norm, utilization
        # Global: month_norm, total_debt_norm
        obs_dim = 4 * self.num_accounts + 2
        self.observation_space = spaces.Box(
            low=0.0, high=1.0, shape=(obs_dim,), dtype=np.float32
        )
        self.action_space = spaces.Box(
            low=0.0, high=1.0, shape=(self.num_accounts,), dtype=np.float32
        )

        # ── State variables (set in reset) ────────────────────────────────
        self.states: list[AccountState] = []
        self.month: int = 0
        self.initial_total_debt: float = 0.0
        self.total_interest: float = 0.0
        self.steps: list[MonthlyStep] = []

    # ──────────────────────────────────────────────────────────────────────
    # Gymnasium API
    # ──────────────────────────────────────────────────────────────────────

    def reset(
        self,
        seed: int | None = None,
        options: dict[str, Any] | None = None,
    ) -> tuple[np.ndarray, dict[str, Any]]:
        """Reset to the scenario's starting balances."""
        super().reset(seed=seed)

        self.states = [
            AccountState.from_account(ac.to_account()) for ac in self._account_configs
        ]
        self.month = 0
        self.initial_total_debt = sum(s.balance for s in self.states)
        self.total_interest = 0.0
        self.steps = []

        return self._get_obs(), self._build_info()

    def step(
        self, action: np.ndarray
    ) -> tuple[np.ndarray, float, bool, bool, dict[str, Any]]:
        """Simulate one month using the action as the extra-pool priority.

        Returns:
            (obs, reward, terminated, truncated, info)
        """
        order = self._decode_action(action)
        step = run_month(
            self.states, order, self.min_payments, self.monthly_budget, self.month
        )
        self.steps.append(step)
        self.total_interest += step.total_interest
        self.month += 1

        all_paid = not any(s.is_active for s in self.states)
        terminated = all_paid
        truncated = self.month >= self.max_months and not terminated
        if truncated:
            logger.debug("Horizon of %d months reached with %.2f owed", self.max_months, self.total_debt)

        if self.initial_total_debt > 0:
            reward = -step.total_interest / self.initial_total_debt
        else:
            reward = 0.0

        info = self._build_info(
            month_index=step.month_index,
            allocations=step.allocations,
            interest_accrued=step.interest_accrued,
            interest_this_month=step.total_interest,
        )
        return self._get_obs(), float(reward), terminated, truncated, info

    def render(self) -> str | None:
        """Print or return a human-readable monthly statement."""
        last = self.steps[-1] if self.steps else None
        lines = [
            f"\n{'='*60}",
            f"  Month {self.month} / {self.max_months}",
            f"{'='*60}",
        ]
        for state in self.states:
            status = "✓ PAID OFF" if not state.is_active else f"${state.balance:,.2f}"
            interest = last.interest_accrued[state.id] if last else 0.0
            payment = last.allocations[state.id] if last else 0.0
            lines.append(
                f"  {state.id:.<25s} Balance: {status:>12s}  "
                f"Interest: ${interest:>8,.2f}  "
                f"Payment: ${payment:>8,.2f}"
            )
        lines.append(f"  {'─'*56}")
        lines.append(
            f"  Total debt: ${self.total_debt:>10,.2f}  "
            f"Interest to date: ${self.total_interest:>10,.2f}"
        )
        output = "\n".join(lines)

        if self.render_mode == "human":
            print(output)
            return None
        return output

    # ──────────────────────────────────────────────────────────────────────
    # Ledger
    # ──────────────────────────────────────────────────────────────────────

    @property
    def total_debt(self) -> float:
        return sum(s.balance for s in self.states)

    def ledger(self) -> SimulationResult:
        """Return the months simulated so far as a SimulationResult."""
        paid = not any(s.is_active for s in self.states)
        return SimulationResult(
            total_interest=round_currency(self.total_interest),
            months_to_debt_free=self.month,
            steps=list(self.steps),
            status=PayoffStatus.DEBT_FREE if paid else PayoffStatus.CAP_REACHED,
        )

    # ──────────────────────────────────────────────────────────────────────
    # Internal helpers
    # ──────────────────────────────────────────────────────────────────────

    def _decode_action(self, action: np.ndarray) -> list[AccountState]:
        """Turn priority scores into the extra-pool order.

        Active accounts with a positive score are ordered by descending
        score; equal scores keep input order.
        """
        scores = np.asarray(action, dtype=np.float64).flatten()[:self.num_accounts]
        ranked = [
            (-float(scores[i]), i)
            for i, s in enumerate(self.states)
            if s.is_active and i < len(scores) and scores[i] > 0
        ]
        ranked.sort()
        return [self.states[i] for _, i in ranked]

    def _get_obs(self) -> np.ndarray:
        """Build normalized observation vector.

        Per account (4 features):
            balance / initial balance   (or 0 if initial was 0)
            APR / 0.30
            min_payment / monthly pool
            utilization

        Global (2 features):
            month / max_months
            total_debt / initial_total_debt
        """
        obs = []
        pool = self.monthly_budget + sum(self.min_payments.values())

        for i, state in enumerate(self.states):
            initial_bal = self._account_configs[i].balance
            obs.append(state.balance / max(initial_bal, 1.0))
            obs.append(state.apr / APR_NORM)
            obs.append(state.min_payment / max(pool, 1.0))
            obs.append(state.utilization)

        obs.append(self.month / max(self.max_months, 1))
        obs.append(self.total_debt / max(self.initial_total_debt, 1.0))

        obs_array = np.array(obs, dtype=np.float32)
        # Interest can push balances slightly above their starting values
        return np.clip(obs_array, 0.0, 1.0)

    def _build_info(self, **kwargs) -> dict[str, Any]:
        """Build info dict for step/reset."""
        info: dict[str, Any] = {
            "month": self.month,
            "balances": {s.id: round_currency(s.balance) for s in self.states},
            "overall_utilization": compute_overall_utilization(self.states),
            "total_debt": self.total_debt,
            "accounts_paid_off": sum(1 for s in self.states if not s.is_active),
            "all_paid": not any(s.is_active for s in self.states),
        }
        info.update(kwargs)
        return info
