"""Abstract base class for scripted payoff policies."""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np

from payoffsim.envs.payoff_env import PayoffEnv


class BaselinePolicy(ABC):
    """Interface for scripted extra-payment ordering strategies.

    Subclasses implement `allocate()` which returns priority scores for
    the environment's action space.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name for this strategy."""
        ...

    @abstractmethod
    def allocate(self, env: PayoffEnv) -> np.ndarray:
        """Decide the order in which the extra budget is applied.

        The environment guarantees minimum payments. This method only
        ranks accounts for the surplus (budget above the minimums).

        Args:
            env: The environment instance (read account states, budget, etc.).

        Returns:
            Priority scores, one per account; 0 means no extra payment.
        """
        ...

    def run_episode(
        self,
        env: PayoffEnv,
        seed: int | None = None,
    ) -> dict:
        """Run a full episode using this policy.

        Args:
            env: Environment instance.
            seed: Reset seed.

        Returns:
            Dict with episode metrics: strategy, total_interest, months,
            final_debt, all_paid, interest_history, debt_history.
        """
        obs, info = env.reset(seed=seed)

        interest_history = []
        debt_history = []

        terminated = info["all_paid"]
        truncated = False
        while not (terminated or truncated):
            action = self.allocate(env)
            obs, reward, terminated, truncated, info = env.step(action)
            interest_history.append(info["interest_this_month"])
            debt_history.append(info["total_debt"])

        return {
            "strategy": self.name,
            "total_interest": float(sum(interest_history)),
            "months": env.month,
            "final_debt": info["total_debt"],
            "all_paid": info["all_paid"],
            "interest_history": interest_history,
            "debt_history": debt_history,
        }


def rank_scores(env: PayoffEnv, ordered_ids: list[str]) -> np.ndarray:
    """Convert a priority order of account ids into descending scores in (0, 1]."""
    scores = np.zeros(env.num_accounts, dtype=np.float32)
    n = max(env.num_accounts, 1)
    position = {s.id: i for i, s in enumerate(env.states)}
    for rank, account_id in enumerate(ordered_ids):
        scores[position[account_id]] = (n - rank) / n
    return scores
