"""Minimum-payment-only baseline — worst-case reference strategy."""

from __future__ import annotations

import numpy as np

from payoffsim.baselines.base_policy import BaselinePolicy
from payoffsim.envs.payoff_env import PayoffEnv


class MinimumOnlyPolicy(BaselinePolicy):
    """Pay only the minimum on each account, never allocate surplus."""

    @property
    def name(self) -> str:
        return "MinimumOnly"

    def allocate(self, env: PayoffEnv) -> np.ndarray:
        # Zero scores: env still pays minimums
        return np.zeros(env.num_accounts, dtype=np.float32)
