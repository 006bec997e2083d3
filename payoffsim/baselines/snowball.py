"""Snowball strategy — all surplus to smallest balance first."""

from __future__ import annotations

import numpy as np

from payoffsim.baselines.base_policy import BaselinePolicy, rank_scores
from payoffsim.engine.strategy import Strategy, order_accounts
from payoffsim.envs.payoff_env import PayoffEnv


class SnowballPolicy(BaselinePolicy):
    """Debt snowball: direct all surplus to the account with the smallest balance.

    Motivational strategy: early wins by clearing small accounts first.
    """

    @property
    def name(self) -> str:
        return "Snowball"

    def allocate(self, env: PayoffEnv) -> np.ndarray:
        order = order_accounts(env.states, Strategy.SNOWBALL)
        return rank_scores(env, [s.id for s in order])
