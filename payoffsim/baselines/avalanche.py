"""Avalanche strategy — all surplus to highest APR account first."""

from __future__ import annotations

import numpy as np

from payoffsim.baselines.base_policy import BaselinePolicy, rank_scores
from payoffsim.engine.strategy import Strategy, order_accounts
from payoffsim.envs.payoff_env import PayoffEnv


class AvalanchePolicy(BaselinePolicy):
    """Debt avalanche: direct all surplus to the account with the highest APR.

    Mathematically optimal single-target strategy for minimizing total interest.
    """

    @property
    def name(self) -> str:
        return "Avalanche"

    def allocate(self, env: PayoffEnv) -> np.ndarray:
        order = order_accounts(env.states, Strategy.AVALANCHE)
        return rank_scores(env, [s.id for s in order])
