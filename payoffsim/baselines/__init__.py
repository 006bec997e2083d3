"""Baseline policies for debt payoff."""

from payoffsim.baselines.base_policy import BaselinePolicy
from payoffsim.baselines.minimum_only import MinimumOnlyPolicy
from payoffsim.baselines.snowball import SnowballPolicy
from payoffsim.baselines.avalanche import AvalanchePolicy

ALL_BASELINES = [
    MinimumOnlyPolicy,
    SnowballPolicy,
    AvalanchePolicy,
]

__all__ = [
    "BaselinePolicy",
    "MinimumOnlyPolicy",
    "SnowballPolicy",
    "AvalanchePolicy",
    "ALL_BASELINES",
]
