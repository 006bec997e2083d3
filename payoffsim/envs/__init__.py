"""Step-wise payoff environment and scenario generation."""

from payoffsim.envs.payoff_env import PayoffEnv
from payoffsim.envs.scenario_sampler import ScenarioSampler

__all__ = ["PayoffEnv", "ScenarioSampler"]
