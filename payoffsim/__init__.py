"""Multi-account debt payoff simulation (avalanche / snowball)."""

import logging

from payoffsim.engine import (
    Account,
    MonthlyStep,
    PayoffStatus,
    SimulationInput,
    SimulationResult,
    Strategy,
    simulate,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "Account",
    "MonthlyStep",
    "PayoffStatus",
    "SimulationInput",
    "SimulationResult",
    "Strategy",
    "simulate",
]
