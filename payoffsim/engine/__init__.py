"""Pure debt payoff simulation engine."""

from payoffsim.engine.accounts import PAID_OFF_EPSILON, Account, AccountState
from payoffsim.engine.allocator import allocate_payments
from payoffsim.engine.simulator import (
    MAX_SIMULATION_MONTHS,
    MonthlyStep,
    PayoffStatus,
    SimulationInput,
    SimulationResult,
    simulate,
)
from payoffsim.engine.strategy import Strategy, order_accounts

__all__ = [
    "PAID_OFF_EPSILON",
    "MAX_SIMULATION_MONTHS",
    "Account",
    "AccountState",
    "MonthlyStep",
    "PayoffStatus",
    "SimulationInput",
    "SimulationResult",
    "Strategy",
    "allocate_payments",
    "order_accounts",
    "simulate",
]
