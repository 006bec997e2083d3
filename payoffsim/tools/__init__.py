"""Wire-format boundary for HTTP handlers and assistant tool calls."""

from payoffsim.tools.assistant_tool import (
    CALCULATE_CREDIT_IMPACT_TOOL,
    SIMULATE_DEBT_PAYOFF_TOOL,
    TOOLS,
    handle_tool_call,
)
from payoffsim.tools.payload import (
    CardPayload,
    PayloadError,
    SimulationRequest,
    parse_simulation_input,
    parse_strategy,
    result_to_payload,
    simulate_payload,
)

__all__ = [
    "CALCULATE_CREDIT_IMPACT_TOOL",
    "CardPayload",
    "PayloadError",
    "SIMULATE_DEBT_PAYOFF_TOOL",
    "SimulationRequest",
    "TOOLS",
    "handle_tool_call",
    "parse_simulation_input",
    "parse_strategy",
    "result_to_payload",
    "simulate_payload",
]
