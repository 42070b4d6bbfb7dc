"""
Exports públicos do módulo fsm/states.

Passos e fluxos da conversa.
"""

from fsm.states.steps import (
    CONFIRM_STEPS,
    ENTRY_STEPS,
    EXPECTED_INPUT,
    FLOW_ENTRY,
    FLOW_STEPS,
    PUBLIC_STEPS,
    STEP_FLOW,
    Flow,
    InputKind,
    Step,
    expected_input,
    flow_of,
    is_public,
    parse_step,
)

__all__ = [
    "CONFIRM_STEPS",
    "ENTRY_STEPS",
    "EXPECTED_INPUT",
    "FLOW_ENTRY",
    "FLOW_STEPS",
    "PUBLIC_STEPS",
    "STEP_FLOW",
    "Flow",
    "InputKind",
    "Step",
    "expected_input",
    "flow_of",
    "is_public",
    "parse_step",
]
