"""
Exports públicos do módulo fsm/transitions.

Tabela de transições entre passos.
"""

from fsm.transitions.rules import (
    FORWARD_TRANSITIONS,
    VALID_TRANSITIONS,
    StepOrIdle,
    TransitionMap,
    get_valid_targets,
    is_transition_valid,
    validate_transition_map,
)

__all__ = [
    "FORWARD_TRANSITIONS",
    "VALID_TRANSITIONS",
    "StepOrIdle",
    "TransitionMap",
    "get_valid_targets",
    "is_transition_valid",
    "validate_transition_map",
]
