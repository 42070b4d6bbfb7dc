"""
Módulo FSM — passos dos fluxos conversacionais.

Estrutura:
    - states/: Passos e fluxos (Step, Flow, InputKind)
    - transitions/: Tabela de transições (VALID_TRANSITIONS)
    - rules/: Guards (autenticação)
    - manager/: StepMachine
    - types/: StateTransition, TransitionResult
"""

from fsm.manager import IllegalTransitionError, StepMachine
from fsm.rules import GuardResult, evaluate_guards
from fsm.states import (
    CONFIRM_STEPS,
    ENTRY_STEPS,
    FLOW_ENTRY,
    FLOW_STEPS,
    PUBLIC_STEPS,
    Flow,
    InputKind,
    Step,
    expected_input,
    flow_of,
    is_public,
    parse_step,
)
from fsm.transitions import (
    VALID_TRANSITIONS,
    get_valid_targets,
    is_transition_valid,
    validate_transition_map,
)
from fsm.types import StateTransition, TransitionResult

__all__ = [
    "CONFIRM_STEPS",
    "ENTRY_STEPS",
    "FLOW_ENTRY",
    "FLOW_STEPS",
    "PUBLIC_STEPS",
    "VALID_TRANSITIONS",
    "Flow",
    "GuardResult",
    "IllegalTransitionError",
    "InputKind",
    "StateTransition",
    "Step",
    "StepMachine",
    "TransitionResult",
    "evaluate_guards",
    "expected_input",
    "flow_of",
    "get_valid_targets",
    "is_public",
    "is_transition_valid",
    "parse_step",
    "validate_transition_map",
]
