"""
Exports públicos do módulo fsm/rules.

Guards aplicados às transições e validação da entrada de cada passo.
"""

from fsm.rules.guards import (
    DEFAULT_GUARDS,
    Guard,
    GuardResult,
    evaluate_guards,
    guard_authenticated,
    guard_valid_step,
)
from fsm.rules.inputs import (
    NETWORK_ALIASES,
    STEP_VALIDATORS,
    looks_like_email,
    validate_amount,
    validate_email,
    validate_input,
    validate_network,
    validate_otp,
    validate_wallet_address,
)

__all__ = [
    "DEFAULT_GUARDS",
    "NETWORK_ALIASES",
    "STEP_VALIDATORS",
    "Guard",
    "GuardResult",
    "evaluate_guards",
    "guard_authenticated",
    "guard_valid_step",
    "looks_like_email",
    "validate_amount",
    "validate_email",
    "validate_input",
    "validate_network",
    "validate_otp",
    "validate_wallet_address",
]
