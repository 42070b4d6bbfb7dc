"""
Exports públicos do módulo fsm/manager.

Máquina de passos (StepMachine) da conversa.
"""

from fsm.manager.machine import IllegalTransitionError, StepMachine

__all__ = [
    "IllegalTransitionError",
    "StepMachine",
]
