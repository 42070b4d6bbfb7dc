"""
Máquina de passos (StepMachine) de uma conversa.

Envolve o passo atual da sessão: toda mudança de passo passa pela
tabela de transições e pelos guards, e fica registrada no histórico
do turno.
"""

import logging
from typing import Any

from fsm.rules.guards import evaluate_guards
from fsm.states.steps import Step
from fsm.transitions.rules import is_transition_valid
from fsm.types.transition import StateTransition, TransitionResult

logger = logging.getLogger(__name__)


class IllegalTransitionError(RuntimeError):
    """Transição fora da tabela (erro de programação do handler)."""


class StepMachine:
    """
    Máquina de passos para uma sessão.

    Attributes:
        current_step: Passo atual (None = idle)
        history: Transições efetuadas desde a criação
    """

    __slots__ = ("_authenticated", "_current_step", "_history", "_user_id")

    def __init__(
        self,
        current_step: Step | None = None,
        *,
        authenticated: bool = False,
        user_id: str = "",
    ) -> None:
        self._current_step = current_step
        self._authenticated = authenticated
        self._user_id = user_id
        self._history: list[StateTransition] = []

    @property
    def current_step(self) -> Step | None:
        return self._current_step

    @property
    def is_idle(self) -> bool:
        return self._current_step is None

    @property
    def history(self) -> list[StateTransition]:
        """Histórico (cópia para evitar mutação externa)."""
        return list(self._history)

    def transition(
        self,
        target: Step | None,
        trigger: str,
        metadata: dict[str, Any] | None = None,
    ) -> TransitionResult:
        """
        Tenta mudar de passo.

        Args:
            target: Passo de destino (None = idle)
            trigger: Gatilho da transição
            metadata: Dados de auditoria (nunca PII)

        Returns:
            TransitionResult com sucesso/falha
        """
        if not is_transition_valid(self._current_step, target):
            return TransitionResult(
                success=False,
                error_reason=f"Transição inválida: {self._current_step} → {target}",
            )

        guard_result = evaluate_guards(self._current_step, target, self._authenticated)
        if not guard_result.allowed:
            return TransitionResult(success=False, error_reason=guard_result.reason)

        transition = StateTransition(
            from_step=self._current_step,
            to_step=target,
            trigger=trigger,
            metadata=metadata or {},
        )
        self._current_step = target
        self._history.append(transition)

        logger.debug(
            "step_transition",
            extra={"user_id": self._user_id, **transition.to_log_dict()},
        )
        return TransitionResult(success=True, transition=transition)

    def advance(
        self,
        target: Step | None,
        trigger: str,
        metadata: dict[str, Any] | None = None,
    ) -> StateTransition:
        """
        Como transition(), mas levanta IllegalTransitionError se negada.

        Para handlers cujo destino é fixo pelo código.
        """
        result = self.transition(target, trigger, metadata)
        if not result.success or result.transition is None:
            raise IllegalTransitionError(result.error_reason or "transição negada")
        return result.transition

    def get_state_summary(self) -> dict[str, Any]:
        """Resumo para observabilidade (seguro para logs)."""
        return {
            "user_id": self._user_id,
            "current_step": self._current_step.value if self._current_step else "idle",
            "authenticated": self._authenticated,
            "transition_count": len(self._history),
        }
