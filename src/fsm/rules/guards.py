"""
Guards aplicados depois da tabela de transições.

A tabela diz quais arestas existem; os guards decidem se a aresta pode
ser usada no contexto atual (ex: usuário autenticado).
"""

from collections.abc import Callable

from fsm.states.steps import Step, is_public


class GuardResult:
    """
    Resultado da avaliação de um guard.

    Attributes:
        allowed: Se a transição é permitida
        reason: Motivo do bloqueio (se allowed=False)
    """

    __slots__ = ("allowed", "reason")

    def __init__(self, allowed: bool, reason: str | None = None) -> None:
        self.allowed = allowed
        self.reason = reason

    @classmethod
    def allow(cls) -> "GuardResult":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> "GuardResult":
        return cls(allowed=False, reason=reason)


Guard = Callable[[Step | None, Step | None, bool], GuardResult]


def guard_valid_step(
    from_step: Step | None,
    to_step: Step | None,
    authenticated: bool,
) -> GuardResult:
    """Guard: origem e destino são Step ou idle."""
    if from_step is not None and not isinstance(from_step, Step):
        return GuardResult.deny(f"Passo de origem inválido: {from_step}")
    if to_step is not None and not isinstance(to_step, Step):
        return GuardResult.deny(f"Passo de destino inválido: {to_step}")
    return GuardResult.allow()


def guard_authenticated(
    from_step: Step | None,
    to_step: Step | None,
    authenticated: bool,
) -> GuardResult:
    """Guard: passos fora do fluxo de autenticação exigem token."""
    if not authenticated and not is_public(to_step):
        return GuardResult.deny(f"Passo {to_step} exige autenticação")
    return GuardResult.allow()


# Aplicados em ordem; o primeiro deny interrompe
DEFAULT_GUARDS: list[Guard] = [
    guard_valid_step,
    guard_authenticated,
]


def evaluate_guards(
    from_step: Step | None,
    to_step: Step | None,
    authenticated: bool,
    guards: list[Guard] | None = None,
) -> GuardResult:
    """
    Avalia todos os guards para uma transição.

    Args:
        from_step: Passo de origem (None = idle)
        to_step: Passo de destino (None = idle)
        authenticated: Se a sessão possui token
        guards: Guards a aplicar (usa DEFAULT_GUARDS se None)

    Returns:
        GuardResult do primeiro guard que negar, ou allow()
    """
    for guard in guards if guards is not None else DEFAULT_GUARDS:
        result = guard(from_step, to_step, authenticated)
        if not result.allowed:
            return result
    return GuardResult.allow()
