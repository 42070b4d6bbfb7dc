"""
Regras de transição válidas entre passos.

Além das arestas explícitas abaixo, todo passo pode:
- voltar para idle (cancelamento, abandono ou conclusão);
- entrar no primeiro passo de qualquer fluxo (abandono implícito).
"""

from fsm.states.steps import ENTRY_STEPS, Step

# Idle é representado por None
StepOrIdle = Step | None
TransitionMap = dict[StepOrIdle, frozenset[StepOrIdle]]

# Arestas de avanço dentro de cada fluxo
FORWARD_TRANSITIONS: dict[Step, frozenset[Step]] = {
    # Autenticação
    Step.AUTH_EMAIL: frozenset({Step.AUTH_OTP}),
    Step.AUTH_OTP: frozenset(),
    # Envio para email
    Step.SEND_EMAIL_ADDRESS: frozenset({Step.SEND_EMAIL_AMOUNT}),
    Step.SEND_EMAIL_AMOUNT: frozenset({Step.CONFIRM_EMAIL_TRANSFER}),
    Step.CONFIRM_EMAIL_TRANSFER: frozenset(),
    # Envio para carteira
    Step.SEND_WALLET_ADDRESS: frozenset({Step.SEND_WALLET_NETWORK}),
    Step.SEND_WALLET_NETWORK: frozenset({Step.SEND_WALLET_AMOUNT}),
    Step.SEND_WALLET_AMOUNT: frozenset({Step.CONFIRM_WALLET_TRANSFER}),
    Step.CONFIRM_WALLET_TRANSFER: frozenset(),
    # Saque para banco
    Step.WITHDRAW_BANK_AMOUNT: frozenset({Step.CONFIRM_BANK_WITHDRAWAL}),
    Step.CONFIRM_BANK_WITHDRAWAL: frozenset(),
    # Saque para carteira
    Step.WITHDRAW_WALLET_ADDRESS: frozenset({Step.WITHDRAW_WALLET_NETWORK}),
    Step.WITHDRAW_WALLET_NETWORK: frozenset({Step.WITHDRAW_WALLET_AMOUNT}),
    Step.WITHDRAW_WALLET_AMOUNT: frozenset({Step.CONFIRM_WALLET_WITHDRAWAL}),
    Step.CONFIRM_WALLET_WITHDRAWAL: frozenset(),
    # Carteira padrão
    Step.SELECT_DEFAULT_WALLET: frozenset(),
}

_ALWAYS_ALLOWED: frozenset[StepOrIdle] = frozenset({None, *ENTRY_STEPS})


def _build_transition_map() -> TransitionMap:
    table: TransitionMap = {None: _ALWAYS_ALLOWED}
    for step, forward in FORWARD_TRANSITIONS.items():
        table[step] = forward | _ALWAYS_ALLOWED
    return table


VALID_TRANSITIONS: TransitionMap = _build_transition_map()


def get_valid_targets(step: StepOrIdle) -> frozenset[StepOrIdle]:
    """
    Retorna os destinos válidos a partir de um passo.

    Args:
        step: Passo de origem (None = idle)

    Returns:
        Conjunto de destinos permitidos
    """
    return VALID_TRANSITIONS.get(step, frozenset())


def is_transition_valid(from_step: StepOrIdle, to_step: StepOrIdle) -> bool:
    """Verifica se a transição está na tabela."""
    return to_step in get_valid_targets(from_step)


def validate_transition_map() -> list[str]:
    """
    Valida a integridade da tabela de transições.

    Verifica:
    - Todos os passos do enum estão na tabela
    - Todo destino é um Step ou idle
    - Todo passo não-inicial é alcançável por alguma aresta de avanço

    Returns:
        Lista de erros encontrados (vazia se válido)
    """
    errors: list[str] = []

    for step in Step:
        if step not in VALID_TRANSITIONS:
            errors.append(f"Passo {step.name} ausente em VALID_TRANSITIONS")

    for from_step, targets in VALID_TRANSITIONS.items():
        for target in targets:
            if target is not None and not isinstance(target, Step):
                errors.append(f"Transição {from_step} → {target}: destino inválido")

    reachable = {target for targets in FORWARD_TRANSITIONS.values() for target in targets}
    for step in Step:
        if step not in ENTRY_STEPS and step not in reachable:
            errors.append(f"Passo {step.name} inalcançável")

    return errors


# Tabela inconsistente é erro de programação: falha no import
_errors = validate_transition_map()
if _errors:
    raise RuntimeError("; ".join(_errors))
