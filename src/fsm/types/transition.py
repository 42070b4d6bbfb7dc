"""
Tipos para registro de transições de passo.

Registros são imutáveis e seguros para log (sem PII).
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from fsm.states.steps import Step


def _step_name(step: Step | None) -> str:
    return step.value if step is not None else "idle"


@dataclass(frozen=True, slots=True)
class StateTransition:
    """
    Transição de passo efetuada.

    Attributes:
        from_step: Passo de origem (None = idle)
        to_step: Passo de destino (None = idle)
        trigger: Gatilho (ex: 'otp_requested', 'cancel', 'flow_entry')
        metadata: Dados adicionais para auditoria (nunca PII)
        timestamp: Momento da transição (UTC)
    """

    from_step: Step | None
    to_step: Step | None
    trigger: str
    metadata: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        if not self.trigger or not self.trigger.strip():
            raise ValueError("trigger não pode ser vazio")

    def to_log_dict(self) -> dict[str, Any]:
        """Representação para logging estruturado."""
        return {
            "from_step": _step_name(self.from_step),
            "to_step": _step_name(self.to_step),
            "trigger": self.trigger,
            "timestamp": self.timestamp.isoformat(),
            "metadata": self.metadata,
        }


@dataclass(frozen=True, slots=True)
class TransitionResult:
    """
    Resultado de uma tentativa de transição.

    Attributes:
        success: Se a transição foi aplicada
        transition: Dados da transição (se success=True)
        error_reason: Motivo da falha (se success=False)
    """

    success: bool
    transition: StateTransition | None = None
    error_reason: str | None = None

    def __post_init__(self) -> None:
        if self.success and self.transition is None:
            raise ValueError("Transição bem-sucedida deve incluir transition")
        if not self.success and self.error_reason is None:
            raise ValueError("Transição falha deve incluir error_reason")
