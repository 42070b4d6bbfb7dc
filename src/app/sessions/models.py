"""Modelo de sessão de conversa.

Uma sessão por usuário do canal: identidade autenticada, passo atual
do fluxo, scratch do fluxo e horário da última atividade.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from app.sessions.scratch import S, Scratch, scratch_from_dict, scratch_to_dict
from fsm.states import Step, parse_step


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class ConversationSession:
    """Sessão de conversa de um usuário.

    Atributos:
        user_id: Identificador estável do usuário no canal
        destination: Chat para onde respostas e notificações vão
        auth_token: Bearer token da API (presente sse autenticado)
        organization_id: Organização do usuário autenticado
        email: Email autenticado
        current_step: Passo atual (None = idle)
        scratch: Dados acumulados do fluxo em andamento
        last_activity_at: Última entrada processada
        created_at: Criação da sessão
    """

    user_id: str
    destination: str = ""
    auth_token: str | None = None
    organization_id: str | None = None
    email: str | None = None
    current_step: Step | None = None
    scratch: Scratch | None = None
    last_activity_at: datetime = field(default_factory=_utcnow)
    created_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        if not self.destination:
            self.destination = self.user_id

    @property
    def is_authenticated(self) -> bool:
        return bool(self.auth_token)

    @property
    def is_idle(self) -> bool:
        return self.current_step is None

    def scratch_as(self, scratch_type: type[S]) -> S | None:
        """Retorna o scratch se for da variante pedida; caso contrário None.

        Em idle o scratch nunca é lido.
        """
        if self.current_step is None:
            return None
        if isinstance(self.scratch, scratch_type):
            return self.scratch
        return None

    def clear_flow(self) -> None:
        """Volta para idle descartando o scratch."""
        self.current_step = None
        self.scratch = None

    def clear_auth(self) -> None:
        """Remove credenciais (expiração); mantém destino."""
        self.auth_token = None
        self.clear_flow()

    def reset(self) -> None:
        """Restaura os padrões (logout); mantém user_id e destino."""
        self.auth_token = None
        self.organization_id = None
        self.email = None
        self.clear_flow()
        self.touch()

    def touch(self, now: datetime | None = None) -> None:
        self.last_activity_at = now or _utcnow()

    def idle_seconds(self, now: datetime | None = None) -> float:
        return ((now or _utcnow()) - self.last_activity_at).total_seconds()

    def to_dict(self) -> dict[str, Any]:
        """Serializa para persistência (JSON)."""
        return {
            "user_id": self.user_id,
            "destination": self.destination,
            "auth_token": self.auth_token,
            "organization_id": self.organization_id,
            "email": self.email,
            "current_step": self.current_step.value if self.current_step else None,
            "scratch": scratch_to_dict(self.scratch),
            "last_activity_at": self.last_activity_at.isoformat(),
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ConversationSession:
        """Deserializa de persistência.

        Passos desconhecidos voltam para idle (e o scratch é descartado).
        """
        step = parse_step(data.get("current_step"))
        return cls(
            user_id=str(data["user_id"]),
            destination=str(data.get("destination") or data["user_id"]),
            auth_token=data.get("auth_token"),
            organization_id=data.get("organization_id"),
            email=data.get("email"),
            current_step=step,
            scratch=scratch_from_dict(data.get("scratch")) if step else None,
            last_activity_at=_parse_datetime(data.get("last_activity_at")),
            created_at=_parse_datetime(data.get("created_at")),
        )


def _parse_datetime(value: str | None) -> datetime:
    if not value:
        return _utcnow()
    parsed = datetime.fromisoformat(value)
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)
