"""Contexto de um turno dentro dos handlers de fluxo.

Toda mudança de passo passa pela StepMachine; o passo resultante é
espelhado na sessão junto com a variante de scratch do fluxo.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from app.sessions.scratch import empty_scratch_for
from fsm import FLOW_ENTRY, Flow, Step, StepMachine

if TYPE_CHECKING:
    from app.protocols.backend_api import BackendApiProtocol
    from app.sessions.models import ConversationSession
    from app.sessions.scratch import Scratch

# (user_id, organization_id, destination, auth_token)
AuthenticatedHook = Callable[[str, str, str, str | None], Awaitable[None]]
# (user_id, organization_id)
LoggedOutHook = Callable[[str, str], Awaitable[None]]


@dataclass(slots=True)
class FlowContext:
    """Dependências e sessão do turno, com helpers de transição.

    Attributes:
        session: Sessão travada pelo turno
        machine: StepMachine inicializada no passo da sessão
        backend: Fachada da API de backend
        currency: Moeda de transferências e saques
        history_page_size: Itens por página do histórico
        on_authenticated: Ponte para o gerenciador de notificações
        on_logged_out: Ponte para o gerenciador de notificações
    """

    session: ConversationSession
    machine: StepMachine
    backend: BackendApiProtocol
    currency: str
    history_page_size: int
    on_authenticated: AuthenticatedHook
    on_logged_out: LoggedOutHook

    @classmethod
    def for_session(
        cls,
        session: ConversationSession,
        backend: BackendApiProtocol,
        *,
        currency: str,
        history_page_size: int,
        on_authenticated: AuthenticatedHook,
        on_logged_out: LoggedOutHook,
    ) -> FlowContext:
        machine = StepMachine(
            session.current_step,
            authenticated=session.is_authenticated,
            user_id=session.user_id,
        )
        return cls(
            session=session,
            machine=machine,
            backend=backend,
            currency=currency,
            history_page_size=history_page_size,
            on_authenticated=on_authenticated,
            on_logged_out=on_logged_out,
        )

    @property
    def token(self) -> str:
        """Token do usuário; o gate garante presença fora do fluxo de auth."""
        return self.session.auth_token or ""

    def enter(self, flow: Flow, trigger: str) -> None:
        """Entra no primeiro passo do fluxo, abandonando o fluxo em andamento."""
        self.machine.advance(FLOW_ENTRY[flow], trigger)
        self.session.current_step = FLOW_ENTRY[flow]
        self.session.scratch = empty_scratch_for(flow)

    def advance(self, step: Step, trigger: str, scratch: Scratch) -> None:
        self.machine.advance(step, trigger)
        self.session.current_step = step
        self.session.scratch = scratch

    def finish(self, trigger: str) -> None:
        """Volta para idle descartando o scratch do fluxo."""
        if self.session.current_step is not None:
            self.machine.advance(None, trigger)
        self.session.clear_flow()
