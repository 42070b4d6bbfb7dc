"""Modelos compartilhados entre core e adaptadores de canal.

Independentes de canal: o adaptador Telegram converte para/desde
o formato da Bot API.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

DEFAULT_PARSE_MODE = "Markdown"


class InputSource(StrEnum):
    """Origem da entrada do usuário."""

    TEXT = "text"  # mensagem digitada (comandos começam com "/")
    ACTION = "action"  # seleção de menu (callback data)


@dataclass(frozen=True, slots=True)
class UserInput:
    """Entrada bruta de um turno."""

    source: InputSource
    value: str

    @classmethod
    def text(cls, value: str) -> UserInput:
        return cls(InputSource.TEXT, value)

    @classmethod
    def action(cls, value: str) -> UserInput:
        return cls(InputSource.ACTION, value)

    @property
    def is_command(self) -> bool:
        return self.source == InputSource.TEXT and self.value.startswith("/")

    @property
    def command(self) -> str | None:
        """Nome do comando sem barra e sem sufixo @bot (ex: "/login@x" → "login")."""
        if not self.is_command:
            return None
        head = self.value.split(maxsplit=1)[0][1:]
        return head.split("@", 1)[0].lower()


@dataclass(frozen=True, slots=True)
class Button:
    label: str
    action: str


Keyboard = tuple[tuple[Button, ...], ...]


@dataclass(frozen=True, slots=True)
class MessageOptions:
    """Opções de envio de uma mensagem."""

    keyboard: Keyboard = ()
    parse_mode: str | None = DEFAULT_PARSE_MODE


@dataclass(frozen=True, slots=True)
class Reply:
    """Resposta de um turno."""

    text: str
    keyboard: Keyboard = ()
    parse_mode: str | None = DEFAULT_PARSE_MODE

    @property
    def options(self) -> MessageOptions:
        return MessageOptions(keyboard=self.keyboard, parse_mode=self.parse_mode)

    @property
    def actions(self) -> list[str]:
        """Ações de todos os botões (útil em testes e logs)."""
        return [button.action for row in self.keyboard for button in row]
