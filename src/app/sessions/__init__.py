"""Módulo de sessões de conversa.

Exporta modelo, scratch por fluxo e gerenciador de sessões.
"""

from app.sessions.manager import SessionManager
from app.sessions.models import ConversationSession
from app.sessions.scratch import (
    AuthScratch,
    BankWithdrawScratch,
    Scratch,
    SendEmailScratch,
    SendWalletScratch,
    WalletSelectionScratch,
    WalletWithdrawScratch,
    empty_scratch_for,
    scratch_from_dict,
    scratch_to_dict,
)

__all__ = [
    "AuthScratch",
    "BankWithdrawScratch",
    "ConversationSession",
    "Scratch",
    "SendEmailScratch",
    "SendWalletScratch",
    "SessionManager",
    "WalletSelectionScratch",
    "WalletWithdrawScratch",
    "empty_scratch_for",
    "scratch_from_dict",
    "scratch_to_dict",
]
