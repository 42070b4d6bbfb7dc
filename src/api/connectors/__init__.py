"""Connectors — adapters de borda para APIs externas.

Estrutura:
- payouts/: API de backend (auth, carteiras, transferências)
- telegram/: Telegram Bot API (envio de mensagens)
- pusher/: Pusher Channels (eventos de depósito via websocket)
"""

__all__: list[str] = []
