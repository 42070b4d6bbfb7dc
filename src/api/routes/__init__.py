"""Rotas HTTP da API — adapters de entrada por canal.

Responsabilidades:
- Definir endpoints HTTP (webhook, health)
- Validação inicial de request (headers, secret)
- Delegação para coordinators/use_cases
- Respostas HTTP apropriadas

Estrutura:
- routes/telegram/: webhook da Bot API
- routes/health/: health checks e readiness
- router.py: registra todos os routers no app principal
"""

from __future__ import annotations

from api.routes.router import create_api_router

__all__ = ["create_api_router"]
