"""Serviços de aplicação.

Unidades reutilizáveis de orquestração (sem IO direto).
Implementações concretas de IO ficam em app/infra/ e api/connectors/.
"""

from app.services.subscriptions import NotificationSubscriptionManager, Subscription

__all__ = [
    "NotificationSubscriptionManager",
    "Subscription",
]
