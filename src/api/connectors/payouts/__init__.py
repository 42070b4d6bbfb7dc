"""Connector da API de backend de payouts."""

from .client import PayoutApiClient

__all__ = ["PayoutApiClient"]
