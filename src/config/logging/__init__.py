"""Logging estruturado JSON do payout-bot.

Uso:
    from config.logging import configure_logging, get_logger

    configure_logging(level="INFO", service_name="payout_bot")

    logger = get_logger(__name__)
    logger.info("transfer_submitted", extra={"user_id": "123", "flow": "send_email"})

Todo record recebe correlation_id e service; campos sensíveis
(token, otp, email) são mascarados antes da serialização.
"""

from config.logging.config import configure_logging, get_logger
from config.logging.filters import CorrelationIdFilter, SensitiveFieldFilter
from config.logging.formatters import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    create_json_formatter,
)

__all__ = [
    "FIELD_RENAME_MAP",
    "REQUIRED_LOG_FIELDS",
    "CorrelationIdFilter",
    "SensitiveFieldFilter",
    "configure_logging",
    "create_json_formatter",
    "get_logger",
]
