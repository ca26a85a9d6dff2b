"""Delivery channel for password reset codes.

Only a logging sender exists; a real WhatsApp/SMS gateway plugs in by
implementing ``CodeSender``.
"""

from typing import Protocol

import structlog

from storefront.config import get_settings

logger = structlog.get_logger(__name__)


class CodeSender(Protocol):
    def send_reset_code(self, whatsapp_number: str, code: str) -> None:
        ...


class LoggingCodeSender:
    """Writes the code to the log outside production instead of delivering it."""

    def send_reset_code(self, whatsapp_number: str, code: str) -> None:
        if get_settings().ENVIRONMENT == "production":
            logger.warning(
                "No reset code delivery channel configured; code not delivered",
                whatsapp_number=whatsapp_number,
            )
            return
        # "code" is a redacted log key
        logger.info("Password reset code issued", whatsapp_number=whatsapp_number, verification=code)
