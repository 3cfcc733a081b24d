"""Telegram webhook route.

Mounted at settings.webhook_path (outside /api/v1, no admin key). Telegram
authenticates itself with the secret token header registered in
set_webhook.
"""

from typing import Any

import structlog
from fastapi import APIRouter, Body, Header, Request

from fanjobo.bot.telegram import SECRET_TOKEN_HEADER, TelegramTransport
from fanjobo.core.errors import NotFoundError, UnauthorizedError

logger = structlog.get_logger()

router = APIRouter()


@router.post("")
async def receive_update(
    request: Request,
    payload: dict[str, Any] = Body(...),
    secret_token: str | None = Header(default=None, alias=SECRET_TOKEN_HEADER),
) -> dict[str, bool]:
    """Feed one webhook update to the Telegram application.

    Raises:
        NotFoundError: Webhook mode is not active.
        UnauthorizedError: Secret token header missing or wrong.
    """
    transport: TelegramTransport | None = getattr(request.app.state, "telegram", None)
    if transport is None:
        raise NotFoundError("Webhook")
    if not transport.verify_secret(secret_token):
        logger.warning("Webhook secret mismatch")
        raise UnauthorizedError()

    await transport.process_webhook_update(payload)
    return {"ok": True}
