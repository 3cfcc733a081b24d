"""Shared dependencies for API endpoints.

Admin routes require the X-Admin-Key header. When no key is configured
(development only; production refuses to start without one) the check
is skipped.

The bot dispatcher is created in the application lifespan and stored on
app.state; endpoints receive it through get_dispatcher.
"""

import secrets
from typing import Annotated

from fastapi import Depends, Header, Request

from fanjobo.bot.dispatcher import BotDispatcher
from fanjobo.core.config import settings
from fanjobo.core.errors import UnauthorizedError
from fanjobo.wizards.controller import WizardController

ADMIN_KEY_HEADER = "X-Admin-Key"


async def require_admin_key(
    x_admin_key: Annotated[str | None, Header(alias=ADMIN_KEY_HEADER)] = None,
) -> None:
    """Reject requests without the configured admin key.

    Raises:
        UnauthorizedError: Header missing or wrong.
    """
    expected = settings.admin_api_key.get_secret_value()
    if not expected:
        return
    # Security: constant-time comparison
    if not x_admin_key or not secrets.compare_digest(
        x_admin_key.encode(), expected.encode()
    ):
        raise UnauthorizedError()


def get_dispatcher(request: Request) -> BotDispatcher:
    """The application's BotDispatcher (set up in the lifespan)."""
    return request.app.state.dispatcher


def get_controller(
    dispatcher: Annotated[BotDispatcher, Depends(get_dispatcher)],
) -> WizardController:
    """The wizard controller behind the dispatcher."""
    return dispatcher.controller


AdminKey = Depends(require_admin_key)
Dispatcher = Annotated[BotDispatcher, Depends(get_dispatcher)]
Controller = Annotated[WizardController, Depends(get_controller)]
