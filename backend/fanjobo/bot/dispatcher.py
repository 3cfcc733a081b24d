"""Event dispatch shared by every transport.

Text is normalized once, then offered to the wizard controller; the plain
menu only sees events the controller did not handle. Telegram and the
admin events API both go through BotDispatcher.
"""

import structlog

from fanjobo.bot.menu import MenuDispatcher
from fanjobo.wizards.controller import WizardController
from fanjobo.wizards.normalizer import normalize
from fanjobo.wizards.state import Reply, TextEvent, WizardEvent

logger = structlog.get_logger()


class BotDispatcher:
    """Routes one inbound event to a wizard or the plain menu."""

    def __init__(self, controller: WizardController, menu: MenuDispatcher) -> None:
        self._controller = controller
        self._menu = menu

    @property
    def controller(self) -> WizardController:
        """The wizard controller events are offered to first."""
        return self._controller

    async def dispatch(
        self,
        actor_id: str,
        event: WizardEvent,
        *,
        display_name: str | None = None,
    ) -> tuple[bool, Reply]:
        """Handle one event.

        Args:
            actor_id: Conversing user.
            event: Raw text or document event from the transport.
            display_name: Name reported by the transport.

        Returns:
            (handled_by_wizard, reply).
        """
        if isinstance(event, TextEvent):
            event = TextEvent(normalize(event.text))

        result = await self._controller.handle_event(
            actor_id, event, display_name=display_name
        )
        if result.handled and result.reply is not None:
            return True, result.reply

        logger.debug("Event passed to menu", actor_id=actor_id)
        reply = await self._menu.handle(actor_id, event, display_name=display_name)
        return False, reply
