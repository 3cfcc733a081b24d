"""Telegram transport (python-telegram-bot).

Converts Telegram messages into wizard events, passes them through the
BotDispatcher and sends the reply with a reply keyboard. Runs either in
polling mode or in webhook mode, where the FastAPI route feeds updates in
through process_webhook_update().
"""

import secrets
from collections.abc import Mapping
from typing import Any

import structlog
from telegram import Bot, Message, ReplyKeyboardMarkup, Update
from telegram.ext import Application, ContextTypes, MessageHandler, filters

from fanjobo.bot.dispatcher import BotDispatcher
from fanjobo.core.config import Settings
from fanjobo.wizards.state import DocumentEvent, DocumentRef, Reply, TextEvent, WizardEvent

logger = structlog.get_logger()

SECRET_TOKEN_HEADER = "X-Telegram-Bot-Api-Secret-Token"
UNSUPPORTED_MESSAGE = (
    "Only text and documents are understood here. "
    "To upload a file, send it as a document (PDF), not as a photo or media."
)


# =============================================================================
# Conversion
# =============================================================================


def event_from_message(message: Message) -> WizardEvent | None:
    """Wizard event for a Telegram message, or None for other content.

    Args:
        message: Incoming Telegram message.

    Returns:
        DocumentEvent for documents, TextEvent for text, otherwise None.
    """
    if message.document is not None:
        document = message.document
        return DocumentEvent(
            DocumentRef(
                file_id=document.file_id,
                file_name=document.file_name,
                mime_type=document.mime_type,
                file_size=document.file_size,
            )
        )
    if message.text is not None:
        return TextEvent(message.text)
    return None


def reply_markup(reply: Reply) -> ReplyKeyboardMarkup | None:
    """Telegram keyboard for a reply (None keeps the current keyboard)."""
    if not reply.keyboard:
        return None
    return ReplyKeyboardMarkup(reply.keyboard, resize_keyboard=True)


class TelegramDocumentFetcher:
    """DocumentFetcher that downloads files through the Bot API."""

    def __init__(self, bot: Bot) -> None:
        self._bot = bot

    async def fetch(self, document: DocumentRef) -> bytes:
        """Download a document the actor sent."""
        telegram_file = await self._bot.get_file(document.file_id)
        return bytes(await telegram_file.download_as_bytearray())


# =============================================================================
# Transport
# =============================================================================


class TelegramTransport:
    """Owns the python-telegram-bot Application."""

    def __init__(self, settings: Settings) -> None:
        """Build the Application from settings.

        In webhook mode the built-in updater is disabled; updates arrive via
        process_webhook_update().
        """
        self._settings = settings
        builder = Application.builder().token(settings.telegram_bot_token.get_secret_value())
        if settings.telegram_use_webhook:
            builder = builder.updater(None)
        self._application = builder.build()
        self._dispatcher: BotDispatcher | None = None

    @property
    def application(self) -> Application:
        """The underlying python-telegram-bot Application."""
        return self._application

    @property
    def fetcher(self) -> TelegramDocumentFetcher:
        """Document fetcher bound to this bot."""
        return TelegramDocumentFetcher(self._application.bot)

    def attach(self, dispatcher: BotDispatcher) -> None:
        """Register message and error handlers that feed the dispatcher.

        Text and documents go to the dispatcher; any other private message
        (photo, video, sticker, voice) gets a hint to resend as a document.
        """
        self._dispatcher = dispatcher
        self._application.add_handler(
            MessageHandler(
                (filters.TEXT | filters.Document.ALL) & filters.ChatType.PRIVATE,
                self._on_message,
            )
        )
        self._application.add_handler(
            MessageHandler(
                filters.ChatType.PRIVATE
                & ~filters.TEXT
                & ~filters.Document.ALL
                & ~filters.StatusUpdate.ALL,
                self._on_unsupported,
            )
        )
        self._application.add_error_handler(self._on_error)

    async def start(self) -> None:
        """Start polling, or register the webhook with Telegram."""
        await self._application.initialize()
        await self._application.start()

        if self._settings.telegram_use_webhook:
            secret = self._settings.telegram_webhook_secret.get_secret_value() or None
            await self._application.bot.set_webhook(
                url=self._settings.webhook_url,
                secret_token=secret,
                allowed_updates=Update.ALL_TYPES,
            )
            logger.info("Telegram webhook set", webhook_path=self._settings.webhook_path)
            return

        assert self._application.updater is not None  # nosec B101
        await self._application.updater.start_polling(allowed_updates=Update.ALL_TYPES)
        logger.info("Telegram polling started")

    async def stop(self) -> None:
        """Stop polling and shut the Application down."""
        updater = self._application.updater
        if updater is not None and updater.running:
            await updater.stop()
        if self._application.running:
            await self._application.stop()
        await self._application.shutdown()
        logger.info("Telegram transport stopped")

    async def process_webhook_update(self, payload: Mapping[str, Any]) -> None:
        """Process one update delivered to the webhook route."""
        update = Update.de_json(dict(payload), self._application.bot)
        await self._application.process_update(update)

    def verify_secret(self, header_value: str | None) -> bool:
        """Check the webhook secret header (always true when none is set)."""
        expected = self._settings.telegram_webhook_secret.get_secret_value()
        if not expected:
            return True
        return secrets.compare_digest((header_value or "").encode(), expected.encode())

    # -------------------------------------------------------------------------
    # Handlers
    # -------------------------------------------------------------------------

    async def _on_message(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        message = update.effective_message
        user = update.effective_user
        if message is None or user is None or self._dispatcher is None:
            return

        event = event_from_message(message)
        if event is None:
            return

        _, reply = await self._dispatcher.dispatch(
            str(user.id), event, display_name=user.full_name
        )
        await message.reply_text(reply.text, reply_markup=reply_markup(reply))

    async def _on_unsupported(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        message = update.effective_message
        if message is None:
            return
        await message.reply_text(UNSUPPORTED_MESSAGE)

    async def _on_error(self, update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
        logger.error(
            "Telegram update failed",
            error=str(context.error),
            exc_info=context.error,
        )
