"""Webhook mode handler for Telegram."""

import logging
from typing import Callable, Optional

from telegram import Update
from telegram.ext import Application, ContextTypes, MessageHandler, MessageReactionHandler, filters

logger = logging.getLogger(__name__)


class WebhookHandler:
    """Receives messages and reactions through a webhook server."""

    def __init__(
        self,
        bot_token: str,
        webhook_url: str,
        message_handler: Callable,
        reaction_handler: Optional[Callable] = None,
        port: int = 8000,
    ):
        """
        Initialize webhook handler.

        Args:
            bot_token: Telegram bot token
            webhook_url: Public URL for webhook
            message_handler: Async function(update: Update) -> None
            reaction_handler: Async function(update: Update) -> None for reactions
            port: Local port to listen on
        """
        self.bot_token = bot_token
        self.webhook_url = webhook_url
        self.message_handler = message_handler
        self.reaction_handler = reaction_handler
        self.port = port
        self.application: Optional[Application] = None

    async def start(self) -> None:
        self.application = Application.builder().token(self.bot_token).build()
        self.application.add_handler(MessageHandler(filters.TEXT, self._handle_message))
        if self.reaction_handler is not None:
            self.application.add_handler(MessageReactionHandler(self._handle_reaction))

        await self.application.initialize()
        await self.application.start()

        logger.info(f"Starting webhook server on port {self.port}")
        await self.application.updater.start_webhook(
            listen="0.0.0.0",
            port=self.port,
            webhook_url=self.webhook_url,
            allowed_updates=Update.ALL_TYPES,
        )

    async def stop(self) -> None:
        if self.application:
            await self.application.updater.stop()
            await self.application.bot.delete_webhook()
            await self.application.stop()
            await self.application.shutdown()

    async def _handle_message(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await self.message_handler(update)

    async def _handle_reaction(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await self.reaction_handler(update)
