"""Poll mode handler for Telegram."""

import logging
from typing import Callable, Optional

from telegram import Update
from telegram.ext import Application, ContextTypes, MessageHandler, MessageReactionHandler, filters

logger = logging.getLogger(__name__)


class PollHandler:
    """Long-polls Telegram for messages and reactions."""

    def __init__(
        self,
        bot_token: str,
        message_handler: Callable,
        reaction_handler: Optional[Callable] = None,
        poll_interval: float = 1.0,
    ):
        """
        Initialize poll handler.

        Args:
            bot_token: Telegram bot token
            message_handler: Async function(update: Update) -> None
            reaction_handler: Async function(update: Update) -> None for reactions
            poll_interval: Polling interval in seconds
        """
        self.bot_token = bot_token
        self.message_handler = message_handler
        self.reaction_handler = reaction_handler
        self.poll_interval = poll_interval
        self.application: Optional[Application] = None

    async def start(self) -> None:
        self.application = Application.builder().token(self.bot_token).build()
        self.application.add_handler(MessageHandler(filters.TEXT, self._handle_message))
        if self.reaction_handler is not None:
            self.application.add_handler(MessageReactionHandler(self._handle_reaction))

        await self.application.initialize()
        await self.application.start()

        logger.info("Clearing any existing webhook configuration...")
        await self.application.bot.delete_webhook(drop_pending_updates=True)
        logger.info("✓ Webhook cleared, starting polling")

        # Reactions are only delivered when requested explicitly.
        await self.application.updater.start_polling(
            poll_interval=self.poll_interval,
            allowed_updates=Update.ALL_TYPES,
        )

    async def stop(self) -> None:
        if self.application:
            await self.application.updater.stop()
            await self.application.stop()
            await self.application.shutdown()

    async def _handle_message(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await self.message_handler(update)

    async def _handle_reaction(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await self.reaction_handler(update)
