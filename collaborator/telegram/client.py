"""Telegram bot client."""

import logging
from typing import Callable, List, Optional, Union

from telegram import Bot
from telegram.error import TelegramError

from ..agent.types import Citation
from .markdown_formatter import markdown_to_telegram_html, split_message_for_telegram
from .poll_handler import PollHandler
from .webhook_handler import WebhookHandler

logger = logging.getLogger(__name__)


def format_citations(citations: List[Citation]) -> str:
    """Markdown source list appended to responses that cite messages."""
    if not citations:
        return ""
    lines = ["**Sources:**"]
    for citation in citations:
        lines.append(f"{citation.position}. [{citation.name}]({citation.url}) - {citation.abstract}")
    return "\n".join(lines)


class TelegramClient:
    """Sends messages and starts the configured update handler."""

    def __init__(
        self,
        bot_token: str,
        mode: str = "poll",
        webhook_url: Optional[str] = None,
        poll_interval: float = 1.0,
        webhook_port: int = 8000,
    ):
        """
        Initialize Telegram client.

        Args:
            bot_token: Telegram bot token
            mode: "poll" or "webhook"
            webhook_url: Public webhook URL (webhook mode)
            poll_interval: Polling interval in seconds (poll mode)
            webhook_port: Local port of the webhook server (webhook mode)
        """
        self.bot_token = bot_token
        self.mode = mode
        self.webhook_url = webhook_url
        self.poll_interval = poll_interval
        self.webhook_port = webhook_port
        self.bot = Bot(token=bot_token)
        self.handler: Optional[Union[PollHandler, WebhookHandler]] = None

    async def start(self, message_handler: Callable, reaction_handler: Optional[Callable] = None) -> None:
        """
        Start receiving updates in the configured mode.

        Args:
            message_handler: Async function(update) for messages
            reaction_handler: Async function(update) for message reactions
        """
        if self.mode == "webhook":
            if not self.webhook_url:
                raise ValueError("webhook_url is required for webhook mode")
            self.handler = WebhookHandler(
                bot_token=self.bot_token,
                webhook_url=self.webhook_url,
                message_handler=message_handler,
                reaction_handler=reaction_handler,
                port=self.webhook_port,
            )
        else:
            self.handler = PollHandler(
                bot_token=self.bot_token,
                message_handler=message_handler,
                reaction_handler=reaction_handler,
                poll_interval=self.poll_interval,
            )
        await self.handler.start()

    async def get_bot_username(self) -> str:
        me = await self.bot.get_me()
        return me.username

    async def send_message(self, chat_id: Union[int, str], text: str, format_markdown: bool = True) -> Optional[int]:
        """
        Send a message, split into as many Telegram messages as needed.

        Args:
            chat_id: Telegram chat ID
            text: Message text (markdown)
            format_markdown: Convert markdown to Telegram HTML

        Returns:
            Message id of the first sent chunk

        Raises:
            TelegramError: If sending fails
        """
        if format_markdown:
            chunks = split_message_for_telegram(markdown_to_telegram_html(text))
            parse_mode = "HTML"
        else:
            chunks = split_message_for_telegram(text)
            parse_mode = None

        first_id: Optional[int] = None
        try:
            for chunk in chunks:
                sent = await self.bot.send_message(chat_id=chat_id, text=chunk, parse_mode=parse_mode)
                if first_id is None:
                    first_id = sent.message_id
        except TelegramError as e:
            logger.error(f"Failed to send message to {chat_id}: {e}")
            raise
        return first_id

    async def stop(self) -> None:
        if self.handler:
            await self.handler.stop()
