"""Main entry point for the Collaborator assistant."""

import asyncio
import logging
import sys
from dataclasses import dataclass
from typing import Optional

from telegram import Update

from .agent.capabilities import (
    ActionItemsCapability,
    CapabilityRegistry,
    SearchCapability,
    SummarizerCapability,
)
from .agent.feedback import FeedbackLedger, feedback_key
from .agent.manager import ManagerAgent, ModelDelegationDecider
from .config.config_loader import load_config
from .context.context_registry import ConversationContextRegistry
from .context.message_tracker import MessageTracker
from .context.models import ConversationContext
from .context.roster import RosterProvider
from .debug.commands import DebugCommandHandler
from .llm.factory import create_llm
from .search import create_search_provider
from .storage.conversation_store import ConversationStore
from .telegram.client import TelegramClient, format_citations
from .telegram.message_extractor import InboundEvent, MessageExtractor, ReactionEvent
from .telegram.roster import TelegramRosterProvider
from .utils.logging import parse_verbosity, setup_logging, strip_verbosity_flags

logger = logging.getLogger(__name__)

ASSISTANT_NAME = "AI Assistant"
PERSONAL_FALLBACK = (
    "Hello! I can help you with conversation summaries, action item management, "
    "and general assistance. What would you like help with?"
)
GROUP_FALLBACK = (
    "I received your message but I'm not sure how to help with that. "
    "I can help with conversation summaries and message analysis."
)


@dataclass
class AssistantServices:
    """Long-lived components shared by every inbound event."""

    tracker: MessageTracker
    contexts: ConversationContextRegistry
    manager: ManagerAgent
    client: TelegramClient
    ledger: FeedbackLedger
    debug: Optional[DebugCommandHandler] = None
    roster: Optional[RosterProvider] = None
    timezone: str = "UTC"


def fallback_text(is_personal: bool) -> str:
    return PERSONAL_FALLBACK if is_personal else GROUP_FALLBACK


async def process_message(event: InboundEvent, services: AssistantServices) -> Optional[str]:
    """
    Handle one inbound message.

    Every message is tracked; only personal messages and group messages
    that mention the bot are answered. Tracked messages are flushed to
    the store whether or not the assistant answers.

    Args:
        event: The inbound message
        services: Shared components

    Returns:
        Text sent to the chat, or None when the assistant stayed silent
    """
    key = event.conversation_id

    if services.debug is not None:
        debug = await services.debug.handle(event.text, key)
        if debug.is_debug_command:
            await services.client.send_message(key, debug.response)
            return debug.response

    tracker = services.tracker
    tracker.add_message_to_tracking(
        key,
        "user",
        event.text,
        source_event=event,
        name=event.user_name,
        activity_id=str(event.message_id) if event.message_id is not None else None,
    )

    try:
        if not event.is_mentioned:
            logger.debug(f"Message in {key} does not mention the bot, stored without a response")
            return None

        context = ConversationContext(
            conversation_id=key,
            is_personal=event.is_personal,
            timezone=services.timezone,
            user_id=event.user_id,
            user_name=event.user_name,
        )
        async with services.contexts.open(context):
            result = await services.manager.process_request(
                event.text,
                context,
                roster=None if event.is_personal else services.roster,
            )

            response = result.response or fallback_text(event.is_personal)
            text = response
            if result.citations:
                text = f"{response}\n\n{format_citations(result.citations)}"

            sent_id = await services.client.send_message(key, text)
            tracker.add_message_to_tracking(
                key,
                "assistant",
                response,
                name=ASSISTANT_NAME,
                activity_id=str(sent_id) if sent_id is not None else None,
            )
            if sent_id is not None:
                await services.ledger.record_delegation(feedback_key(key, sent_id), result.delegated_capability)
            return text
    finally:
        saved = await tracker.save_messages_directly(key)
        logger.debug(f"Flushed {saved} messages for {key}")


async def process_reaction(event: ReactionEvent, ledger: FeedbackLedger) -> bool:
    """Count a like or dislike on a sent message."""
    return await ledger.record_reaction(feedback_key(event.conversation_id, event.message_id), event.reaction)


async def main():
    """Main entry point."""
    verbosity = parse_verbosity(sys.argv)
    setup_logging(verbosity=verbosity)

    logger.info("=" * 60)
    logger.info("Collaborator - Starting")
    logger.info("=" * 60)

    args = strip_verbosity_flags(sys.argv[1:])
    config_path = args[0] if args else "config.yaml"
    logger.info(f"[1/7] Loading configuration from: {config_path}")
    try:
        config = load_config(config_path)
        logger.info("✓ Configuration loaded successfully")
    except Exception as e:
        logger.error(f"✗ Failed to load configuration: {e}")
        sys.exit(1)

    logger.info("[2/7] Initializing conversation store")
    logger.info(f"  Database path: {config.database.path}")
    store = ConversationStore(config.database.path)
    await store.initialize()
    logger.info("✓ Conversation store ready")

    logger.info(f"[3/7] Initializing search ({config.search.provider})")
    search_provider = create_search_provider(config.search, store)
    tracker = MessageTracker(store, indexer=search_provider)
    logger.info("✓ Search ready")

    logger.info(f"[4/7] Initializing LLM ({config.llm.provider})")
    manager_llm = create_llm(config, role="manager")
    logger.info(f"✓ Manager model: {manager_llm.get_model_name()}")

    logger.info("[5/7] Initializing capabilities")
    capabilities = CapabilityRegistry()
    capabilities.register(SummarizerCapability(create_llm(config, role="summarizer")))
    capabilities.register(ActionItemsCapability(create_llm(config, role="action_items")))
    capabilities.register(
        SearchCapability(
            create_llm(config, role="search"),
            provider=search_provider,
            deep_link_template=config.search.deep_link_template,
        )
    )
    for capability in capabilities.get_all():
        logger.info(f"    - {capability.label}: {len(capability.tools)} tools")
    manager = ManagerAgent(
        capabilities=capabilities,
        store=store,
        decider=ModelDelegationDecider(manager_llm, capabilities),
    )
    logger.info("✓ Manager ready")

    logger.info(f"[6/7] Initializing Telegram client ({config.telegram.mode} mode)")
    telegram_client = TelegramClient(
        bot_token=config.telegram.bot_token,
        mode=config.telegram.mode,
        webhook_url=config.telegram.webhook_url,
        poll_interval=config.telegram.poll_interval,
        webhook_port=config.telegram.webhook_port,
    )
    message_extractor = MessageExtractor(config)
    if config.telegram.require_mention and not config.telegram.bot_username:
        logger.info("Auto-detecting bot username from Telegram API...")
        try:
            message_extractor.set_bot_username(await telegram_client.get_bot_username())
        except Exception as e:
            logger.error(f"✗ Failed to auto-detect bot username: {e}")
            logger.error("  Set telegram.bot_username in the config or disable require_mention")
            sys.exit(1)
    logger.info("✓ Telegram client ready")

    logger.info("[7/7] Wiring handlers")
    ledger = FeedbackLedger(store)
    services = AssistantServices(
        tracker=tracker,
        contexts=ConversationContextRegistry(),
        manager=manager,
        client=telegram_client,
        ledger=ledger,
        debug=DebugCommandHandler(store, tracker) if config.agent.enable_debug_commands else None,
        roster=TelegramRosterProvider(telegram_client.bot),
        timezone=config.agent.timezone,
    )
    logger.info(f"  Timezone: {config.agent.timezone}")
    logger.info(f"  Debug commands: {'enabled' if services.debug else 'disabled'}")

    async def message_handler(update: Update):
        event = message_extractor.extract(update.to_dict())
        if event is None:
            return
        logger.info(f"Processing message from chat {event.conversation_id}, user {event.user_id}")
        try:
            await process_message(event, services)
        except Exception as e:
            logger.error(f"Error processing message: {e}", exc_info=True)

    async def reaction_handler(update: Update):
        event = message_extractor.extract_reaction(update.to_dict())
        if event is None:
            return
        try:
            await process_reaction(event, ledger)
        except Exception as e:
            logger.error(f"Error recording reaction: {e}", exc_info=True)

    logger.info("=" * 60)
    logger.info("Starting Telegram bot")
    logger.info("=" * 60)
    try:
        await telegram_client.start(message_handler, reaction_handler)
        logger.info("✓ SYSTEM READY - Bot is now listening for messages")
        logger.info("Press Ctrl+C to stop")
        await asyncio.Event().wait()
    except (KeyboardInterrupt, asyncio.CancelledError):
        logger.info("Shutdown requested")
    finally:
        await telegram_client.stop()
        logger.info("✓ Collaborator shutdown complete")


def run():
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
