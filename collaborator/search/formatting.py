"""Result summaries, deep links and citations for message search."""

import logging
from datetime import datetime
from typing import List, Optional
from urllib.parse import quote

from ..agent.types import Citation
from ..storage.models import StoredMessage
from ..utils.time_resolver import get_zone
from ..utils.timestamps import parse_timestamp, utc_now

logger = logging.getLogger(__name__)

NO_RESULTS_TEXT = (
    "No messages found matching your search criteria. Try different keywords or a broader time range."
)
MAX_CITATIONS = 5
PREVIEWS_PER_GROUP = 3

_PERIODS = ((24, "Today"), (48, "Yesterday"), (168, "This week"), (720, "This month"))


def period_label(timestamp: str, now: datetime) -> str:
    """Bucket a timestamp by how many hours ago it was."""
    try:
        hours_ago = (now - parse_timestamp(timestamp)).total_seconds() / 3600
    except ValueError:
        return "Older"
    for limit, label in _PERIODS:
        if hours_ago < limit:
            return label
    return "Older"


def _preview(content: str, length: int) -> str:
    return content if len(content) <= length else content[:length] + "..."


def format_search_summary(
    messages: List[StoredMessage],
    total_found: int,
    now: Optional[datetime] = None,
) -> str:
    """
    Render search hits grouped by period.

    Args:
        messages: Hits to show, newest first
        total_found: Number of hits before the result cap
        now: Reference time for the period buckets

    Returns:
        Text summary for the model and the user
    """
    if not messages:
        return NO_RESULTS_TEXT

    reference = now or utc_now()
    groups: dict = {}
    for message in messages:
        groups.setdefault(period_label(message.timestamp, reference), []).append(message)

    lines = [f"Found {total_found} messages matching your search (showing first {len(messages)}):", ""]
    for period, grouped in groups.items():
        lines.append(f"**{period}** ({len(grouped)} messages)")
        for message in grouped[:PREVIEWS_PER_GROUP]:
            lines.append(f'• {message.name}: "{_preview(message.content, 100)}"')
        if len(grouped) > PREVIEWS_PER_GROUP:
            lines.append(f"  ... and {len(grouped) - PREVIEWS_PER_GROUP} more")
        lines.append("")
    return "\n".join(lines).rstrip()


def conversation_ref(conversation_id: str) -> str:
    """Chat reference used in t.me/c links: supergroup ids lose their -100 prefix."""
    if conversation_id.startswith("-100"):
        return conversation_id[4:]
    return conversation_id.lstrip("-")


def build_deep_link(template: str, conversation_id: str, activity_id: str) -> str:
    """
    Build a link to one message.

    Args:
        template: Format string with {conversation_id}, {conversation_ref} and {activity_id}
        conversation_id: Conversation the message belongs to
        activity_id: External id of the message

    Returns:
        URL of the original message
    """
    return template.format(
        conversation_id=quote(conversation_id, safe=""),
        conversation_ref=quote(conversation_ref(conversation_id), safe=""),
        activity_id=quote(activity_id, safe=""),
    )


def build_citation(
    message: StoredMessage,
    position: int,
    template: str,
    timezone: str = "UTC",
) -> Citation:
    """
    Build a citation for one message.

    Raises:
        ValueError: If the message has no activity id to link to
    """
    if not message.activity_id:
        raise ValueError(f"Message {message.id} has no activity id")

    sender = message.name or "Unknown"
    title = f"Message from {sender}"
    try:
        date = parse_timestamp(message.timestamp).astimezone(get_zone(timezone)).strftime("%Y-%m-%d")
    except ValueError:
        date = message.timestamp
    return Citation(
        position=position,
        name=title if len(title) <= 80 else sender[:80],
        url=build_deep_link(template, message.conversation_id, message.activity_id),
        abstract=f'{date}: "{_preview(message.content, 120)}"',
        keywords=[sender],
    )


def build_citations(
    messages: List[StoredMessage],
    template: str,
    timezone: str = "UTC",
    start_position: int = 1,
) -> List[Citation]:
    """Citations for the first messages that can be linked, at most MAX_CITATIONS."""
    citations: List[Citation] = []
    for message in messages:
        if len(citations) >= MAX_CITATIONS:
            break
        try:
            citations.append(build_citation(message, start_position + len(citations), template, timezone))
        except ValueError as e:
            logger.debug(f"Skipping citation: {e}")
    return citations
