"""Markdown to the HTML subset Telegram renders."""

import html
import re
from typing import List

TELEGRAM_MESSAGE_LIMIT = 4096

_FENCE = re.compile(r"```(\w*)\n?(.*?)```", re.DOTALL)
_INLINE_CODE = re.compile(r"`([^`]+)`")
_SLOT = re.compile(r"\x00(\d+)\x00")

_INLINE_RULES = [
    (re.compile(r"^#{1,6}\s+(.+)$", re.MULTILINE), r"<b>\1</b>"),
    (re.compile(r"^[\-\*]\s+", re.MULTILINE), "• "),
    (re.compile(r"\*\*(.+?)\*\*"), r"<b>\1</b>"),
    (re.compile(r"__(.+?)__"), r"<b>\1</b>"),
    (re.compile(r"(?<!\w)\*([^*\n]+?)\*(?!\w)"), r"<i>\1</i>"),
    (re.compile(r"(?<!\w)_([^_\n]+?)_(?!\w)"), r"<i>\1</i>"),
    (re.compile(r"~~(.+?)~~"), r"<s>\1</s>"),
    (re.compile(r"\[([^\]]+)\]\(([^)\s]+)\)"), r'<a href="\2">\1</a>'),
]


def markdown_to_telegram_html(text: str) -> str:
    """
    Convert model markdown to Telegram HTML.

    Headers become bold and bullets become "•"; code is escaped and
    left unformatted. Everything else is HTML-escaped.

    Args:
        text: Markdown text

    Returns:
        Text for parse_mode="HTML"
    """
    if not text:
        return text

    protected: List[str] = []

    def protect(rendered: str) -> str:
        protected.append(rendered)
        return f"\x00{len(protected) - 1}\x00"

    text = _FENCE.sub(lambda m: protect(f"<pre>{html.escape(m.group(2))}</pre>"), text)
    text = _INLINE_CODE.sub(lambda m: protect(f"<code>{html.escape(m.group(1))}</code>"), text)
    text = html.escape(text, quote=False)

    for pattern, replacement in _INLINE_RULES:
        text = pattern.sub(replacement, text)

    return _SLOT.sub(lambda m: protected[int(m.group(1))], text)


def split_message_for_telegram(text: str, max_length: int = TELEGRAM_MESSAGE_LIMIT) -> List[str]:
    """
    Split text into chunks Telegram accepts.

    Prefers newline, then sentence, then word boundaries in the second
    half of a chunk, and never cuts inside an HTML tag.

    Args:
        text: Text to split
        max_length: Chunk size limit

    Returns:
        Non-empty chunks in order
    """
    chunks: List[str] = []
    remaining = text
    while len(remaining) > max_length:
        split_at = _split_point(remaining, max_length)
        chunks.append(remaining[:split_at])
        remaining = remaining[split_at:]
    if remaining or not chunks:
        chunks.append(remaining)
    return chunks


def _split_point(text: str, max_length: int) -> int:
    half = max_length // 2
    split_at = max_length
    for separator in ("\n", ". ", "! ", "? ", " "):
        position = text.rfind(separator, 0, max_length)
        if position > half:
            split_at = position + len(separator)
            break

    tag_start = text.rfind("<", 0, split_at)
    if tag_start > 0 and text.find(">", tag_start, split_at) == -1:
        split_at = tag_start
    return split_at
