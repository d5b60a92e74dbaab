"""Tests for markdown to Telegram HTML formatter."""

from collaborator.agent.types import Citation
from collaborator.telegram.client import format_citations
from collaborator.telegram.markdown_formatter import (
    markdown_to_telegram_html,
    split_message_for_telegram,
)


class TestMarkdownToTelegramHtml:
    """Tests for markdown_to_telegram_html function."""

    def test_empty_text(self):
        assert markdown_to_telegram_html("") == ""
        assert markdown_to_telegram_html(None) is None

    def test_plain_text_is_escaped(self):
        assert markdown_to_telegram_html("1 < 2 & 3 > 2") == "1 &lt; 2 &amp; 3 &gt; 2"

    def test_bold_italic_strike(self):
        assert markdown_to_telegram_html("**bold**") == "<b>bold</b>"
        assert markdown_to_telegram_html("__bold__") == "<b>bold</b>"
        assert markdown_to_telegram_html("an *italic* word") == "an <i>italic</i> word"
        assert markdown_to_telegram_html("~~gone~~") == "<s>gone</s>"

    def test_snake_case_is_not_italic(self):
        assert markdown_to_telegram_html("use get_recent_messages here") == "use get_recent_messages here"

    def test_headers_and_bullets(self):
        text = "## Summary\n- first\n* second"
        assert markdown_to_telegram_html(text) == "<b>Summary</b>\n• first\n• second"

    def test_links(self):
        assert markdown_to_telegram_html("[Message from Alice](https://t.me/c/123/45)") == (
            '<a href="https://t.me/c/123/45">Message from Alice</a>'
        )

    def test_inline_code_is_escaped_and_not_formatted(self):
        assert markdown_to_telegram_html("run `a < **b**`") == "run <code>a &lt; **b**</code>"

    def test_code_block(self):
        assert markdown_to_telegram_html("```\nx < y\n```") == "<pre>x &lt; y\n</pre>"


class TestSplitMessageForTelegram:
    """Tests for split_message_for_telegram function."""

    def test_short_message(self):
        assert split_message_for_telegram("hello") == ["hello"]
        assert split_message_for_telegram("") == [""]

    def test_prefers_newlines(self):
        text = "a" * 10 + "\n" + "b" * 10
        assert split_message_for_telegram(text, max_length=15) == ["a" * 10 + "\n", "b" * 10]

    def test_hard_split_without_separators(self):
        assert split_message_for_telegram("x" * 25, max_length=10) == ["x" * 10, "x" * 10, "x" * 5]

    def test_never_cuts_inside_a_tag(self):
        text = "a" * 12 + "<b>bold</b>"
        assert split_message_for_telegram(text, max_length=14) == ["a" * 12, "<b>bold</b>"]

    def test_chunks_rejoin_to_original(self):
        text = "Sentence one. " * 700
        chunks = split_message_for_telegram(text)
        assert all(len(chunk) <= 4096 for chunk in chunks)
        assert "".join(chunks) == text


def test_format_citations():
    citations = [
        Citation(position=1, name="Message from Alice", url="https://t.me/c/1/2", abstract='2025-01-15: "hi"'),
        Citation(position=2, name="Message from Bob", url="https://t.me/c/1/3", abstract='2025-01-14: "yo"'),
    ]
    assert format_citations(citations) == (
        "**Sources:**\n"
        '1. [Message from Alice](https://t.me/c/1/2) - 2025-01-15: "hi"\n'
        '2. [Message from Bob](https://t.me/c/1/3) - 2025-01-14: "yo"'
    )
