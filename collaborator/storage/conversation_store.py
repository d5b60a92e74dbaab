"""SQLite-backed store for messages, action items and feedback."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional

import aiosqlite

from ..utils.timestamps import TimestampLike, format_timestamp, normalize_timestamp, utc_now
from .models import (
    ACTION_ITEM_PRIORITIES,
    ACTION_ITEM_STATUSES,
    REACTIONS,
    ActionItem,
    FeedbackRecord,
    StoredMessage,
)

logger = logging.getLogger(__name__)

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS messages (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        conversation_id TEXT NOT NULL,
        role TEXT NOT NULL,
        content TEXT NOT NULL,
        name TEXT NOT NULL DEFAULT 'Unknown',
        timestamp TEXT NOT NULL,
        activity_id TEXT
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_messages_conversation_timestamp ON messages(conversation_id, timestamp)",
    "CREATE INDEX IF NOT EXISTS idx_messages_activity_id ON messages(activity_id)",
    """
    CREATE TABLE IF NOT EXISTS action_items (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        conversation_id TEXT NOT NULL,
        title TEXT NOT NULL,
        description TEXT NOT NULL,
        assigned_to TEXT NOT NULL,
        assigned_to_id TEXT,
        assigned_by TEXT NOT NULL,
        assigned_by_id TEXT,
        status TEXT NOT NULL DEFAULT 'pending',
        priority TEXT NOT NULL DEFAULT 'medium',
        due_date TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL,
        source_message_ids TEXT
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_action_items_conversation ON action_items(conversation_id)",
    "CREATE INDEX IF NOT EXISTS idx_action_items_assignee_id ON action_items(assigned_to_id)",
    """
    CREATE TABLE IF NOT EXISTS feedback (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        message_id TEXT NOT NULL UNIQUE,
        likes INTEGER NOT NULL DEFAULT 0,
        dislikes INTEGER NOT NULL DEFAULT 0,
        feedbacks TEXT NOT NULL DEFAULT '[]',
        delegated_capability TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
)

_MESSAGE_COLUMNS = "id, conversation_id, role, content, name, timestamp, activity_id"


class ConversationStore:
    """Durable storage for the assistant.

    Timestamps are normalized to the canonical UTC format on every write
    and on every query bound, so range queries compare like with like.
    """

    def __init__(
        self,
        db_path: str = "data/collaborator.db",
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize the store.

        Args:
            db_path: Path to the SQLite database file
            clock: Returns the current time; used for created/updated stamps
        """
        self.db_path = db_path
        self._clock = clock or utc_now
        self._initialized = False

    def _now(self) -> str:
        return format_timestamp(self._clock())

    async def initialize(self) -> None:
        """Create tables and indexes. Safe to call repeatedly."""
        if self._initialized:
            return

        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        async with aiosqlite.connect(self.db_path) as db:
            for statement in _SCHEMA:
                await db.execute(statement)
            await db.commit()

        self._initialized = True
        logger.debug(f"Conversation store ready at {self.db_path}")

    async def _fetch_all(self, query: str, params: Iterable[Any] = ()) -> List[aiosqlite.Row]:
        await self.initialize()
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            async with db.execute(query, tuple(params)) as cursor:
                return list(await cursor.fetchall())

    async def _fetch_one(self, query: str, params: Iterable[Any] = ()) -> Optional[aiosqlite.Row]:
        rows = await self._fetch_all(query, params)
        return rows[0] if rows else None

    async def _execute(self, query: str, params: Iterable[Any] = ()) -> int:
        """Run a write statement and return the affected row count."""
        await self.initialize()
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(query, tuple(params))
            await db.commit()
            return cursor.rowcount

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    async def insert_message(
        self,
        conversation_id: str,
        role: str,
        content: str,
        timestamp: Optional[TimestampLike] = None,
        name: Optional[str] = None,
        activity_id: Optional[str] = None,
    ) -> Optional[int]:
        """
        Persist a single message.

        Args:
            conversation_id: Conversation the message belongs to
            role: "user", "assistant" or "model"
            content: Message text
            timestamp: When the message was sent (defaults to now)
            name: Sender display name
            activity_id: External message id, used for deep links

        Returns:
            The new row id, or None if the write failed
        """
        stamp = normalize_timestamp(timestamp) if timestamp else self._now()
        try:
            await self.initialize()
            async with aiosqlite.connect(self.db_path) as db:
                cursor = await db.execute(
                    """
                    INSERT INTO messages (conversation_id, role, content, name, timestamp, activity_id)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (conversation_id, role, content, name or "Unknown", stamp, activity_id),
                )
                await db.commit()
                return cursor.lastrowid
        except aiosqlite.Error as e:
            logger.error(f"Failed to store message in {conversation_id}: {e}", exc_info=True)
            return None

    async def insert_messages(self, conversation_id: str, messages: List[Any]) -> int:
        """
        Persist a batch of tracked messages in one transaction.

        Args:
            conversation_id: Conversation the messages belong to
            messages: Objects exposing role, content, name, timestamp and activity_id

        Returns:
            Number of messages written, 0 if the write failed
        """
        if not messages:
            return 0

        rows = [
            (
                conversation_id,
                message.role,
                message.content,
                message.name or "Unknown",
                normalize_timestamp(message.timestamp) if message.timestamp else self._now(),
                message.activity_id,
            )
            for message in messages
        ]
        try:
            await self.initialize()
            async with aiosqlite.connect(self.db_path) as db:
                await db.executemany(
                    """
                    INSERT INTO messages (conversation_id, role, content, name, timestamp, activity_id)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    rows,
                )
                await db.commit()
        except aiosqlite.Error as e:
            logger.error(f"Failed to store {len(rows)} messages in {conversation_id}: {e}", exc_info=True)
            return 0
        return len(rows)

    async def get_messages_by_time_range(
        self,
        conversation_id: str,
        start: Optional[TimestampLike] = None,
        end: Optional[TimestampLike] = None,
    ) -> List[StoredMessage]:
        """
        Get messages within an inclusive time range, oldest first.

        Args:
            conversation_id: Conversation to read
            start: Lower bound, or None for unbounded
            end: Upper bound, or None for unbounded

        Returns:
            Matching messages; empty on any storage error
        """
        query = f"SELECT {_MESSAGE_COLUMNS} FROM messages WHERE conversation_id = ?"
        params: List[Any] = [conversation_id]
        try:
            if start:
                query += " AND timestamp >= ?"
                params.append(normalize_timestamp(start))
            if end:
                query += " AND timestamp <= ?"
                params.append(normalize_timestamp(end))
        except ValueError as e:
            logger.warning(f"Invalid time bound for {conversation_id}: {e}")
            return []
        query += " ORDER BY timestamp ASC, id ASC"

        try:
            rows = await self._fetch_all(query, params)
        except aiosqlite.Error as e:
            logger.error(f"Failed to read messages for {conversation_id}: {e}", exc_info=True)
            return []
        return [StoredMessage.from_row(row) for row in rows]

    async def get_all_messages(self, conversation_id: str) -> List[StoredMessage]:
        """Get every stored message of a conversation, oldest first."""
        return await self.get_messages_by_time_range(conversation_id)

    async def get_recent_messages(self, conversation_id: str, limit: int = 10) -> List[StoredMessage]:
        """
        Get the most recently inserted messages of a conversation.

        Args:
            conversation_id: Conversation to read
            limit: Maximum number of messages

        Returns:
            Up to limit messages, oldest first
        """
        try:
            rows = await self._fetch_all(
                f"SELECT {_MESSAGE_COLUMNS} FROM messages WHERE conversation_id = ? ORDER BY id DESC LIMIT ?",
                (conversation_id, limit),
            )
        except aiosqlite.Error as e:
            logger.error(f"Failed to read recent messages for {conversation_id}: {e}", exc_info=True)
            return []
        return [StoredMessage.from_row(row) for row in reversed(rows)]

    async def clear_conversation(self, conversation_id: str) -> int:
        """Delete all messages of a conversation. Action items are kept."""
        try:
            deleted = await self._execute("DELETE FROM messages WHERE conversation_id = ?", (conversation_id,))
        except aiosqlite.Error as e:
            logger.error(f"Failed to clear conversation {conversation_id}: {e}", exc_info=True)
            return 0
        logger.info(f"Cleared {deleted} messages from conversation {conversation_id}")
        return deleted

    async def debug_snapshot(self, conversation_id: str) -> Dict[str, Any]:
        """
        Collect database statistics for one conversation.

        Returns:
            Dictionary with totals, activity id coverage and the last five messages
        """
        try:
            totals = await self._fetch_one(
                """
                SELECT COUNT(*) AS total,
                       SUM(CASE WHEN activity_id IS NOT NULL AND activity_id != '' THEN 1 ELSE 0 END) AS with_activity
                FROM messages WHERE conversation_id = ?
                """,
                (conversation_id,),
            )
            overall = await self._fetch_one(
                "SELECT COUNT(*) AS total, COUNT(DISTINCT conversation_id) AS conversations FROM messages"
            )
            recent = await self.get_recent_messages(conversation_id, limit=5)
        except aiosqlite.Error as e:
            logger.error(f"Failed to collect debug snapshot: {e}", exc_info=True)
            return {"error": str(e)}

        total = totals["total"] or 0
        with_activity = totals["with_activity"] or 0
        return {
            "conversation_id": conversation_id,
            "total_messages": total,
            "messages_with_activity_id": with_activity,
            "activity_id_coverage": round(with_activity / total * 100, 1) if total else 0.0,
            "all_messages": overall["total"] or 0,
            "conversation_count": overall["conversations"] or 0,
            "recent_messages": recent,
        }

    # ------------------------------------------------------------------
    # Action items
    # ------------------------------------------------------------------

    async def create_action_item(
        self,
        conversation_id: str,
        title: str,
        description: str,
        assigned_to: str,
        assigned_by: str,
        priority: str = "medium",
        status: str = "pending",
        due_date: Optional[str] = None,
        assigned_to_id: Optional[str] = None,
        assigned_by_id: Optional[str] = None,
        source_message_ids: Optional[List[int]] = None,
    ) -> ActionItem:
        """
        Create an action item.

        Returns:
            The stored action item

        Raises:
            ValueError: If status or priority is not a known value
        """
        if status not in ACTION_ITEM_STATUSES:
            raise ValueError(f"Invalid status: {status}")
        if priority not in ACTION_ITEM_PRIORITIES:
            raise ValueError(f"Invalid priority: {priority}")

        await self.initialize()
        now = self._now()
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                """
                INSERT INTO action_items (
                    conversation_id, title, description, assigned_to, assigned_to_id,
                    assigned_by, assigned_by_id, status, priority, due_date,
                    created_at, updated_at, source_message_ids
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    conversation_id, title, description, assigned_to, assigned_to_id,
                    assigned_by, assigned_by_id, status, priority, due_date,
                    now, now, json.dumps(source_message_ids or []),
                ),
            )
            await db.commit()
            item_id = cursor.lastrowid

        logger.info(f"Created action item {item_id} '{title}' for {assigned_to}")
        return ActionItem(
            id=item_id,
            conversation_id=conversation_id,
            title=title,
            description=description,
            assigned_to=assigned_to,
            assigned_to_id=assigned_to_id,
            assigned_by=assigned_by,
            assigned_by_id=assigned_by_id,
            status=status,
            priority=priority,
            due_date=due_date,
            created_at=now,
            updated_at=now,
            source_message_ids=source_message_ids or [],
        )

    async def _query_action_items(self, where: str, params: Iterable[Any]) -> List[ActionItem]:
        try:
            rows = await self._fetch_all(
                f"SELECT * FROM action_items {where} ORDER BY created_at DESC, id DESC", params
            )
        except aiosqlite.Error as e:
            logger.error(f"Failed to read action items: {e}", exc_info=True)
            return []
        return [ActionItem.from_row(row) for row in rows]

    async def get_action_items_by_conversation(self, conversation_id: str) -> List[ActionItem]:
        """Get the action items of one conversation, newest first."""
        return await self._query_action_items("WHERE conversation_id = ?", (conversation_id,))

    async def get_action_items_for_user(self, assignee: str, status: Optional[str] = None) -> List[ActionItem]:
        """
        Get action items assigned to a user, matched by name or id.

        Args:
            assignee: Display name or user id
            status: Optional status filter
        """
        where = "WHERE (assigned_to = ? OR assigned_to_id = ?)"
        params: List[Any] = [assignee, assignee]
        if status:
            where += " AND status = ?"
            params.append(status)
        return await self._query_action_items(where, params)

    async def get_action_items_by_user_id(self, user_id: str, status: Optional[str] = None) -> List[ActionItem]:
        """Get action items assigned to a user id across all conversations."""
        where = "WHERE assigned_to_id = ?"
        params: List[Any] = [user_id]
        if status:
            where += " AND status = ?"
            params.append(status)
        return await self._query_action_items(where, params)

    async def get_action_item_by_id(self, item_id: int) -> Optional[ActionItem]:
        items = await self._query_action_items("WHERE id = ?", (item_id,))
        return items[0] if items else None

    async def get_all_action_items(self) -> List[ActionItem]:
        return await self._query_action_items("", ())

    async def update_action_item_status(
        self,
        item_id: int,
        new_status: str,
        updated_by: Optional[str] = None,
    ) -> bool:
        """
        Change the status of an existing action item.

        Args:
            item_id: Action item id
            new_status: One of pending, in_progress, completed, cancelled
            updated_by: Who made the change, for the log

        Returns:
            True if a row was updated, False if the id is unknown or the update failed
        """
        if new_status not in ACTION_ITEM_STATUSES:
            logger.warning(f"Rejected unknown action item status '{new_status}'")
            return False
        try:
            updated = await self._execute(
                "UPDATE action_items SET status = ?, updated_at = ? WHERE id = ?",
                (new_status, self._now(), item_id),
            )
        except aiosqlite.Error as e:
            logger.error(f"Failed to update action item {item_id}: {e}", exc_info=True)
            return False

        if updated:
            logger.info(f"Action item {item_id} set to {new_status} by {updated_by or 'unknown'}")
        return updated > 0

    async def clear_action_items(self, conversation_id: str) -> int:
        """Delete the action items of one conversation. Returns 0 if the delete failed."""
        try:
            return await self._execute("DELETE FROM action_items WHERE conversation_id = ?", (conversation_id,))
        except aiosqlite.Error as e:
            logger.error(f"Failed to clear action items of {conversation_id}: {e}", exc_info=True)
            return 0

    async def clear_all_action_items(self) -> int:
        """Delete every action item in every conversation."""
        try:
            deleted = await self._execute("DELETE FROM action_items")
        except aiosqlite.Error as e:
            logger.error(f"Failed to clear action items: {e}", exc_info=True)
            return 0
        logger.info(f"Cleared {deleted} action items from all conversations")
        return deleted

    async def get_action_items_summary(self) -> Dict[str, Any]:
        """Count action items overall, by status and by priority."""
        try:
            by_status = await self._fetch_all(
                "SELECT status, COUNT(*) AS count FROM action_items GROUP BY status"
            )
            by_priority = await self._fetch_all(
                "SELECT priority, COUNT(*) AS count FROM action_items GROUP BY priority"
            )
        except aiosqlite.Error as e:
            logger.error(f"Failed to summarize action items: {e}", exc_info=True)
            return {"total": 0, "by_status": {}, "by_priority": {}}

        status_counts = {row["status"]: row["count"] for row in by_status}
        return {
            "total": sum(status_counts.values()),
            "by_status": status_counts,
            "by_priority": {row["priority"]: row["count"] for row in by_priority},
        }

    # ------------------------------------------------------------------
    # Feedback
    # ------------------------------------------------------------------

    async def initialize_feedback_record(
        self,
        message_id: str,
        delegated_capability: Optional[str] = None,
    ) -> bool:
        """
        Create a zeroed feedback record unless one already exists.

        Returns:
            True if a record was created, False if it already existed or the write failed
        """
        now = self._now()
        try:
            created = await self._execute(
                """
                INSERT OR IGNORE INTO feedback (message_id, likes, dislikes, feedbacks, delegated_capability, created_at, updated_at)
                VALUES (?, 0, 0, '[]', ?, ?, ?)
                """,
                (message_id, delegated_capability, now, now),
            )
        except aiosqlite.Error as e:
            logger.error(f"Failed to initialize feedback for {message_id}: {e}", exc_info=True)
            return False
        return created > 0

    async def store_delegated_capability(self, message_id: str, capability: Optional[str]) -> bool:
        """
        Record which capability produced a sent message. Last write wins.

        Returns:
            False if the write failed
        """
        now = self._now()
        try:
            await self._execute(
                """
                INSERT INTO feedback (message_id, likes, dislikes, feedbacks, delegated_capability, created_at, updated_at)
                VALUES (?, 0, 0, '[]', ?, ?, ?)
                ON CONFLICT(message_id) DO UPDATE SET
                    delegated_capability = excluded.delegated_capability,
                    updated_at = excluded.updated_at
                """,
                (message_id, capability, now, now),
            )
        except aiosqlite.Error as e:
            logger.error(f"Failed to store delegated capability for {message_id}: {e}", exc_info=True)
            return False
        return True

    async def get_feedback_by_message_id(self, message_id: str) -> Optional[FeedbackRecord]:
        try:
            row = await self._fetch_one("SELECT * FROM feedback WHERE message_id = ?", (message_id,))
        except aiosqlite.Error as e:
            logger.error(f"Failed to read feedback for {message_id}: {e}", exc_info=True)
            return None
        return FeedbackRecord.from_row(row) if row else None

    async def update_feedback(
        self,
        message_id: str,
        reaction: str,
        feedback: Optional[Any] = None,
    ) -> bool:
        """
        Apply a reaction to an existing feedback record.

        The counter and the feedback list are updated in a single statement,
        so concurrent reactions on one message are all kept.

        Args:
            message_id: External id of the sent assistant message
            reaction: "like" or "dislike"
            feedback: Optional free-text entry appended to the record

        Returns:
            True if the record existed and was updated
        """
        if reaction not in REACTIONS:
            logger.warning(f"Ignoring unknown reaction '{reaction}'")
            return False

        counter = "likes" if reaction == "like" else "dislikes"
        try:
            if feedback:
                updated = await self._execute(
                    f"""
                    UPDATE feedback SET {counter} = {counter} + 1,
                        feedbacks = json_insert(COALESCE(feedbacks, '[]'), '$[#]', json(?)),
                        updated_at = ?
                    WHERE message_id = ?
                    """,
                    (json.dumps(feedback), self._now(), message_id),
                )
            else:
                updated = await self._execute(
                    f"UPDATE feedback SET {counter} = {counter} + 1, updated_at = ? WHERE message_id = ?",
                    (self._now(), message_id),
                )
        except aiosqlite.Error as e:
            logger.error(f"Failed to update feedback for {message_id}: {e}", exc_info=True)
            return False
        return updated > 0

    async def get_all_feedback(self) -> List[FeedbackRecord]:
        """All feedback records, newest first."""
        try:
            rows = await self._fetch_all("SELECT * FROM feedback ORDER BY created_at DESC, id DESC")
        except aiosqlite.Error as e:
            logger.error(f"Failed to read feedback: {e}", exc_info=True)
            return []
        return [FeedbackRecord.from_row(row) for row in rows]

    async def get_feedback_summary(self) -> Dict[str, Any]:
        """Aggregate like and dislike counts across all records."""
        try:
            row = await self._fetch_one(
                "SELECT COUNT(*) AS records, SUM(likes) AS likes, SUM(dislikes) AS dislikes FROM feedback"
            )
            by_capability = await self._fetch_all(
                """
                SELECT COALESCE(delegated_capability, 'direct') AS capability,
                       SUM(likes) AS likes, SUM(dislikes) AS dislikes
                FROM feedback GROUP BY COALESCE(delegated_capability, 'direct')
                """
            )
        except aiosqlite.Error as e:
            logger.error(f"Failed to summarize feedback: {e}", exc_info=True)
            row, by_capability = None, []

        likes = (row["likes"] or 0) if row else 0
        dislikes = (row["dislikes"] or 0) if row else 0
        reactions = likes + dislikes
        return {
            "total_feedback_records": (row["records"] or 0) if row else 0,
            "total_likes": likes,
            "total_dislikes": dislikes,
            "like_ratio": round(likes / reactions, 3) if reactions else 0.0,
            "by_capability": {
                entry["capability"]: {"likes": entry["likes"] or 0, "dislikes": entry["dislikes"] or 0}
                for entry in by_capability
            },
        }

    async def clear_all_feedback(self) -> int:
        """Delete every feedback record."""
        try:
            return await self._execute("DELETE FROM feedback")
        except aiosqlite.Error as e:
            logger.error(f"Failed to clear feedback: {e}", exc_info=True)
            return 0
