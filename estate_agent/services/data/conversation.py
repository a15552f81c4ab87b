"""
Conversation history store (PostgreSQL)
- messages are append-only within a session
- a session is deleted as a whole
"""
import logging
from typing import Any, Dict, Optional
from estate_agent.db.schema import MESSAGE_ROLES
from estate_agent.services.data.executor import execute_sql_safe, execute_write, to_jsonable

logger = logging.getLogger(__name__)


class ConversationStore:
    """Session-keyed conversation log"""

    def get(self, session_id: str) -> Optional[Dict[str, Any]]:
        """
        Load a conversation with its messages in insertion order.

        Returns:
            {
                "sessionId": "session_1700000000000",
                "clientId": None,
                "isActive": True,
                "createdAt": "...",
                "messages": [{"role": "user", "content": "...", "timestamp": "..."}]
            }
            or None when the session is unknown
        """
        conversations = execute_sql_safe(
            "SELECT session_id, client_id, is_active, created_at "
            "FROM conversations WHERE session_id = %(session_id)s",
            {"session_id": session_id},
        )
        if not conversations:
            return None

        messages = execute_sql_safe(
            "SELECT role, content, timestamp FROM conversation_messages "
            "WHERE session_id = %(session_id)s ORDER BY id ASC",
            {"session_id": session_id},
        )
        row = conversations[0]
        return {
            "sessionId": row["session_id"],
            "clientId": row["client_id"],
            "isActive": row["is_active"],
            "createdAt": to_jsonable(row["created_at"]),
            "messages": [
                {"role": m["role"], "content": m["content"], "timestamp": to_jsonable(m["timestamp"])}
                for m in messages
            ],
        }

    def append(self, session_id: str, role: str, content: str) -> None:
        """Add one message, creating the conversation on first use"""
        if role not in MESSAGE_ROLES:
            raise ValueError(f"Unsupported message role: {role}")
        if not content:
            raise ValueError("Message content is empty")

        execute_write(
            """
            WITH session AS (
                INSERT INTO conversations (session_id) VALUES (%(session_id)s)
                ON CONFLICT (session_id) DO NOTHING
            )
            INSERT INTO conversation_messages (session_id, role, content)
            VALUES (%(session_id)s, %(role)s, %(content)s)
            """,
            {"session_id": session_id, "role": role, "content": content},
        )

    def delete(self, session_id: str) -> bool:
        """Drop a conversation and all its messages; True if it existed"""
        rows = execute_write(
            "DELETE FROM conversations WHERE session_id = %(session_id)s RETURNING session_id",
            {"session_id": session_id},
            fetch=True,
        )
        deleted = bool(rows)
        logger.info("Conversation cleared: session=%s existed=%s", session_id, deleted)
        return deleted
