"""
Generic table-agnostic database helpers on top of the Supabase query builder.

Every helper wraps a single store call, logs the failing operation together
with the table name, and re-raises the original exception.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Union
from .supabase_client import get_supabase_client

logger = logging.getLogger(__name__)

# Number of characters of the latest message shown in conversation lists
PREVIEW_LENGTH = 50


class DbService:
    """Common CRUD operations for any table keyed by an ``id`` column."""

    def __init__(self, client=None):
        self.client = client or get_supabase_client()

    def table(self, table_name: str):
        """Get a table reference for queries."""
        return self.client.table(table_name)

    async def find_by_id(self, table: str, record_id: Any) -> Optional[Dict]:
        """
        Find a record by ID.

        Returns:
            The record, or None if no row matches
        """
        try:
            result = self.table(table) \
                .select("*") \
                .eq("id", record_id) \
                .limit(1) \
                .execute()

            return result.data[0] if result.data else None
        except Exception as e:
            logger.error(f"Error in find_by_id for {table}: {str(e)}")
            raise

    async def find_by(self, table: str, field: str, value: Any) -> List[Dict]:
        """Find all records whose ``field`` equals ``value``."""
        try:
            result = self.table(table) \
                .select("*") \
                .eq(field, value) \
                .execute()

            return result.data or []
        except Exception as e:
            logger.error(f"Error in find_by for {table}: {str(e)}")
            raise

    async def create(self, table: str, data: Dict) -> Optional[Dict]:
        """
        Insert a record and return it as stored.

        The row is re-read after insertion so defaults filled in by the
        database (timestamps, generated ids) are included.
        """
        try:
            result = self.table(table) \
                .insert(data) \
                .execute()

            record_id = data.get("id")
            if record_id is None and result.data:
                record_id = result.data[0].get("id")

            return await self.find_by_id(table, record_id)
        except Exception as e:
            logger.error(f"Error in create for {table}: {str(e)}")
            raise

    async def update(self, table: str, record_id: Any, data: Dict) -> Optional[Dict]:
        """
        Update a record and return its new state.

        Returns None when no row has the given ID.
        """
        try:
            self.table(table) \
                .update(data) \
                .eq("id", record_id) \
                .execute()

            return await self.find_by_id(table, record_id)
        except Exception as e:
            logger.error(f"Error in update for {table}: {str(e)}")
            raise

    async def delete(self, table: str, option: Union[Any, Dict[str, Any]]) -> bool:
        """
        Delete record(s) from a table.

        Args:
            table: Table name
            option: Record ID, or a mapping of column -> value conditions

        Returns:
            True if at least one row was deleted
        """
        try:
            query = self.table(table).delete()

            if isinstance(option, dict):
                for key, value in option.items():
                    query = query.eq(key, value)
            else:
                query = query.eq("id", option)

            result = query.execute()
            return len(result.data or []) > 0
        except Exception as e:
            logger.error(f"Error deleting from {table}: {str(e)}")
            raise

    async def get_all(self, table: str) -> List[Dict]:
        """Get all records from a table."""
        try:
            result = self.table(table).select("*").execute()
            return result.data or []
        except Exception as e:
            logger.error(f"Error in get_all for {table}: {str(e)}")
            raise

    def _latest_message(self, conversation_id: Any) -> Optional[Dict]:
        result = self.table("chat_messages") \
            .select("*") \
            .eq("conversation_id", conversation_id) \
            .order("created_at", desc=True) \
            .limit(1) \
            .execute()

        return result.data[0] if result.data else None

    async def get_conversations_with_previews(self, user_id: str) -> List[Dict]:
        """
        Get a user's conversations with a preview of their latest message.

        Latest messages are fetched concurrently; the result keeps the
        conversation order (most recently updated first).

        Returns:
            List of {"id", "last_message_date", "preview"}
        """
        try:
            result = self.table("conversations") \
                .select("*") \
                .eq("user_id", user_id) \
                .order("updated_at", desc=True) \
                .execute()

            conversations = result.data or []

            latest_messages = await asyncio.gather(*[
                asyncio.to_thread(self._latest_message, conv["id"])
                for conv in conversations
            ])

            return [
                {
                    "id": conv["id"],
                    "last_message_date": conv.get("updated_at"),
                    "preview": (message.get("content") or "")[:PREVIEW_LENGTH] if message else "",
                }
                for conv, message in zip(conversations, latest_messages)
            ]
        except Exception as e:
            logger.error(f"Error in get_conversations_with_previews: {str(e)}")
            raise
