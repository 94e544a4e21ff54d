"""
Business logic for chat conversations.

Conversations live in ``conversations``; their messages in ``chat_messages``.
Sending a message stores it, asks the assistant backend for a reply with the
full history and the user's latest assessment, and stores the reply.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional
from shared.db_service import DbService, PREVIEW_LENGTH
from shared.permissions import ensure_owner
from shared.ai_client import AssistantClient
from assessments.model import Assessment

logger = logging.getLogger(__name__)

CONVERSATIONS_TABLE = "conversations"
MESSAGES_TABLE = "chat_messages"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class ConversationService:
    """Service class for conversation and chat message operations."""

    VALID_ROLES = ["user", "assistant"]

    def __init__(self, db: Optional[DbService] = None, ai_client: Optional[AssistantClient] = None):
        self.db = db or DbService()
        self._ai_client = ai_client

    @property
    def ai_client(self) -> AssistantClient:
        if self._ai_client is None:
            self._ai_client = AssistantClient()
        return self._ai_client

    async def _get_owned_conversation(self, user_id: str, conversation_id: str) -> Dict:
        conversation = await self.db.find_by_id(CONVERSATIONS_TABLE, conversation_id)
        return ensure_owner(user_id, conversation, "Conversation")

    async def _list_messages(self, conversation_id: str) -> List[Dict]:
        messages = await self.db.find_by(MESSAGES_TABLE, "conversation_id", conversation_id)
        return sorted(messages, key=lambda m: m.get("created_at") or "")

    async def _add_message(self, conversation_id: str, role: str, content: str) -> Dict:
        if role not in self.VALID_ROLES:
            raise ValueError(f"Role must be one of: {', '.join(self.VALID_ROLES)}")

        return await self.db.create(MESSAGES_TABLE, {
            "id": str(uuid.uuid4()),
            "conversation_id": conversation_id,
            "role": role,
            "content": content,
            "created_at": _now(),
        })

    async def list_conversations(self, user_id: str) -> List[Dict]:
        """
        List the user's conversations with a preview of the latest message.

        Returns:
            List of {"id", "last_message_date", "preview"}, most recent first
        """
        return await self.db.get_conversations_with_previews(user_id)

    async def get_conversation(self, user_id: str, conversation_id: str) -> Dict:
        """
        Get a conversation with its messages, oldest first.

        Raises:
            NotFoundError: If conversation doesn't exist
            ForbiddenError: If the user doesn't own it
        """
        conversation = await self._get_owned_conversation(user_id, conversation_id)
        conversation["messages"] = await self._list_messages(conversation_id)
        return conversation

    async def create_conversation(self, user_id: str, title: str) -> Dict:
        now = _now()
        conversation = await self.db.create(CONVERSATIONS_TABLE, {
            "id": str(uuid.uuid4()),
            "user_id": user_id,
            "title": title[:PREVIEW_LENGTH] or "New Conversation",
            "created_at": now,
            "updated_at": now,
        })
        logger.info(f"Created conversation {conversation['id']} for user {user_id}")
        return conversation

    async def send_message(
        self,
        user_id: str,
        message: str,
        conversation_id: Optional[str] = None
    ) -> Dict:
        """
        Send a user message and store the assistant's reply.

        Args:
            user_id: The authenticated user's ID
            message: Message text
            conversation_id: Existing conversation, or None to start one

        Returns:
            {"conversation_id": str, "message": assistant message record}

        Raises:
            NotFoundError: If conversation_id doesn't exist
            ForbiddenError: If the user doesn't own the conversation
            AIBackendError: If the assistant backend fails; nothing is stored
        """
        history = []
        if conversation_id:
            await self._get_owned_conversation(user_id, conversation_id)
            history = await self._list_messages(conversation_id)
        history.append({"role": "user", "content": message})

        assessments = await Assessment.list_by_user(user_id)
        latest_assessment = assessments[0]["assessment_data"] if assessments else None

        # Reply first so a failed call leaves no half-written conversation
        reply = await self.ai_client.generate_reply(history, latest_assessment)

        if not conversation_id:
            conversation = await self.create_conversation(user_id, message)
            conversation_id = conversation["id"]

        await self._add_message(conversation_id, "user", message)
        assistant_message = await self._add_message(conversation_id, "assistant", reply)

        await self.db.update(CONVERSATIONS_TABLE, conversation_id, {"updated_at": _now()})

        return {
            "conversation_id": conversation_id,
            "message": assistant_message,
        }

    async def delete_conversation(self, user_id: str, conversation_id: str) -> bool:
        """
        Delete a conversation and its messages (owner only).

        Raises:
            NotFoundError: If conversation doesn't exist
            ForbiddenError: If the user doesn't own it
        """
        await self._get_owned_conversation(user_id, conversation_id)

        await self.db.delete(MESSAGES_TABLE, {"conversation_id": conversation_id})
        return await self.db.delete(CONVERSATIONS_TABLE, conversation_id)
