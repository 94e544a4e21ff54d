"""
Chat endpoints.
"""

from types import SimpleNamespace
from typing import List, Optional
from .schemas import ChatResponse, Conversation, ConversationPreview
from .transport import api_get, api_post, api_delete


async def send_message(message: str, conversation_id: Optional[str] = None) -> ChatResponse:
    """Send a message; omit conversation_id to start a new conversation."""
    payload = {"message": message}
    if conversation_id:
        payload["conversation_id"] = conversation_id
    return await api_post("/chat/send", payload)


async def get_history() -> List[ConversationPreview]:
    result = await api_get("/chat/history")
    return (result or {}).get("conversations", [])


async def get_conversation(conversation_id: str) -> Conversation:
    return await api_get(f"/chat/history/{conversation_id}")


async def delete_conversation(conversation_id: str) -> bool:
    await api_delete(f"/chat/history/{conversation_id}")
    return True


# Object-style access kept for older callers
chat_api = SimpleNamespace(
    send_message=send_message,
    get_history=get_history,
    get_conversation=get_conversation,
    delete_conversation=delete_conversation,
)
