# Client wrappers for the Dottie API
from .schemas import (
    Assessment, AssessmentData, ChatMessage, ChatResponse,
    Conversation, ConversationPreview
)
from .transport import ApiError, configure
from .assessment import (
    get_list, get_by_id, send_assessment, update, delete_assessment, assessment_api
)
from .chat import (
    send_message, get_history, get_conversation, delete_conversation, chat_api
)

__all__ = [
    "Assessment",
    "AssessmentData",
    "ChatMessage",
    "ChatResponse",
    "Conversation",
    "ConversationPreview",
    "ApiError",
    "configure",
    "get_list",
    "get_by_id",
    "send_assessment",
    "update",
    "delete_assessment",
    "assessment_api",
    "send_message",
    "get_history",
    "get_conversation",
    "delete_conversation",
    "chat_api",
]
