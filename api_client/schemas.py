"""
Response shapes returned by the Dottie API.
"""

from typing import Dict, List, Optional, TypedDict


class AssessmentData(TypedDict, total=False):
    age: str
    cycle_length: str
    period_duration: str
    flow_heaviness: str
    pain_level: str
    symptoms: Dict[str, List[str]]


class Assessment(TypedDict):
    id: str
    user_id: str
    assessment_data: AssessmentData
    created_at: str
    updated_at: str


class ChatMessage(TypedDict):
    id: str
    conversation_id: str
    role: str
    content: str
    created_at: str


class Conversation(TypedDict, total=False):
    id: str
    user_id: str
    title: Optional[str]
    created_at: str
    updated_at: str
    messages: List[ChatMessage]


class ConversationPreview(TypedDict):
    id: str
    last_message_date: Optional[str]
    preview: str


class ChatResponse(TypedDict):
    conversation_id: str
    message: ChatMessage
