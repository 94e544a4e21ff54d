"""
HTTP route handlers for chat endpoints.
"""

import logging
import azure.functions as func
from shared.auth import get_user_from_token, UnauthorizedError
from shared.responses import (
    success_response, no_content_response, error_response,
    not_found_response, forbidden_response, unauthorized_response,
    validation_error_response
)
from shared.permissions import NotFoundError, ForbiddenError
from shared.ai_client import AIBackendError
from .service import ConversationService

logger = logging.getLogger(__name__)


async def send_message(req: func.HttpRequest) -> func.HttpResponse:
    """
    POST /api/chat/send
    Body: {"message": str, "conversation_id": str (optional)}
    """
    try:
        user = get_user_from_token(req)

        try:
            body = req.get_json()
        except ValueError:
            return error_response("Invalid JSON body", 400)

        if not isinstance(body, dict):
            body = {}

        message = body.get("message")
        if not isinstance(message, str) or not message.strip():
            return validation_error_response(
                [{"field": "message", "message": "Message is required"}]
            )

        service = ConversationService()
        result = await service.send_message(user["id"], message, body.get("conversation_id"))

        return success_response(result)

    except UnauthorizedError as e:
        return unauthorized_response(str(e))
    except NotFoundError as e:
        return not_found_response("Conversation", str(e))
    except ForbiddenError as e:
        return forbidden_response(str(e))
    except AIBackendError as e:
        logger.error(f"Assistant backend error: {str(e)}")
        return error_response("Failed to generate response", 502)
    except Exception as e:
        logger.error(f"Error sending message: {str(e)}")
        return error_response("Failed to send message", 500)


async def get_history(req: func.HttpRequest) -> func.HttpResponse:
    """
    GET /api/chat/history
    List conversations with latest-message previews.
    """
    try:
        user = get_user_from_token(req)

        service = ConversationService()
        conversations = await service.list_conversations(user["id"])

        return success_response({"conversations": conversations})

    except UnauthorizedError as e:
        return unauthorized_response(str(e))
    except Exception as e:
        logger.error(f"Error listing conversations: {str(e)}")
        return error_response("Failed to get chat history", 500)


async def get_conversation(req: func.HttpRequest) -> func.HttpResponse:
    """
    GET /api/chat/history/{conversation_id}
    """
    try:
        user = get_user_from_token(req)
        conversation_id = req.route_params.get("conversation_id")

        if not conversation_id:
            return error_response("Conversation ID is required", 400)

        service = ConversationService()
        conversation = await service.get_conversation(user["id"], conversation_id)

        return success_response(conversation)

    except UnauthorizedError as e:
        return unauthorized_response(str(e))
    except NotFoundError as e:
        return not_found_response("Conversation", str(e))
    except ForbiddenError as e:
        return forbidden_response(str(e))
    except Exception as e:
        logger.error(f"Error getting conversation: {str(e)}")
        return error_response("Failed to get conversation", 500)


async def delete_conversation(req: func.HttpRequest) -> func.HttpResponse:
    """
    DELETE /api/chat/history/{conversation_id}
    """
    try:
        user = get_user_from_token(req)
        conversation_id = req.route_params.get("conversation_id")

        if not conversation_id:
            return error_response("Conversation ID is required", 400)

        service = ConversationService()
        await service.delete_conversation(user["id"], conversation_id)

        return no_content_response()

    except UnauthorizedError as e:
        return unauthorized_response(str(e))
    except NotFoundError as e:
        return not_found_response("Conversation", str(e))
    except ForbiddenError as e:
        return forbidden_response(str(e))
    except Exception as e:
        logger.error(f"Error deleting conversation: {str(e)}")
        return error_response("Failed to delete conversation", 500)


def register_chat_routes(app: func.FunctionApp):
    """Register all chat routes with the function app."""
    anonymous = func.AuthLevel.ANONYMOUS

    app.route(route="chat/send", methods=["POST"], auth_level=anonymous)(send_message)
    app.route(route="chat/history", methods=["GET"], auth_level=anonymous)(get_history)
    app.route(route="chat/history/{conversation_id}", methods=["GET"], auth_level=anonymous)(get_conversation)
    app.route(route="chat/history/{conversation_id}", methods=["DELETE"], auth_level=anonymous)(delete_conversation)
