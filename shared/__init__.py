# Shared utilities for the Dottie backend
from .auth import get_user_from_token, UnauthorizedError
from .supabase_client import get_supabase_client
from .database import get_engine, is_test_mode
from .db_service import DbService, PREVIEW_LENGTH
from .responses import success_response, error_response, created_response, no_content_response, not_found_response, forbidden_response, validation_error_response
from .permissions import ensure_owner, ForbiddenError, NotFoundError

__all__ = [
    "get_user_from_token",
    "UnauthorizedError",
    "get_supabase_client",
    "get_engine",
    "is_test_mode",
    "DbService",
    "PREVIEW_LENGTH",
    "success_response",
    "error_response",
    "created_response",
    "no_content_response",
    "not_found_response",
    "forbidden_response",
    "validation_error_response",
    "ensure_owner",
    "ForbiddenError",
    "NotFoundError",
]
