"""
JSON response helpers shared by every route group.
"""

import json
import datetime
import uuid
from typing import Any, Optional, Dict, List
import azure.functions as func


def _default_serializer(o):
    if isinstance(o, (datetime.datetime, datetime.date)):
        return o.isoformat()
    if isinstance(o, uuid.UUID):
        return str(o)
    raise TypeError(f"Object of type {type(o).__name__} is not JSON serializable")


def json_serialize(obj: Any) -> str:
    """Serialize to JSON, handling datetime and UUID values."""
    return json.dumps(obj, default=_default_serializer)


def success_response(data: Any, status_code: int = 200) -> func.HttpResponse:
    """
    Create a JSON response.

    Args:
        data: Response data to serialize
        status_code: HTTP status code (default: 200)
    """
    return func.HttpResponse(
        json_serialize(data),
        status_code=status_code,
        mimetype="application/json"
    )


def created_response(data: Any) -> func.HttpResponse:
    """Create a 201 Created response."""
    return success_response(data, status_code=201)


def no_content_response() -> func.HttpResponse:
    """Create a 204 No Content response."""
    return func.HttpResponse(status_code=204)


def error_response(
    message: str,
    status_code: int = 400,
    errors: Optional[List[Dict]] = None
) -> func.HttpResponse:
    """
    Create an error envelope: {"error": true, "message": ..., "errors": [...]}.
    """
    error_body = {
        "error": True,
        "message": message,
    }

    if errors:
        error_body["errors"] = errors

    return func.HttpResponse(
        json_serialize(error_body),
        status_code=status_code,
        mimetype="application/json"
    )


def not_found_response(resource: str = "Resource", message: Optional[str] = None) -> func.HttpResponse:
    return error_response(message or f"{resource} not found", status_code=404)


def forbidden_response(
    message: str = "You don't have permission to access this resource"
) -> func.HttpResponse:
    return error_response(message, status_code=403)


def unauthorized_response(message: str = "Authentication required") -> func.HttpResponse:
    return error_response(message, status_code=401)


def validation_error_response(
    errors: List[Dict[str, Any]],
    message: str = "Validation failed"
) -> func.HttpResponse:
    """Create a 422 response listing field errors."""
    return error_response(message, status_code=422, errors=errors)
