"""
HTTP route handlers for assessment endpoints.
"""

import logging
import azure.functions as func
from shared.auth import get_user_from_token, UnauthorizedError
from shared.responses import (
    success_response, created_response, no_content_response,
    error_response, not_found_response, forbidden_response, unauthorized_response,
    validation_error_response
)
from shared.permissions import NotFoundError, ForbiddenError
from .service import AssessmentService

logger = logging.getLogger(__name__)


def _parse_assessment_body(req: func.HttpRequest):
    """Return (assessment_data, error_response)."""
    try:
        body = req.get_json()
    except ValueError:
        return None, error_response("Invalid JSON body", 400)

    assessment_data = body.get("assessment_data") if isinstance(body, dict) else None
    if not isinstance(assessment_data, dict):
        return None, validation_error_response(
            [{"field": "assessment_data", "message": "Assessment data is required"}]
        )

    return assessment_data, None


async def list_assessments(req: func.HttpRequest) -> func.HttpResponse:
    """
    GET /api/assessment/list
    List the caller's assessments.
    """
    try:
        user = get_user_from_token(req)

        service = AssessmentService()
        assessments = await service.list_assessments(user["id"])

        return success_response(assessments)

    except UnauthorizedError as e:
        return unauthorized_response(str(e))
    except Exception as e:
        logger.error(f"Error listing assessments: {str(e)}")
        return error_response("Failed to list assessments", 500)


async def get_assessment(req: func.HttpRequest) -> func.HttpResponse:
    """
    GET /api/assessment/{assessment_id}
    """
    try:
        user = get_user_from_token(req)
        assessment_id = req.route_params.get("assessment_id")

        if not assessment_id:
            return error_response("Assessment ID is required", 400)

        service = AssessmentService()
        assessment = await service.get_assessment(user["id"], assessment_id)

        return success_response(assessment)

    except UnauthorizedError as e:
        return unauthorized_response(str(e))
    except NotFoundError as e:
        return not_found_response("Assessment", str(e))
    except ForbiddenError as e:
        return forbidden_response(str(e))
    except Exception as e:
        logger.error(f"Error getting assessment: {str(e)}")
        return error_response("Failed to get assessment", 500)


async def send_assessment(req: func.HttpRequest) -> func.HttpResponse:
    """
    POST /api/assessment/send
    Store a completed questionnaire.
    """
    try:
        user = get_user_from_token(req)

        assessment_data, error = _parse_assessment_body(req)
        if error:
            return error

        service = AssessmentService()
        assessment = await service.create_assessment(user["id"], assessment_data)

        return created_response(assessment)

    except UnauthorizedError as e:
        return unauthorized_response(str(e))
    except Exception as e:
        logger.error(f"Error creating assessment: {str(e)}")
        return error_response("Failed to create assessment", 500)


async def update_assessment(req: func.HttpRequest) -> func.HttpResponse:
    """
    PUT /api/assessment/{assessment_id}
    Replace the assessment payload (owner only).
    """
    try:
        user = get_user_from_token(req)
        assessment_id = req.route_params.get("assessment_id")

        if not assessment_id:
            return error_response("Assessment ID is required", 400)

        assessment_data, error = _parse_assessment_body(req)
        if error:
            return error

        service = AssessmentService()
        assessment = await service.update_assessment(user["id"], assessment_id, assessment_data)

        return success_response(assessment)

    except UnauthorizedError as e:
        return unauthorized_response(str(e))
    except NotFoundError as e:
        return not_found_response("Assessment", str(e))
    except ForbiddenError as e:
        return forbidden_response(str(e))
    except Exception as e:
        logger.error(f"Error updating assessment: {str(e)}")
        return error_response("Failed to update assessment", 500)


async def delete_assessment(req: func.HttpRequest) -> func.HttpResponse:
    """
    DELETE /api/assessment/{assessment_id}
    """
    try:
        user = get_user_from_token(req)
        assessment_id = req.route_params.get("assessment_id")

        if not assessment_id:
            return error_response("Assessment ID is required", 400)

        service = AssessmentService()
        await service.delete_assessment(user["id"], assessment_id)

        return no_content_response()

    except UnauthorizedError as e:
        return unauthorized_response(str(e))
    except NotFoundError as e:
        return not_found_response("Assessment", str(e))
    except ForbiddenError as e:
        return forbidden_response(str(e))
    except Exception as e:
        logger.error(f"Error deleting assessment: {str(e)}")
        return error_response("Failed to delete assessment", 500)


def register_assessment_routes(app: func.FunctionApp):
    """Register all assessment routes with the function app."""
    anonymous = func.AuthLevel.ANONYMOUS

    app.route(route="assessment/list", methods=["GET"], auth_level=anonymous)(list_assessments)
    app.route(route="assessment/send", methods=["POST"], auth_level=anonymous)(send_assessment)
    app.route(route="assessment/{assessment_id}", methods=["GET"], auth_level=anonymous)(get_assessment)
    app.route(route="assessment/{assessment_id}", methods=["PUT"], auth_level=anonymous)(update_assessment)
    app.route(route="assessment/{assessment_id}", methods=["DELETE"], auth_level=anonymous)(delete_assessment)
