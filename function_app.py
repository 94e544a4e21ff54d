"""
Dottie Backend - Azure Functions Application

Python Azure Functions backend for the Dottie menstrual health tracker.
Serves assessment and chat endpoints, with Supabase as the database and
auth provider.
"""

import azure.functions as func
import datetime
import json
import logging
import os

from assessments.routes import register_assessment_routes
from conversations.routes import register_chat_routes

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SERVICE_NAME = "Dottie Backend"
SERVICE_VERSION = "1.0.0"

# Create the main Function App instance
app = func.FunctionApp(http_auth_level=func.AuthLevel.ANONYMOUS)


@app.route(route="health", methods=["GET"])
def health_check(req: func.HttpRequest) -> func.HttpResponse:
    """Health check endpoint to verify the Azure Function is running."""
    logger.info("Health check endpoint called.")

    health_status = {
        "status": "healthy",
        "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "environment": os.environ.get("AZURE_FUNCTIONS_ENVIRONMENT", "Development")
    }

    return func.HttpResponse(
        json.dumps(health_status),
        status_code=200,
        mimetype="application/json"
    )


register_assessment_routes(app)
register_chat_routes(app)
