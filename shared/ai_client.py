"""
Assistant backend client for Dottie chat replies.

The assistant backend owns the language model; this service only forwards
the conversation history (and optionally the user's latest assessment) and
stores whatever reply comes back.
"""

import os
import json
import asyncio
import logging
import aiohttp
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT_SECONDS = 60


class AIBackendError(Exception):
    """Raised when the assistant backend fails to produce a reply."""
    pass


def get_ai_backend_url() -> str:
    """Get the assistant backend URL from environment variables."""
    url = os.environ.get("AI_BACKEND_URL")
    if not url:
        raise ValueError("AI_BACKEND_URL environment variable not set")
    return url.rstrip('/')


class AssistantClient:
    """
    HTTP client for the assistant backend.

    All methods are async for non-blocking operation.
    """

    def __init__(self, base_url: Optional[str] = None):
        self.base_url = (base_url or get_ai_backend_url()).rstrip('/')

    async def generate_reply(
        self,
        messages: List[Dict],
        assessment: Optional[Dict] = None
    ) -> str:
        """
        Generate the assistant's next message.

        Calls the assistant backend's /api/chat endpoint.

        Args:
            messages: Conversation history, oldest first, as {"role", "content"}
            assessment: Latest assessment payload for context, if any

        Returns:
            The reply text

        Raises:
            AIBackendError: If the backend is unreachable, answers with a
                non-200 status, or returns a body that is not a JSON object
        """
        url = f"{self.base_url}/api/chat"

        payload = {
            "messages": [
                {"role": m["role"], "content": m["content"]}
                for m in messages
            ],
            "assessment": assessment,
        }

        logger.info(f"Requesting assistant reply ({len(messages)} messages of history)")

        try:
            async with aiohttp.ClientSession() as session:
                timeout = aiohttp.ClientTimeout(total=REQUEST_TIMEOUT_SECONDS)

                async with session.post(url, json=payload, timeout=timeout) as response:
                    if response.status != 200:
                        error_msg = _error_message(await response.text())
                        logger.error(f"Reply generation failed ({response.status}): {error_msg}")
                        raise AIBackendError(f"Reply generation failed: {error_msg}")

                    try:
                        result = await response.json(content_type=None)
                    except ValueError:
                        raise AIBackendError("Assistant backend returned invalid JSON")

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Assistant backend unreachable: {str(e)}")
            raise AIBackendError(f"Assistant backend unreachable: {str(e)}")

        if not isinstance(result, dict):
            raise AIBackendError("Assistant backend returned an unexpected payload")
        return result.get("reply", "")


def _error_message(body: str) -> str:
    """Pull "error" out of a JSON error body, else return the raw text."""
    try:
        parsed = json.loads(body)
    except ValueError:
        return body.strip() or "Unknown error"
    if isinstance(parsed, dict) and parsed.get("error"):
        return str(parsed["error"])
    return body.strip() or "Unknown error"
