"""
Generic request helpers used by the API wrapper modules.
"""

import os
import logging
from typing import Any, Dict, Optional
import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:7071"
REQUEST_TIMEOUT_SECONDS = 30.0

_settings: Dict[str, Any] = {
    "base_url": None,
    "token": None,
    "transport": None,
}


class ApiError(Exception):
    """Raised for non-2xx responses."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


def configure(
    base_url: Optional[str] = None,
    token: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> None:
    """
    Override connection settings.

    Unset values fall back to API_BASE_URL / API_TOKEN from the environment.
    """
    _settings.update(base_url=base_url, token=token, transport=transport)


def get_base_url() -> str:
    base_url = _settings["base_url"] or os.environ.get("API_BASE_URL", DEFAULT_BASE_URL)
    return f"{base_url.rstrip('/')}/api"


def get_token() -> Optional[str]:
    return _settings["token"] or os.environ.get("API_TOKEN")


def _build_client() -> httpx.AsyncClient:
    headers = {"Accept": "application/json"}
    token = get_token()
    if token:
        headers["Authorization"] = f"Bearer {token}"

    return httpx.AsyncClient(
        base_url=get_base_url(),
        headers=headers,
        timeout=REQUEST_TIMEOUT_SECONDS,
        transport=_settings["transport"]
    )


def _error_message(response: httpx.Response) -> str:
    try:
        return response.json().get("message") or response.reason_phrase
    except (ValueError, AttributeError):
        return response.text or response.reason_phrase


async def request(method: str, path: str, **kwargs) -> Any:
    """
    Send a request and decode the JSON body.

    Returns:
        Decoded JSON, or None for empty responses

    Raises:
        ApiError: If the response status is not 2xx
    """
    async with _build_client() as client:
        response = await client.request(method, path, **kwargs)

    if response.is_error:
        message = _error_message(response)
        logger.error(f"{method} {path} failed: {response.status_code} {message}")
        raise ApiError(response.status_code, message)

    if response.status_code == 204 or not response.content:
        return None
    return response.json()


async def api_get(path: str, params: Optional[Dict] = None) -> Any:
    return await request("GET", path, params=params)


async def api_post(path: str, data: Optional[Dict] = None) -> Any:
    return await request("POST", path, json=data)


async def api_put(path: str, data: Optional[Dict] = None) -> Any:
    return await request("PUT", path, json=data)


async def api_delete(path: str) -> Any:
    return await request("DELETE", path)
