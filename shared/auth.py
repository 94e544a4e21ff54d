"""
JWT validation for Supabase Auth bearer tokens.
Supports HS256 (project JWT secret) and ES256 (JWKS) signed tokens.
"""

import os
import base64
import logging
from typing import Optional
import jwt
from jwt import PyJWKClient
import azure.functions as func

logger = logging.getLogger(__name__)

TOKEN_AUDIENCE = "authenticated"

_jwks_client: Optional[PyJWKClient] = None


class UnauthorizedError(Exception):
    """Raised when authentication fails."""
    pass


def get_jwks_client() -> PyJWKClient:
    """Get or create the JWKS client for ES256 verification."""
    global _jwks_client
    if _jwks_client is None:
        supabase_url = os.environ.get("SUPABASE_URL", "").rstrip("/")
        if not supabase_url:
            raise ValueError("SUPABASE_URL environment variable not set")
        _jwks_client = PyJWKClient(
            f"{supabase_url}/auth/v1/.well-known/jwks.json",
            cache_keys=True
        )
    return _jwks_client


def _get_hs256_secret() -> bytes:
    secret = os.environ.get("SUPABASE_JWT_SECRET")
    if not secret:
        raise ValueError("SUPABASE_JWT_SECRET not set for HS256 verification")

    # Supabase dashboards sometimes hand out base64 secrets
    if secret.endswith("="):
        try:
            return base64.b64decode(secret)
        except ValueError:
            pass
    return secret.encode("utf-8")


def decode_token(token: str) -> dict:
    """
    Verify a bearer token and return its claims.

    Raises:
        UnauthorizedError: If the token is malformed, expired or invalid
    """
    try:
        algorithm = jwt.get_unverified_header(token).get("alg")
    except jwt.exceptions.DecodeError:
        raise UnauthorizedError("Invalid token format")

    if algorithm == "ES256":
        try:
            key = get_jwks_client().get_signing_key_from_jwt(token).key
        except (jwt.PyJWKClientError, jwt.InvalidTokenError, ValueError) as e:
            logger.warning(f"Signing key lookup failed: {str(e)}")
            raise UnauthorizedError("Token verification failed")
    elif algorithm == "HS256":
        key = _get_hs256_secret()
    else:
        logger.error(f"Unsupported algorithm: {algorithm}")
        raise UnauthorizedError(f"Unsupported token algorithm: {algorithm}")

    try:
        return jwt.decode(
            token,
            key,
            algorithms=[algorithm],
            audience=TOKEN_AUDIENCE,
            options={"require": ["sub", "exp", "aud"]}
        )
    except jwt.ExpiredSignatureError:
        logger.warning("Token expired")
        raise UnauthorizedError("Token expired")
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid token: {str(e)}")
        raise UnauthorizedError("Invalid token")


def get_user_from_token(req: func.HttpRequest) -> dict:
    """
    Extract and validate the user from the Authorization header.

    Returns:
        dict with user info: {"id": str, "email": str}

    Raises:
        UnauthorizedError: If the header is missing or the token is invalid
    """
    auth_header = req.headers.get("Authorization", "")

    if not auth_header.startswith("Bearer "):
        raise UnauthorizedError("Missing or invalid Authorization header")

    payload = decode_token(auth_header[7:])

    return {
        "id": payload["sub"],
        "email": payload.get("email"),
    }
