"""
Ownership checks for user-scoped resources.
"""

import logging
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class ForbiddenError(Exception):
    """Raised when a user doesn't have permission to access a resource."""
    pass


class NotFoundError(Exception):
    """Raised when a resource is not found."""
    pass


def ensure_owner(user_id: str, record: Optional[Dict], resource: str = "Resource") -> Dict:
    """
    Check that a record exists and belongs to the user.

    Args:
        user_id: The authenticated user's ID
        record: Row fetched from the store (None if missing)
        resource: Human-readable resource name for error messages

    Returns:
        The record, unchanged

    Raises:
        NotFoundError: If the record is None
        ForbiddenError: If the record belongs to another user
    """
    if record is None:
        raise NotFoundError(f"{resource} not found")

    if record.get("user_id") != user_id:
        logger.warning(f"User {user_id} denied access to {resource.lower()} {record.get('id')}")
        raise ForbiddenError(f"You don't have access to this {resource.lower()}")

    return record
