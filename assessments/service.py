"""
Business logic for assessment operations.
"""

import logging
from typing import Dict, List
from shared.permissions import ensure_owner, NotFoundError
from .model import Assessment

logger = logging.getLogger(__name__)


class AssessmentService:
    """Service class for user-scoped assessment CRUD."""

    async def list_assessments(self, user_id: str) -> List[Dict]:
        """
        List all assessments owned by the user.

        Args:
            user_id: The authenticated user's ID

        Returns:
            List of assessment records, newest first
        """
        return await Assessment.list_by_user(user_id)

    async def get_assessment(self, user_id: str, assessment_id: str) -> Dict:
        """
        Get a single assessment.

        Raises:
            NotFoundError: If assessment doesn't exist
            ForbiddenError: If the user doesn't own it
        """
        assessment = await Assessment.find_by_id(assessment_id)
        return ensure_owner(user_id, assessment, "Assessment")

    async def create_assessment(self, user_id: str, assessment_data: Dict) -> Dict:
        """
        Store a submitted questionnaire.

        Args:
            user_id: The authenticated user's ID
            assessment_data: Questionnaire payload

        Returns:
            Created assessment record
        """
        assessment = await Assessment.create(assessment_data, user_id)
        logger.info(f"Created assessment {assessment['id']} for user {user_id}")
        return assessment

    async def update_assessment(
        self,
        user_id: str,
        assessment_id: str,
        assessment_data: Dict
    ) -> Dict:
        """
        Replace an assessment's payload (owner only).

        Raises:
            NotFoundError: If assessment doesn't exist
            ForbiddenError: If the user doesn't own it
        """
        await self.get_assessment(user_id, assessment_id)

        assessment = await Assessment.update(assessment_id, assessment_data)
        if assessment is None:
            raise NotFoundError("Assessment not found")

        return assessment

    async def delete_assessment(self, user_id: str, assessment_id: str) -> bool:
        """
        Delete an assessment (owner only).

        Raises:
            NotFoundError: If assessment doesn't exist
            ForbiddenError: If the user doesn't own it
        """
        await self.get_assessment(user_id, assessment_id)
        return await Assessment.delete(assessment_id)
