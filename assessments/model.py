"""
Assessment persistence.

Two backends share one interface:
- test mode keeps records in a process-wide dict keyed by id;
- otherwise records go to the ``assessments`` table through parameterized
  SQL, with the payload JSON-encoded into the ``assessment_data`` column and
  its questionnaire answers mirrored into discrete columns.
"""

import copy
import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from sqlalchemy import text
from shared.database import get_engine, is_test_mode
from shared.permissions import NotFoundError

logger = logging.getLogger(__name__)

SYMPTOM_TYPES = ["physical", "emotional"]

# Payload fields mirrored into their own columns for querying
DISCRETE_FIELDS = ["age", "cycle_length", "period_duration", "flow_heaviness", "pain_level"]

# In-memory store for test mode
_test_assessments: Dict[str, Dict] = {}


class AssessmentNotFoundError(NotFoundError):
    """Raised by the in-memory store when an id is unknown."""
    pass


def reset_test_store() -> None:
    _test_assessments.clear()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _as_timestamp(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def _row_to_record(row) -> Dict:
    """Map an ``assessments`` row to the public record shape."""
    data = row["assessment_data"]
    if isinstance(data, str):
        data = json.loads(data)

    return {
        "id": row["id"],
        "user_id": row["user_id"],
        "assessment_data": data or {},
        "created_at": _as_timestamp(row["created_at"]),
        "updated_at": _as_timestamp(row["updated_at"]),
    }


def _discrete_columns(assessment_data: Dict) -> Dict:
    """Column values for DISCRETE_FIELDS; missing fields become NULL."""
    data = assessment_data or {}
    return {
        field: None if data.get(field) is None else str(data[field])
        for field in DISCRETE_FIELDS
    }


def _names(value) -> List[str]:
    if not isinstance(value, list):
        return []
    return [name for name in value if isinstance(name, str) and name]


def extract_symptoms(assessment_data: Dict) -> List[Dict]:
    """
    Flatten the payload's symptoms into {"name", "type"} rows.

    Accepts {"physical": [...], "emotional": [...]} or a plain list of names
    (typed "physical").
    """
    symptoms = (assessment_data or {}).get("symptoms")

    if isinstance(symptoms, dict):
        return [
            {"name": name, "type": symptom_type}
            for symptom_type in SYMPTOM_TYPES
            for name in _names(symptoms.get(symptom_type))
        ]
    if isinstance(symptoms, list):
        return [{"name": name, "type": "physical"} for name in _names(symptoms)]
    return []


def _insert_symptoms(conn, assessment_id: str, assessment_data: Dict) -> None:
    symptoms = extract_symptoms(assessment_data)
    if not symptoms:
        return

    conn.execute(
        text(
            "INSERT INTO symptoms (id, assessment_id, name, type) "
            "VALUES (:id, :assessment_id, :name, :type)"
        ),
        [
            {"id": str(uuid.uuid4()), "assessment_id": assessment_id, **symptom}
            for symptom in symptoms
        ]
    )


class Assessment:
    """CRUD for assessments."""

    @staticmethod
    async def find_by_id(assessment_id: str) -> Optional[Dict]:
        """
        Find an assessment by ID.

        Returns:
            Assessment record or None if not found
        """
        try:
            if is_test_mode():
                record = _test_assessments.get(assessment_id)
                return copy.deepcopy(record) if record else None

            with get_engine().connect() as conn:
                row = conn.execute(
                    text("SELECT * FROM assessments WHERE id = :id"),
                    {"id": assessment_id}
                ).mappings().first()

            return _row_to_record(row) if row else None
        except Exception as e:
            logger.error(f"Error finding assessment by ID: {str(e)}")
            raise

    @staticmethod
    async def create(assessment_data: Dict, user_id: str) -> Dict:
        """
        Create a new assessment.

        Args:
            assessment_data: Questionnaire payload
            user_id: Owning user's ID

        Returns:
            Created assessment record
        """
        try:
            assessment_id = str(uuid.uuid4())
            now = _now()
            record = {
                "id": assessment_id,
                "user_id": user_id,
                "assessment_data": assessment_data,
                "created_at": now,
                "updated_at": now,
            }

            if is_test_mode():
                _test_assessments[assessment_id] = copy.deepcopy(record)
                return record

            with get_engine().begin() as conn:
                conn.execute(
                    text(
                        "INSERT INTO assessments "
                        "(id, user_id, assessment_data, age, cycle_length, period_duration, "
                        "flow_heaviness, pain_level, created_at, updated_at) "
                        "VALUES (:id, :user_id, :assessment_data, :age, :cycle_length, "
                        ":period_duration, :flow_heaviness, :pain_level, :created_at, :updated_at)"
                    ),
                    {
                        **record,
                        **_discrete_columns(assessment_data),
                        "assessment_data": json.dumps(assessment_data),
                    }
                )
                _insert_symptoms(conn, assessment_id, assessment_data)

            return record
        except Exception as e:
            logger.error(f"Error creating assessment: {str(e)}")
            raise

    @staticmethod
    async def list_by_user(user_id: str) -> List[Dict]:
        """List a user's assessments, newest first."""
        try:
            if is_test_mode():
                records = [
                    copy.deepcopy(a) for a in _test_assessments.values()
                    if a["user_id"] == user_id
                ]
                return sorted(records, key=lambda a: a["created_at"], reverse=True)

            with get_engine().connect() as conn:
                rows = conn.execute(
                    text(
                        "SELECT * FROM assessments WHERE user_id = :user_id "
                        "ORDER BY created_at DESC"
                    ),
                    {"user_id": user_id}
                ).mappings().all()

            return [_row_to_record(row) for row in rows]
        except Exception as e:
            logger.error(f"Error listing assessments by user: {str(e)}")
            raise

    @staticmethod
    async def update(assessment_id: str, assessment_data: Dict) -> Optional[Dict]:
        """
        Replace an assessment's payload and refresh ``updated_at``.

        Returns:
            Updated record, or None if the row is missing (database mode)

        Raises:
            AssessmentNotFoundError: If the id is unknown (test mode)
        """
        try:
            now = _now()

            if is_test_mode():
                if assessment_id not in _test_assessments:
                    raise AssessmentNotFoundError(f"Assessment with ID {assessment_id} not found")

                _test_assessments[assessment_id] = {
                    **_test_assessments[assessment_id],
                    "assessment_data": copy.deepcopy(assessment_data),
                    "updated_at": now,
                }
                return copy.deepcopy(_test_assessments[assessment_id])

            with get_engine().begin() as conn:
                result = conn.execute(
                    text(
                        "UPDATE assessments SET assessment_data = :assessment_data, "
                        "age = :age, cycle_length = :cycle_length, "
                        "period_duration = :period_duration, flow_heaviness = :flow_heaviness, "
                        "pain_level = :pain_level, updated_at = :updated_at WHERE id = :id"
                    ),
                    {
                        **_discrete_columns(assessment_data),
                        "assessment_data": json.dumps(assessment_data),
                        "updated_at": now,
                        "id": assessment_id,
                    }
                )
                if result.rowcount == 0:
                    return None

                conn.execute(
                    text("DELETE FROM symptoms WHERE assessment_id = :id"),
                    {"id": assessment_id}
                )
                _insert_symptoms(conn, assessment_id, assessment_data)

            return await Assessment.find_by_id(assessment_id)
        except Exception as e:
            logger.error(f"Error updating assessment: {str(e)}")
            raise

    @staticmethod
    async def delete(assessment_id: str) -> bool:
        """
        Delete an assessment and its symptoms.

        Raises:
            AssessmentNotFoundError: If the id is unknown (test mode)
        """
        try:
            if is_test_mode():
                if assessment_id not in _test_assessments:
                    raise AssessmentNotFoundError(f"Assessment with ID {assessment_id} not found")

                del _test_assessments[assessment_id]
                return True

            with get_engine().begin() as conn:
                conn.execute(
                    text("DELETE FROM symptoms WHERE assessment_id = :id"),
                    {"id": assessment_id}
                )
                conn.execute(
                    text("DELETE FROM assessments WHERE id = :id"),
                    {"id": assessment_id}
                )

            return True
        except Exception as e:
            logger.error(f"Error deleting assessment: {str(e)}")
            raise
