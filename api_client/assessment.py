"""
Assessment endpoints.
"""

from types import SimpleNamespace
from typing import List
from .schemas import Assessment, AssessmentData
from .transport import api_get, api_post, api_put, api_delete


async def get_list() -> List[Assessment]:
    return await api_get("/assessment/list")


async def get_by_id(assessment_id: str) -> Assessment:
    return await api_get(f"/assessment/{assessment_id}")


async def send_assessment(assessment_data: AssessmentData) -> Assessment:
    return await api_post("/assessment/send", {"assessment_data": assessment_data})


async def update(assessment_id: str, assessment_data: AssessmentData) -> Assessment:
    return await api_put(f"/assessment/{assessment_id}", {"assessment_data": assessment_data})


async def delete_assessment(assessment_id: str) -> bool:
    await api_delete(f"/assessment/{assessment_id}")
    return True


# Object-style access kept for older callers
assessment_api = SimpleNamespace(
    list=get_list,
    get_by_id=get_by_id,
    send_assessment=send_assessment,
    update=update,
    delete=delete_assessment,
)
