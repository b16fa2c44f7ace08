"""
Random topic suggestion endpoint.
"""
from fastapi import APIRouter

from papergen.models.schemas import RandomTopicResponse
from papergen.services.topics import get_random_topic

router = APIRouter()


@router.get("", response_model=RandomTopicResponse)
async def random_topic() -> RandomTopicResponse:
    topic, category = get_random_topic()
    return RandomTopicResponse(topic=topic, category=category)
