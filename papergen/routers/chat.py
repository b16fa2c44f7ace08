"""
Help chatbot endpoint.
"""
from fastapi import APIRouter, Depends

from papergen.dependencies.services import get_chat_service
from papergen.models.schemas import ChatRequest, ChatResponse, ErrorResponse
from papergen.services.chat_service import ChatService

router = APIRouter()


@router.post("", response_model=ChatResponse, responses={502: {"model": ErrorResponse}})
async def chat(
    body: ChatRequest,
    chat_service: ChatService = Depends(get_chat_service),
) -> ChatResponse:
    """Answer a question about the product."""
    return ChatResponse(response=await chat_service.reply(body.message))
