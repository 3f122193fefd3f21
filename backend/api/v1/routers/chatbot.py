"""
Chatbot Router — answers questions over the current user's data.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from api.deps import get_chat_responder, get_repository
from chatbot.completion import ChatResponder
from core.config import get_settings
from db.repository import OwnerScopedRepository
from reports.aggregation import build_chat_context

router = APIRouter(prefix="/api/v1/chatbot", tags=["chatbot"])


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=4000)


class ChatResponse(BaseModel):
    response: str


@router.post("/", response_model=ChatResponse)
async def chat(
    body: ChatRequest,
    repo: OwnerScopedRepository = Depends(get_repository),
    responder: ChatResponder = Depends(get_chat_responder),
):
    context = build_chat_context(
        orders=await repo.list_orders(newest_first=True),
        usages=await repo.list_usages(newest_first=True),
        items=await repo.list_inventory(),
        unread_alerts=await repo.list_alerts(unread_only=True),
        currency=get_settings().currency_symbol,
    )
    return ChatResponse(response=await responder.reply(body.message, context))
