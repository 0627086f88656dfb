"""Chat endpoints -- assistant messages and per-user transcript."""

from __future__ import annotations

from fastapi import APIRouter, Path, Query
from pydantic import BaseModel, Field

from organizeit.runtime import Runtime

router = APIRouter(tags=["chat"])


class ChatMessage(BaseModel):
    """Inbound chat payload. Length is capped again by the router."""
    message: str = Field(default="", max_length=10000)
    context: str | None = Field(default=None, max_length=256)
    userId: str | None = Field(default=None, max_length=256)


@router.post("/chat/message")
def chat_message(body: ChatMessage) -> dict:
    """Classify the message, answer it, and record both sides of the exchange."""
    return Runtime.get().chat.handle(body.message, context=body.context, user_id=body.userId)


@router.get("/chat/history/{user_id}")
def chat_history(
    user_id: str = Path(..., max_length=256),
    limit: int | None = Query(default=None, ge=1, le=1000),
) -> dict:
    runtime = Runtime.get()
    records = runtime.chat.history(user_id, limit=limit or runtime.chat_history_limit)
    return {"messages": records, "count": len(records)}
