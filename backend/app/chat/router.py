"""Chat endpoint: external bot when configured, canned replies otherwise."""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from app.chat.bot_client import BotClient, BotError
from app.chat.responder import (
    WELCOME_SUGGESTIONS,
    WELCOME_TEXT,
    canned_reply,
    is_end_command,
)
from app.config import settings
from app.errors import BadRequest
from app.logging_utils import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/chat", tags=["chat"])


class ChatRequest(BaseModel):
    message: str = Field(min_length=1, max_length=2000)


class ChatResponse(BaseModel):
    reply: str
    more_info: str | None = None
    suggestions: list[str] = Field(default_factory=list)
    action: Literal["clear"] | None = None
    source: Literal["local", "remote"] = "local"


class WelcomeResponse(BaseModel):
    reply: str
    suggestions: list[str]


def get_bot_client() -> BotClient:
    return BotClient(
        url=settings.bot_url,
        api_key=settings.bot_api_key,
        timeout_seconds=settings.bot_timeout_seconds,
    )


def _local_response(message: str) -> ChatResponse:
    canned = canned_reply(message)
    return ChatResponse(
        reply=canned.text,
        more_info=canned.more_info,
        suggestions=list(canned.suggestions),
        action=canned.action,
        source="local",
    )


@router.post("", response_model=ChatResponse)
async def chat(
    payload: ChatRequest,
    bot: BotClient = Depends(get_bot_client),
) -> ChatResponse:
    """
    Answer one chat message.

    Example request: `{"message": "How do I start a student budget?"}`
    """
    message_text = payload.message.strip()
    if not message_text:
        raise BadRequest("message required")

    # clearing history is a local confirmation flow, never sent to the bot
    if is_end_command(message_text) or not bot.configured:
        return _local_response(message_text)

    try:
        reply = await bot.ask(message_text)
    except BotError as exc:
        logger.warning("bot_unavailable_using_local_reply", error=str(exc))
        return _local_response(message_text)

    return ChatResponse(reply=reply, source="remote")


@router.get("/welcome", response_model=WelcomeResponse)
async def welcome() -> WelcomeResponse:
    return WelcomeResponse(reply=WELCOME_TEXT, suggestions=list(WELCOME_SUGGESTIONS))
