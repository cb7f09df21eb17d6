"""Realtime wire format — inbound frames and outbound events.

Inbound frames are JSON text with a "type" discriminator:

    {"type": "auth", "userId": 1}
    {"type": "chat", "receiverId": 2, "content": "hi"}

Anything else (bad JSON, unknown type, wrong field types) is rejected
with FrameError instead of crashing the connection.

Outbound events:

    {"type": "chat", "senderId": 1, "content": "hi", "timestamp": "...Z"}
    {"type": "new_product", "product": {...}}
"""

from datetime import datetime, timezone
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError, field_validator

from globalsoft.config import settings

# ─── Frame / event types ─────────────────────────────────

AUTH = "auth"
CHAT = "chat"
NEW_PRODUCT = "new_product"


class FrameError(ValueError):
    """Raised when an inbound frame can't be parsed into a known kind."""


class AuthFrame(BaseModel):
    type: Literal["auth"]
    userId: Optional[int] = None


class ChatFrame(BaseModel):
    type: Literal["chat"]
    receiverId: Optional[int] = None
    content: str

    @field_validator("content")
    @classmethod
    def content_not_too_long(cls, v: str) -> str:
        if len(v) > settings.max_chat_length:
            raise ValueError(
                f"content longer than {settings.max_chat_length} characters"
            )
        return v


Frame = Annotated[Union[AuthFrame, ChatFrame], Field(discriminator="type")]

_frame_adapter: TypeAdapter[Frame] = TypeAdapter(Frame)


def parse_frame(raw: str | bytes) -> AuthFrame | ChatFrame:
    """Parse one inbound text frame. Raises FrameError on anything invalid."""
    try:
        return _frame_adapter.validate_json(raw)
    except ValidationError as e:
        errors = e.errors(include_url=False, include_context=False)
        reason = errors[0]["msg"] if errors else str(e)
        raise FrameError(reason) from e


# ─── Outbound events ─────────────────────────────────────


def isoformat_utc(dt: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a Z suffix.

    Naive datetimes (SQLite drops tzinfo on reload) are taken as UTC.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return (
        dt.astimezone(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


def chat_event(sender_id: int, content: str, timestamp: datetime) -> dict[str, Any]:
    return {
        "type": CHAT,
        "senderId": sender_id,
        "content": content,
        "timestamp": isoformat_utc(timestamp),
    }


def new_product_event(product: dict[str, Any]) -> dict[str, Any]:
    return {"type": NEW_PRODUCT, "product": product}
