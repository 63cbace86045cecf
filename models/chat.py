# FILE: models/chat.py
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from core.intent import IntentName
from core.role import Role
from models.detection import Detection


ReplyKind = Literal["quick", "consent", "mutation", "view", "general"]


class ChatRequest(BaseModel):
    text: str = Field(..., description="Raw user message")
    user_id: str = Field(..., min_length=1)
    role: Role = Field(Role.CUSTOMER)

    @field_validator("role", mode="before")
    @classmethod
    def resolve_role(cls, v):
        return Role.parse(v)


class ChatTurn(BaseModel):
    """
    A passive container for one message and what it was detected to mean.
    Executors read it; they never re-detect.
    """

    user_id: str
    role: Role
    text: str
    detection: Detection
    quick_reply: Optional[str] = None


class ChatReply(BaseModel):
    reply: str
    kind: ReplyKind
    intent: IntentName
    requires_consent: bool = False
    meta: Optional[Dict[str, Any]] = None
