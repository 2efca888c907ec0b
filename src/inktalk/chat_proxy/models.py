from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class ChatMessage(BaseModel):
    role: Literal["user", "assistant", "system"]
    content: str = ""


class UpstreamPayload(BaseModel):
    model: str
    messages: List[ChatMessage]
    temperature: float = 0.7
    max_tokens: int = 800
    stream: bool = False


class ProxyResponse(BaseModel):
    content: str = ""
    finish_reason: Optional[str] = None
    usage: Optional[Any] = None
    raw: Any = Field(default_factory=dict)


class ErrorBody(BaseModel):
    error: str
    details: Optional[Any] = None

    def to_payload(self) -> Dict[str, Any]:
        # details is omitted rather than sent as null
        if self.details is None:
            return self.model_dump(exclude={"details"})
        return self.model_dump()
