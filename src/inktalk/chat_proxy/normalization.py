from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Union

from .models import ChatMessage, ProxyResponse


@dataclass(frozen=True)
class Parsed:
    value: Any


@dataclass(frozen=True)
class ParseError:
    raw: str
    message: str


ParseResult = Union[Parsed, ParseError]


def _reject_constant(token: str):
    # NaN and Infinity are accepted by json.loads but are not JSON.
    raise ValueError(f"Invalid JSON constant: {token}")


def parse_json(text: str | bytes | None) -> ParseResult:
    """Decode ``text`` as JSON without raising."""
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as exc:
            return ParseError(
                raw=text.decode("utf-8", errors="replace"), message=str(exc)
            )
    raw = text or ""
    try:
        return Parsed(json.loads(raw, parse_constant=_reject_constant))
    except ValueError as exc:
        return ParseError(raw=raw, message=str(exc))


def detail_of(result: ParseResult) -> Any:
    """Error detail for the caller: the decoded JSON or the raw text wrapped."""
    if isinstance(result, Parsed):
        return result.value
    return {"raw": result.raw}


def _coerce_str(val) -> str:
    """Coerce falsy values to empty string and non-strings to their JSON text."""
    if not val:
        return ""
    if isinstance(val, bool):
        return "true"
    if isinstance(val, float) and val.is_integer():
        return str(int(val))
    return val if isinstance(val, str) else str(val)


def normalize_role(role: Any) -> str:
    return "assistant" if role == "assistant" else "user"


def normalize_message(message: Any, max_chars: int) -> ChatMessage:
    if not isinstance(message, dict):
        message = {}
    text = _coerce_str(message.get("content"))
    return ChatMessage(
        role=normalize_role(message.get("role")), content=text[:max_chars]
    )


def build_messages(
    client_messages: list[Any],
    system_prompt: str,
    max_history: int = 30,
    max_chars: int = 8000,
) -> list[ChatMessage]:
    """Prepend the system prompt and keep the newest ``max_history`` messages."""
    history = client_messages[-max_history:] if max_history > 0 else []
    messages = [ChatMessage(role="system", content=system_prompt)]
    messages.extend(normalize_message(m, max_chars) for m in history)
    return messages


def _first_choice(data: Any) -> dict:
    if not isinstance(data, dict):
        return {}
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return {}
    first = choices[0]
    return first if isinstance(first, dict) else {}


def extract_completion(data: Any) -> ProxyResponse:
    """Reduce an upstream chat completion body to the fields the browser uses."""
    choice = _first_choice(data)
    message = choice.get("message")
    content = message.get("content") if isinstance(message, dict) else None
    usage = data.get("usage") if isinstance(data, dict) else None
    return ProxyResponse(
        content=_coerce_str(content),
        finish_reason=_coerce_str(choice.get("finish_reason")) or None,
        usage=usage or None,
        raw=data,
    )
