from __future__ import annotations

from typing import Any

from fastapi import HTTPException

from .models import ErrorBody


class ProxyError(HTTPException):
    def __init__(self, status_code: int, message: str, details: Any = None):
        payload = ErrorBody(error=message, details=details).to_payload()
        super().__init__(status_code=status_code, detail=payload)

    @property
    def payload(self) -> dict:
        return self.detail


def err_method_not_allowed() -> ProxyError:
    return ProxyError(405, "Method not allowed")


def err_missing_api_key(env_name: str = "GROQ_API_KEY") -> ProxyError:
    return ProxyError(500, f"Server not configured (missing {env_name})")


def err_invalid_json() -> ProxyError:
    return ProxyError(400, "Invalid JSON body")


def err_messages_required() -> ProxyError:
    return ProxyError(400, "messages[] is required")


def err_upstream(status_code: int, details: Any) -> ProxyError:
    return ProxyError(status_code, "Groq error", details)


def err_unexpected(message: str | None) -> ProxyError:
    return ProxyError(500, message or "Unknown error")
