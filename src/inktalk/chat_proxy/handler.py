from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from .config import ProxyConfig
from .cors import cors_headers
from .errors import (
    ProxyError,
    err_invalid_json,
    err_messages_required,
    err_method_not_allowed,
    err_missing_api_key,
    err_unexpected,
)
from .forwarder import ChatForwarder
from .logging_utils import JsonlLogger
from .normalization import ParseError, parse_json

logger = logging.getLogger(__name__)


@dataclass
class ProxyRequest:
    method: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: str | bytes | None = None

    def __post_init__(self):
        self.method = (self.method or "").upper()
        self.headers = {str(k).lower(): v for k, v in (self.headers or {}).items()}

    @property
    def origin(self) -> str:
        return self.headers.get("origin") or ""


@dataclass
class ProxyReply:
    status_code: int
    headers: dict[str, str]
    body: Optional[Any] = None


class ChatProxyHandler:
    """Validates one inbound request and relays it to the upstream API.

    Every path returns exactly one :class:`ProxyReply` carrying the CORS
    headers; nothing is raised to the caller.
    """

    def __init__(
        self,
        cfg: ProxyConfig,
        forwarder: ChatForwarder | None = None,
        request_log: JsonlLogger | None = None,
    ):
        self.cfg = cfg
        self.forwarder = forwarder or ChatForwarder(cfg)
        if request_log is None and cfg.request_log_path:
            request_log = JsonlLogger(cfg.request_log_path, cfg.max_log_bytes)
        self.request_log = request_log

    async def handle(self, request: ProxyRequest) -> ProxyReply:
        headers = cors_headers(request.origin, request.headers, self.cfg)

        if request.method == "OPTIONS":
            return ProxyReply(204, headers)

        started_at = time.time()
        model: str | None = None
        message_count = 0
        try:
            if request.method != "POST":
                raise err_method_not_allowed()
            if not self.cfg.has_api_key:
                logger.error(
                    f"[handler] Rejecting request: {self.cfg.api_key_env} is not set"
                )
                raise err_missing_api_key(self.cfg.api_key_env)

            body = self._parse_body(request.body)
            client_messages = body.get("messages")
            if not isinstance(client_messages, list) or not client_messages:
                raise err_messages_required()
            model = str(body.get("model") or self.cfg.default_model)
            message_count = len(client_messages)

            result = await self.forwarder.forward(model, client_messages)
            reply = ProxyReply(200, headers, result.model_dump())
        except ProxyError as exc:
            reply = ProxyReply(exc.status_code, headers, exc.payload)
        except Exception as exc:  # noqa: BLE001
            logger.exception("[handler] Unexpected failure while proxying chat")
            reply = ProxyReply(500, headers, err_unexpected(str(exc)).payload)

        self._log_request(request, reply, model, message_count, started_at)
        return reply

    @staticmethod
    def _parse_body(raw: str | bytes | None) -> dict:
        result = parse_json(raw or "{}")
        if isinstance(result, ParseError):
            raise err_invalid_json()
        return result.value if isinstance(result.value, dict) else {}

    def _log_request(
        self,
        request: ProxyRequest,
        reply: ProxyReply,
        model: str | None,
        message_count: int,
        started_at: float,
    ) -> None:
        if self.request_log is None:
            return
        self.request_log.log(
            {
                "ts": time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime()),
                "method": request.method,
                "origin": request.origin or None,
                "model": model,
                "messages": message_count,
                "status": reply.status_code,
                "duration_ms": round((time.time() - started_at) * 1000, 1),
            }
        )

    async def aclose(self) -> None:
        await self.forwarder.aclose()
