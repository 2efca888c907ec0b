from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from .config import ProxyConfig
from .errors import err_upstream
from .models import ProxyResponse, UpstreamPayload
from .normalization import (
    ParseError,
    build_messages,
    detail_of,
    extract_completion,
    parse_json,
)

logger = logging.getLogger(__name__)


class UpstreamDecodeError(ValueError):
    """A 2xx upstream reply whose body is not JSON."""


class ChatForwarder:
    """Sends one bounded chat completion request to the upstream API."""

    def __init__(self, cfg: ProxyConfig, client: httpx.AsyncClient | None = None):
        self.cfg = cfg
        self.client = client or httpx.AsyncClient(
            timeout=cfg.backend_timeout_ms / 1000
        )

    def build_payload(self, model: str, client_messages: list[Any]) -> dict:
        messages = build_messages(
            client_messages,
            self.cfg.system_prompt,
            max_history=self.cfg.max_history_messages,
            max_chars=self.cfg.max_message_chars,
        )
        payload = UpstreamPayload(
            model=model,
            messages=messages,
            temperature=self.cfg.temperature,
            max_tokens=self.cfg.max_tokens,
            stream=False,
        )
        return payload.model_dump()

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.cfg.api_key}",
            "Content-Type": "application/json",
        }

    async def forward(self, model: str, client_messages: list[Any]) -> ProxyResponse:
        payload = self.build_payload(model, client_messages)
        started_at = time.time()
        resp = await self.client.post(
            self.cfg.upstream_url, json=payload, headers=self._headers()
        )
        elapsed_ms = (time.time() - started_at) * 1000
        text = resp.text
        if not 200 <= resp.status_code < 300:
            logger.warning(
                f"[forwarder] Upstream returned {resp.status_code} for model "
                f"'{model}' after {elapsed_ms:.0f} ms"
            )
            raise err_upstream(resp.status_code, detail_of(parse_json(text)))
        result = parse_json(text)
        if isinstance(result, ParseError):
            raise UpstreamDecodeError(
                f"Upstream returned invalid JSON: {result.message}"
            )
        logger.info(
            f"[forwarder] Upstream completed model '{model}' in {elapsed_ms:.0f} ms"
        )
        return extract_completion(result.value)

    async def aclose(self) -> None:
        await self.client.aclose()
