from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

GROQ_CHAT_COMPLETIONS_URL = "https://api.groq.com/openai/v1/chat/completions"

DEFAULT_MODEL = "llama3-70b-8192"

DEFAULT_SYSTEM_PROMPT = (
    "You are InkTalk, a concise, helpful assistant. Be direct and useful. "
    "Follow provider safety and legal policies."
)

# First entry doubles as the fallback Access-Control-Allow-Origin value.
DEFAULT_ALLOWED_ORIGINS: Tuple[str, ...] = (
    "https://inkflowstudio.github.io",
    "http://localhost:5173",
    "http://127.0.0.1:5500",
    "http://localhost:5500",
)


@dataclass(frozen=True)
class ProxyConfig:
    host: str = "127.0.0.1"
    port: int = 8100
    upstream_url: str = GROQ_CHAT_COMPLETIONS_URL
    api_key: Optional[str] = field(default=None, repr=False)
    api_key_env: str = "GROQ_API_KEY"
    default_model: str = DEFAULT_MODEL
    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    allowed_origins: Tuple[str, ...] = DEFAULT_ALLOWED_ORIGINS
    # Outbound history bounds
    max_history_messages: int = 30
    max_message_chars: int = 8000
    # Generation parameters sent with every request
    temperature: float = 0.7
    max_tokens: int = 800
    backend_timeout_ms: int = 60_000
    cors_max_age_s: int = 86_400
    request_log_path: Optional[str] = None
    max_log_bytes: int = 25_000_000
    config_file_path: Optional[str] = None

    def __post_init__(self):
        if not self.allowed_origins:
            raise ValueError("allowed_origins must contain at least one origin")

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key and self.api_key.strip())

    @classmethod
    def load(cls) -> "ProxyConfig":
        from .config_loader import load_proxy_config

        return load_proxy_config()
