from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import asdict, fields
from pathlib import Path
from typing import Any, Callable, Union, get_args, get_type_hints

from .config import ProxyConfig

logger = logging.getLogger(__name__)

CONFIG_FILE_ENV = "CHAT_PROXY_CONFIG_FILE"
ENV_PREFIX = "CHAT_PROXY_"
DEFAULT_CONFIG_PATH = Path("configs/chat_proxy.toml")

# api_key is deliberately absent: the secret is only read from the environment.
_SECTION_MAP: dict[str, list[str]] = {
    "server": ["host", "port", "request_log_path", "max_log_bytes"],
    "upstream": [
        "upstream_url",
        "api_key_env",
        "default_model",
        "backend_timeout_ms",
    ],
    "prompt": [
        "system_prompt",
        "temperature",
        "max_tokens",
        "max_history_messages",
        "max_message_chars",
    ],
    "cors": ["allowed_origins", "cors_max_age_s"],
}


def _field_types() -> dict[str, Any]:
    return get_type_hints(ProxyConfig)


def _coerce_int(value: Any) -> int:
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    return int(str(value))


def _coerce_float(value: Any) -> float:
    if isinstance(value, (int, float)):
        return float(value)
    return float(str(value))


def _coerce_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _coerce_optional(value: Any, caster: Callable[[Any], Any]) -> Any:
    if value in ("", None):
        return None
    return caster(value)


def _coerce_origins(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        value = value.split(",")
    items = [str(item).strip().rstrip("/") for item in value]
    return tuple(item for item in items if item)


_CASTERS: dict[Any, Callable[[Any], Any]] = {
    int: _coerce_int,
    float: _coerce_float,
    str: _coerce_str,
}


def _coerce_value(field_type: Any, value: Any) -> Any:
    origin = getattr(field_type, "__origin__", None)
    if origin is None:
        caster = _CASTERS.get(field_type)
        if caster:
            return caster(value)
        return value

    if origin is tuple:
        return _coerce_origins(value)

    if origin is Union:
        args = [arg for arg in get_args(field_type) if arg is not type(None)]
        if len(args) == 1:
            caster = _CASTERS.get(args[0])
            if caster:
                return _coerce_optional(value, caster)
    return value


def _read_config_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("rb") as fh:
        data = tomllib.load(fh)

    # Only mapped keys are read; an api_key entry in the file is ignored.
    return {
        key: section[key]
        for name, keys in _SECTION_MAP.items()
        if isinstance(section := data.get(name, {}), dict)
        for key in keys
        if key in section
    }


def _env_key(name: str) -> str:
    return f"{ENV_PREFIX}{name.upper()}"


def _apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    env = os.environ
    for key in config:
        raw = env.get(_env_key(key))
        if raw is None or raw == "":
            continue
        config[key] = raw
    return config


def _default_config_dict() -> dict[str, Any]:
    data = asdict(ProxyConfig())
    data.pop("api_key", None)
    data.pop("config_file_path", None)
    return data


def _normalize(config: dict[str, Any]) -> dict[str, Any]:
    field_types = _field_types()
    normalized = {}
    for key, default_value in _default_config_dict().items():
        value = config.get(key, default_value)
        try:
            normalized[key] = _coerce_value(field_types.get(key), value)
        except (TypeError, ValueError):
            logger.warning(
                f"[config] Ignoring invalid value for '{key}': {value!r}"
            )
            normalized[key] = default_value
    if not normalized.get("allowed_origins"):
        normalized["allowed_origins"] = ProxyConfig().allowed_origins
    return normalized


def config_file_path() -> Path:
    return Path(os.environ.get(CONFIG_FILE_ENV, DEFAULT_CONFIG_PATH)).expanduser()


def load_proxy_config() -> ProxyConfig:
    candidate = config_file_path()
    values = _default_config_dict()
    values.update(_read_config_file(candidate))
    values = _normalize(_apply_env_overrides(values))
    api_key = os.environ.get(values["api_key_env"]) or None
    return ProxyConfig(
        **values,
        api_key=api_key,
        config_file_path=str(candidate) if candidate.exists() else None,
    )


def fields_by_section() -> dict[str, list[str]]:
    known = {f.name for f in fields(ProxyConfig)}
    return {
        section: [key for key in keys if key in known]
        for section, keys in _SECTION_MAP.items()
    }


def list_env_overrides() -> dict[str, str]:
    return {
        key: value for key, value in os.environ.items() if key.startswith(ENV_PREFIX)
    }
