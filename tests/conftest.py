import json
import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from inktalk.chat_proxy import forwarder as forwarder_module  # noqa: E402
from inktalk.chat_proxy.config import ProxyConfig  # noqa: E402


@pytest.fixture(autouse=True)
def clear_chat_proxy_env(monkeypatch, tmp_path):
    """Keep tests independent of the developer's shell and config files."""
    for key in list(os.environ.keys()):
        if key.startswith("CHAT_PROXY_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.delenv("GROQ_API_KEY", raising=False)
    monkeypatch.setenv("CHAT_PROXY_CONFIG_FILE", str(tmp_path / "absent.toml"))
    yield


@pytest.fixture
def proxy_config():
    def _make(**overrides):
        values = {"api_key": "gsk-test-key"}
        values.update(overrides)
        return ProxyConfig(**values)

    return _make


class FakeResp:
    def __init__(self, status_code=200, text=""):
        self.status_code = status_code
        self.text = text


class FakeUpstream:
    def __init__(self):
        self.calls = []
        self.reply = FakeResp(200, "{}")

    def respond(self, status_code, body):
        text = body if isinstance(body, str) else json.dumps(body)
        self.reply = FakeResp(status_code, text)

    def fail(self, exc):
        self.reply = exc


@pytest.fixture
def fake_upstream(monkeypatch):
    """Replace the outbound POST with a recorded, scripted reply."""

    upstream = FakeUpstream()

    async def fake_post(self, url, json=None, headers=None):  # noqa: A002
        upstream.calls.append({"url": url, "json": json, "headers": headers})
        if isinstance(upstream.reply, Exception):
            raise upstream.reply
        return upstream.reply

    monkeypatch.setattr(forwarder_module.httpx.AsyncClient, "post", fake_post)
    return upstream
