"""Chat proxy relaying browser chat requests to Groq's OpenAI-compatible API.

The upstream key and system prompt stay server-side; callers only ever see
the normalized completion or an error body.
"""

from .config import ProxyConfig
from .handler import ChatProxyHandler, ProxyReply, ProxyRequest

__all__ = ["ChatProxyHandler", "ProxyConfig", "ProxyReply", "ProxyRequest"]
