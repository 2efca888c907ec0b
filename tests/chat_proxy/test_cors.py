from inktalk.chat_proxy.config import ProxyConfig
from inktalk.chat_proxy.cors import cors_headers, resolve_origin


def test_allow_listed_origin_is_echoed():
    cfg = ProxyConfig()
    assert resolve_origin("http://localhost:5173", cfg.allowed_origins) == (
        "http://localhost:5173"
    )


def test_unknown_or_missing_origin_falls_back_to_first_entry():
    cfg = ProxyConfig()
    first = cfg.allowed_origins[0]
    assert resolve_origin("https://evil.example", cfg.allowed_origins) == first
    assert resolve_origin("", cfg.allowed_origins) == first
    assert resolve_origin(None, cfg.allowed_origins) == first


def test_cors_headers_default_allow_headers():
    headers = cors_headers("http://localhost:5500", {}, ProxyConfig())
    assert headers == {
        "Access-Control-Allow-Origin": "http://localhost:5500",
        "Access-Control-Allow-Methods": "POST,OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type",
        "Access-Control-Max-Age": "86400",
        "Vary": "Origin, Access-Control-Request-Headers",
        "Content-Type": "application/json",
    }


def test_cors_headers_echo_requested_headers():
    headers = cors_headers(
        "http://localhost:5500",
        {"access-control-request-headers": "content-type,x-client"},
        ProxyConfig(),
    )
    assert headers["Access-Control-Allow-Headers"] == "content-type,x-client"


def test_custom_allow_list():
    cfg = ProxyConfig(allowed_origins=("https://app.example",))
    headers = cors_headers("http://localhost:5173", {}, cfg)
    assert headers["Access-Control-Allow-Origin"] == "https://app.example"
