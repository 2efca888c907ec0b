"""Typer CLI for running and inspecting the chat proxy."""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import Optional

import typer

from ..logging_utils import configure_logging
from .config_loader import fields_by_section, list_env_overrides, load_proxy_config

app = typer.Typer(help="InkTalk chat proxy utilities")


@app.command("serve")
def cmd_serve(
    host: Optional[str] = typer.Option(None, "--host", help="Override bind host"),
    port: Optional[int] = typer.Option(None, "--port", help="Override bind port"),
    log_level: str = typer.Option("INFO", "--log-level", help="Root log level"),
):
    """Run the proxy under uvicorn."""
    import uvicorn

    log_path = configure_logging("chat_proxy", level=log_level)
    cfg = load_proxy_config()
    from .app import app as asgi_app

    typer.echo(f"Logging to {log_path}")
    uvicorn.run(
        asgi_app,
        host=host or cfg.host,
        port=port or cfg.port,
        log_config=None,
    )


@app.command("show-config")
def cmd_show_config():
    """Print the resolved configuration with the API key redacted."""
    cfg = load_proxy_config()
    values = asdict(cfg)
    values.pop("api_key", None)
    sections = {
        section: {key: values[key] for key in keys}
        for section, keys in fields_by_section().items()
    }
    typer.echo(
        json.dumps(
            {
                "config": sections,
                "api_key": "set" if cfg.has_api_key else "missing",
                "config_file_path": cfg.config_file_path,
                "env_overrides": list_env_overrides(),
            },
            indent=2,
        )
    )


def main():  # pragma: no cover
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
