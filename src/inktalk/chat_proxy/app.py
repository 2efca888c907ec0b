from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from .config import ProxyConfig
from .handler import ChatProxyHandler, ProxyReply, ProxyRequest

logger = logging.getLogger(__name__)

_cfg = ProxyConfig.load()
_handler = ChatProxyHandler(_cfg)

# Every method is routed to the handler so unsupported ones get its 405 body.
_ROUTED_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

app = FastAPI(title="InkTalk Chat Proxy", version="0.1")


def _to_response(reply: ProxyReply) -> Response:
    if reply.body is None:
        return Response(status_code=reply.status_code, headers=reply.headers)
    return JSONResponse(
        status_code=reply.status_code, content=reply.body, headers=reply.headers
    )


@app.on_event("startup")
async def _startup():  # pragma: no cover
    if not _cfg.has_api_key:
        logger.warning(
            f"[app] {_cfg.api_key_env} is not set; chat requests will fail with 500"
        )
    if _cfg.host != "127.0.0.1":
        logger.info(
            f"[app] Listening on {_cfg.host}; allowed origins: "
            f"{', '.join(_cfg.allowed_origins)}"
        )


@app.on_event("shutdown")
async def _shutdown():  # pragma: no cover
    await _handler.aclose()


@app.api_route("/", methods=_ROUTED_METHODS)
@app.api_route("/{path:path}", methods=_ROUTED_METHODS)
async def chat(req: Request, path: str = ""):
    reply = await _handler.handle(
        ProxyRequest(method=req.method, headers=req.headers, body=await req.body())
    )
    return _to_response(reply)


def main():  # pragma: no cover
    import uvicorn

    uvicorn.run(app, host=_cfg.host, port=_cfg.port)


if __name__ == "__main__":  # pragma: no cover
    main()
