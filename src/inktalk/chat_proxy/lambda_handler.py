"""Serverless entry point: ``inktalk.chat_proxy.lambda_handler.handler``."""

from mangum import Mangum

from .app import app

# Lifespan events are not delivered by serverless runtimes.
handler = Mangum(app, lifespan="off")
