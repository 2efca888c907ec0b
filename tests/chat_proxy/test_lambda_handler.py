from mangum import Mangum


def test_lambda_handler_wraps_asgi_app(monkeypatch):
    monkeypatch.setenv("GROQ_API_KEY", "gsk-lambda")
    from inktalk.chat_proxy import lambda_handler

    assert isinstance(lambda_handler.handler, Mangum)
    assert lambda_handler.handler.app is lambda_handler.app
