from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.core.middleware import RequestLoggingMiddleware, RequestSizeLimitMiddleware


def build_app(max_bytes):
    app = FastAPI()
    app.add_middleware(RequestSizeLimitMiddleware, max_bytes=max_bytes)
    app.add_middleware(RequestLoggingMiddleware)

    @app.post("/echo")
    def echo(payload: dict) -> dict:
        return payload

    return app


def test_body_over_limit_is_rejected():
    with TestClient(build_app(10)) as client:
        response = client.post("/echo", json={"text": "x" * 100})
    assert response.status_code == 413
    assert response.json()["details"]["max_bytes"] == 10


def test_body_within_limit_passes_through():
    with TestClient(build_app(1000)) as client:
        response = client.post("/echo", json={"text": "short"})
    assert response.status_code == 200
    assert response.json() == {"text": "short"}
    assert "x-response-time-ms" in response.headers
