"""Scenario 1: Body Variant Conformance Tests

This module tests the finalizer end to end through a FastAPI application:
- Text bodies are sent as text/plain with status 200
- Byte bodies are sent as application/octet-stream
- Structured bodies are JSON encoded and keep their status
- A handler that sets nothing yields a 500 with the category message
- Unencodable bodies and unexpected handler errors yield a 500
- Stream bodies are streamed untouched
"""

import io

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel

from response_finalizer.adapters.asgi import finalizer_endpoint, responder
from response_finalizer.config import FinalizerConfig
from response_finalizer.core.finalizer import ResponseFinalizer
from response_finalizer.exceptions import HTTPError


class User(BaseModel):
    """User model for testing."""

    name: str


@pytest.fixture
def finalizer() -> ResponseFinalizer:
    """Create a finalizer using the fastest serializer, as the app would."""
    return ResponseFinalizer(FinalizerConfig(fastest=True))


@pytest.fixture
def app(finalizer: ResponseFinalizer) -> FastAPI:
    """Create a FastAPI app whose routes run through the finalizer."""
    test_app = FastAPI()

    @responder(finalizer=finalizer)
    async def text(request, ctx):
        ctx.body = "abc"

    @responder(finalizer=finalizer)
    async def raw(request, ctx):
        ctx.body = b"abc"

    @responder(finalizer=finalizer)
    async def create_user(request, ctx):
        ctx.created(User(name="tree.xie"))

    @responder(finalizer=finalizer)
    async def nothing(request, ctx):
        return None

    @responder(finalizer=finalizer)
    async def unencodable(request, ctx):
        ctx.body = lambda: None

    @responder(finalizer=finalizer)
    async def stream(request, ctx):
        ctx.body = io.BytesIO(b"abcd")

    @responder(finalizer=finalizer)
    async def chunks(request, ctx):
        async def generate():
            yield b"ab"
            yield b"cd"

        ctx.set_header("Content-Type", "text/event-stream")
        ctx.body = generate()

    @responder(finalizer=finalizer)
    def sync_handler(request, ctx):
        ctx.ok({"sync": True})

    @responder(finalizer=finalizer)
    async def custom_type(request, ctx):
        ctx.set_header("Content-Type", "text/csv")
        ctx.body = "a,b\n1,2\n"

    @responder(finalizer=finalizer)
    async def not_found(request, ctx):
        raise HTTPError("user not found", status_code=404, category="users")

    @responder(finalizer=finalizer)
    async def no_content(request, ctx):
        ctx.no_content()

    test_app.add_route("/text", text, methods=["GET"])
    test_app.add_route("/bytes", raw, methods=["GET"])
    test_app.add_route("/users", create_user, methods=["POST"])
    test_app.add_route("/nothing", nothing, methods=["GET"])
    test_app.add_route("/unencodable", unencodable, methods=["GET"])
    test_app.add_route("/stream", stream, methods=["GET"])
    test_app.add_route("/chunks", chunks, methods=["GET"])
    test_app.add_route("/sync", sync_handler, methods=["GET"])
    test_app.add_route("/csv", custom_type, methods=["GET"])
    test_app.add_route("/missing", not_found, methods=["GET"])
    test_app.add_route("/empty", no_content, methods=["DELETE"])

    return test_app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create a test client for the app."""
    return TestClient(app)


class TestBodyVariants:
    """Each body variant reaches the wire with the right headers."""

    def test_text(self, client: TestClient) -> None:
        response = client.get("/text")

        assert response.status_code == 200
        assert response.content == b"abc"
        assert response.headers["content-type"] == "text/plain; charset=UTF-8"

    def test_bytes(self, client: TestClient) -> None:
        response = client.get("/bytes")

        assert response.status_code == 200
        assert response.content == b"abc"
        assert response.headers["content-type"] == "application/octet-stream"

    def test_structured(self, client: TestClient) -> None:
        response = client.post("/users")

        assert response.status_code == 201
        assert response.content == b'{"name":"tree.xie"}'
        assert response.headers["content-type"] == "application/json; charset=UTF-8"

    def test_sync_handler(self, client: TestClient) -> None:
        response = client.get("/sync")

        assert response.status_code == 200
        assert response.json() == {"sync": True}

    def test_existing_content_type(self, client: TestClient) -> None:
        response = client.get("/csv")

        assert response.headers["content-type"] == "text/csv"
        assert response.text == "a,b\n1,2\n"

    def test_no_content(self, client: TestClient) -> None:
        response = client.delete("/empty")

        assert response.status_code == 204
        assert response.content == b""


class TestErrors:
    """Failures are rendered as responses, never crash the app."""

    def test_invalid_response(self, client: TestClient) -> None:
        response = client.get("/nothing")

        assert response.status_code == 500
        assert response.text == "category=response-finalizer, message=invalid response"

    def test_unencodable(self, client: TestClient) -> None:
        response = client.get("/unencodable")

        assert response.status_code == 500
        assert response.text.startswith("message=")
        assert "not JSON serializable" in response.text

    def test_handler_http_error(self, client: TestClient) -> None:
        response = client.get("/missing")

        assert response.status_code == 404
        assert response.text == "category=users, message=user not found"

    def test_json_error_format(self) -> None:
        app = FastAPI()

        async def nothing(request, ctx):
            return None

        app.add_route(
            "/nothing",
            finalizer_endpoint(nothing, config=FinalizerConfig(error_format="json")),
            methods=["GET"],
        )
        response = TestClient(app).get("/nothing")

        assert response.status_code == 500
        assert response.headers["content-type"] == "application/json; charset=UTF-8"
        assert response.json() == {
            "statusCode": 500,
            "category": "response-finalizer",
            "message": "invalid response",
            "exception": True,
        }

    def test_unexpected_exception_rendered_as_500(self) -> None:
        app = FastAPI()

        async def broken(request, ctx):
            raise RuntimeError("abcd")

        app.add_route("/broken", finalizer_endpoint(broken), methods=["GET"])
        response = TestClient(app).get("/broken")

        assert response.status_code == 500
        assert response.headers["content-type"] == "text/plain; charset=UTF-8"
        assert response.text == "message=abcd"

    def test_unexpected_exception_json_format(self) -> None:
        app = FastAPI()

        async def broken(request, ctx):
            raise KeyError("abcd")

        app.add_route(
            "/broken",
            finalizer_endpoint(broken, config=FinalizerConfig(error_format="json")),
            methods=["GET"],
        )
        response = TestClient(app).get("/broken")

        assert response.status_code == 500
        assert response.json() == {
            "statusCode": 500,
            "message": "'abcd'",
            "exception": True,
        }


class TestStreams:
    """Stream bodies bypass buffering and reach the client intact."""

    def test_file_like(self, client: TestClient) -> None:
        response = client.get("/stream")

        assert response.status_code == 200
        assert response.content == b"abcd"

    def test_async_generator(self, client: TestClient) -> None:
        response = client.get("/chunks")

        assert response.status_code == 200
        assert response.content == b"abcd"
        assert response.headers["content-type"].startswith("text/event-stream")
