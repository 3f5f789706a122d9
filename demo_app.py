"""Demo FastAPI application with the response finalizer.

This application demonstrates the finalizer turning handler results into
responses.
Run with: python demo_app.py
Then try:
    curl -i localhost:8000/api/hello
    curl -i localhost:8000/api/users/1
    curl -i -X POST localhost:8000/api/users
    curl -i localhost:8000/api/broken
    curl -i localhost:8000/api/unencodable
"""

from datetime import UTC, datetime

import uvicorn
from fastapi import FastAPI
from pydantic import BaseModel

from response_finalizer.adapters.asgi import responder
from response_finalizer.config import FinalizerConfig
from response_finalizer.core.finalizer import ResponseFinalizer
from response_finalizer.exceptions import HTTPError
from response_finalizer.observability.logging import configure_logging

configure_logging(level="DEBUG", json_output=False)

# Create FastAPI app
app = FastAPI(
    title="Response Finalizer Demo",
    description="Demo API showing handler results finalized into responses",
    version="0.1.0",
)

finalizer = ResponseFinalizer(FinalizerConfig.from_env())

USERS = {1: "tree.xie"}


class UserResponse(BaseModel):
    id: int
    name: str
    created_at: datetime


@responder(finalizer=finalizer)
async def hello(request, ctx):
    """Plain text body."""
    ctx.body = "hello, world"


@responder(finalizer=finalizer)
async def get_user(request, ctx):
    """Structured body, 200 by default."""
    user_id = int(request.path_params["user_id"])
    if user_id not in USERS:
        raise HTTPError(f"user {user_id} not found", status_code=404, category="users")
    ctx.body = UserResponse(id=user_id, name=USERS[user_id], created_at=datetime.now(UTC))


@responder(finalizer=finalizer)
async def create_user(request, ctx):
    """Structured body with a preset status."""
    user_id = max(USERS) + 1
    USERS[user_id] = f"user-{user_id}"
    ctx.created({"id": user_id, "name": USERS[user_id]})


@responder(finalizer=finalizer)
async def broken(request, ctx):
    """Sets neither status nor body."""


@responder(finalizer=finalizer)
async def unencodable(request, ctx):
    """A body the serializer cannot encode."""
    ctx.body = {"callback": print}


app.add_route("/api/hello", hello, methods=["GET"])
app.add_route("/api/users/{user_id:int}", get_user, methods=["GET"])
app.add_route("/api/users", create_user, methods=["POST"])
app.add_route("/api/broken", broken, methods=["GET"])
app.add_route("/api/unencodable", unencodable, methods=["GET"])


if __name__ == "__main__":
    print("Starting Response Finalizer Demo on http://localhost:8000")
    uvicorn.run(app, host="0.0.0.0", port=8000)
