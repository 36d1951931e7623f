"""Route handlers of the backend listener."""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

GREETING = "Hello from the backend!"

router = APIRouter()


@router.get("/", response_class=PlainTextResponse)
async def index() -> str:
    """Static greeting; the only route the backend answers."""
    return GREETING
