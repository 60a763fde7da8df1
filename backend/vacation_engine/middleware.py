from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi.middleware.cors import CORSMiddleware

if TYPE_CHECKING:
    from fastapi import FastAPI

    from vacation_engine.config import Settings

# Dev auth headers read by api.deps.get_auth_context.
AUTH_HEADERS = ["X-Company-Id", "X-User-Id", "X-Role", "X-Is-Admin"]


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Configure CORS for the web client: JSON bodies plus the auth headers."""
    app.add_middleware(
        CORSMiddleware,  # ty: ignore[invalid-argument-type]
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["Content-Type", *AUTH_HEADERS],
    )
