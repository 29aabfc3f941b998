"""Scribe Backend: FastAPI application entry point."""

import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.routes import admin, auth, conversation, prompts
from backend.auth import TokenRevocations
from backend.middleware.rate_limit import RateLimitMiddleware, default_rules

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    from backend.database import create_record_store
    from backend.ai.provider import ModelProvider
    from scribe.studio import Studio

    store = create_record_store()
    # Reads the persisted session pointer once
    app.state.studio = Studio(store, auth_latency=float(os.getenv("SCRIBE_AUTH_LATENCY", "0.8")))
    app.state.provider = ModelProvider()
    yield
    store.dispose()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Scribe API",
        description="Writing studio: authoring sessions, quotas and administration",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS: allow frontend origins
    _frontend_url = os.getenv("FRONTEND_URL")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[_frontend_url] if _frontend_url else [],
        allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(
        RateLimitMiddleware,
        requests_per_minute=int(os.getenv("SCRIBE_RATE_LIMIT", "60")),
        rules=default_rules(
            ai_limit=int(os.getenv("SCRIBE_AI_RATE_LIMIT", "10")),
            auth_limit=int(os.getenv("SCRIBE_AUTH_RATE_LIMIT", "5")),
        ),
    )

    # Signed-out bearer tokens
    app.state.revocations = TokenRevocations()

    # Register route modules
    app.include_router(auth.router, prefix="/api", tags=["Auth"])
    app.include_router(conversation.router, prefix="/api", tags=["Conversation"])
    app.include_router(prompts.router, prefix="/api", tags=["Prompts"])
    app.include_router(admin.router, prefix="/api", tags=["Admin"])

    @app.get("/api/health")
    async def health_check():
        return {"status": "healthy", "service": "scribe-backend"}

    return app


app = create_app()
