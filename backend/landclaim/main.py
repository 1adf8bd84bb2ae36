"""FastAPI app factory."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from landclaim.config import settings
from landclaim.engine.collision import CollisionEngine
from landclaim.engine.config import ClaimConfig
from landclaim.engine.session import SessionStore
from landclaim.engine.validator import create_validator

load_dotenv()

logging.basicConfig(
    level=getattr(logging, settings.landclaim_log_level.upper(), logging.INFO),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)

logger = logging.getLogger(__name__)


def create_app(config: ClaimConfig | None = None) -> FastAPI:
    claim_config = config or ClaimConfig()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        logger.info("Shutting down: stopping %d sessions", len(app.state.sessions))
        app.state.sessions.close_all()

    app = FastAPI(
        title="landclaim",
        description="Territory claiming & collision geometry engine for a walk-to-claim game",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.validator = create_validator(claim_config)
    app.state.collision_engine = CollisionEngine(claim_config)
    app.state.sessions = SessionStore(
        claim_config,
        auto_schedule=settings.collision_auto_schedule,
        idle_timeout=settings.session_idle_timeout_seconds,
    )

    from landclaim.api.router import api_router

    app.include_router(api_router)

    return app


app = create_app()
