"""FastAPI application factory with lifespan management."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from dogmatch.config import get_config
from dogmatch.data.processor import load_dogs
from dogmatch.matching.ranker import DogRanker

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Initialize shared resources on startup, clean up on shutdown.

    Loads the dog catalog once and creates the DogRanker shared across
    all requests. A missing catalog starts the service with no dogs.
    """
    config = get_config()

    app.state.config = config
    app.state.ranker = DogRanker(
        rules=config.matching_config(),
        max_workers=config.rank_workers,
    )

    try:
        app.state.dogs = load_dogs(config.catalog_path)
    except (FileNotFoundError, ValueError) as exc:
        logger.warning("Starting without a dog catalog: %s", exc)
        app.state.dogs = []

    yield

    app.state.dogs = []


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    app = FastAPI(
        title="Dog Match",
        description="Quiz-based compatibility ranking for adoptable dogs",
        version="0.1.0",
        lifespan=lifespan,
    )

    from dogmatch.api.routes import router

    app.include_router(router)

    return app
