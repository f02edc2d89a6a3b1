"""
Exercise tracker API entrypoint.

Run locally from `api/`:

    DATABASE_URL=memory:// uvicorn main:app --reload
    DATABASE_URL=postgresql://... python main.py
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from core import config
from core.db import Database
from core.errors import install_exception_handlers
from core.logging_config import setup_logging
from core.store import Store
from exercises import router as exercises_router
from exercises.repository import ExerciseRepository, MemoryExerciseRepository
from users import router as users_router
from users.repository import MemoryUserRepository, UserRepository

STATIC_DIR = Path(__file__).resolve().parent / "static"
MEMORY_SCHEME = "memory://"

logger = logging.getLogger(__name__)


async def open_store(database_url: str) -> Store:
    if database_url.startswith(MEMORY_SCHEME):
        return Store(
            users=MemoryUserRepository(),
            exercises=MemoryExerciseRepository(),
            backend="memory",
        )

    database = Database(
        database_url,
        min_size=config.db_pool_min_size(),
        max_size=config.db_pool_max_size(),
        command_timeout=config.db_command_timeout_s(),
    )
    await database.connect()
    try:
        await database.ensure_schema()
    except Exception:
        await database.close()
        raise
    return Store(
        users=UserRepository(database),
        exercises=ExerciseRepository(database),
        backend="postgres",
        database=database,
    )


def create_app(database_url: str | None = None) -> FastAPI:
    """
    Build the app. `database_url` overrides DATABASE_URL (read at startup).
    """
    setup_logging(config.log_level(), config.log_file())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # One store per process, opened before the first request.
        store = await open_store(database_url or config.database_url())
        app.state.store = store
        logger.info("store_opened backend=%s", store.backend)
        try:
            yield
        finally:
            await store.close()
            app.state.store = None
            logger.info("store_closed backend=%s", store.backend)

    app = FastAPI(title="Exercise Tracker", lifespan=lifespan)

    # The landing page and third-party clients call the API cross-origin.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins(),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_exception_handlers(app)

    app.include_router(users_router.router, tags=["users"])
    app.include_router(exercises_router.router, tags=["exercises"])
    app.mount("/public", StaticFiles(directory=STATIC_DIR), name="public")

    @app.get("/", include_in_schema=False)
    def index() -> FileResponse:
        return FileResponse(STATIC_DIR / "index.html")

    @app.get("/health")
    def health() -> dict:
        store = getattr(app.state, "store", None)
        return {"status": "ok", "store": store.backend if store is not None else None}

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host=config.host(), port=config.port(), log_level=config.log_level().lower())
