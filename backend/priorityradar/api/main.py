"""Factory de la aplicacion FastAPI para Priority Compliance Radar."""

from __future__ import annotations

from datetime import date

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from priorityradar.api.routers.priorities import router as priorities_router
from priorityradar.config import settings
from priorityradar.domain.clock import SystemClock
from priorityradar.logging_utils import configure_logging, get_logger
from priorityradar.repositories import PrioritiesRepo


def create_app() -> FastAPI:
    """Crea y configura la instancia de FastAPI."""
    configure_logging(force=True)
    logger = get_logger(__name__)

    app = FastAPI(title=settings.app_name)

    app.add_middleware(  # pyright: ignore[reportUnknownMemberType]
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Simple DI via app.state
    app.state.settings = settings
    app.state.priorities_repo = PrioritiesRepo(settings.priorities_path)
    app.state.clock = SystemClock(settings.app_tz)

    app.include_router(priorities_router, prefix="/priorities", tags=["priorities"])

    logger.debug("FastAPI app created with priorities at %s", settings.priorities_path)

    @app.get("/health", include_in_schema=False, status_code=200)
    def health() -> dict[str, str]:  # pyright: ignore[reportUnusedFunction]
        return {"status": "ok", "date": date.today().isoformat()}

    return app


app = create_app()
