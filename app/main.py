import logging

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routes.activities import router as activities_router
from .routes.estimate import router as estimate_router
from .services.emissions import EmissionsService
from .services.entry_store import EntryStore
from .services.submission import ActivitySubmission
from .settings import Settings


def create_app(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    settings = settings or Settings.from_env()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = FastAPI(
        title="Carbon Tracker",
        version="0.3.0",
        description="Trip tracker that estimates CO₂e per trip through Climatiq.",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    emissions = EmissionsService(settings, transport=transport)
    store = EntryStore()
    app.state.settings = settings
    app.state.emissions = emissions
    app.state.store = store
    app.state.submission = ActivitySubmission(emissions, store)

    @app.get("/health")
    async def health():
        return {"status": "ok", "service": "carbon-tracker"}

    app.include_router(activities_router)
    app.include_router(estimate_router)

    return app


app = create_app()
