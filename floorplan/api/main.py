"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from floorplan.api.routes import router


def create_app() -> FastAPI:
    app = FastAPI(
        title="Floor Plan Editor",
        description="Interactive floor plan geometry editing over HTTP",
        version="0.1.0",
    )

    # Browser front ends are served from another origin during development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router, prefix="/api")

    return app


app = create_app()
