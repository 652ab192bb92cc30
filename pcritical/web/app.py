"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI

from pcritical import __version__
from pcritical.web.api import router


def create_app() -> FastAPI:
    app = FastAPI(title="pcritical", version=__version__)
    app.include_router(router)
    return app
