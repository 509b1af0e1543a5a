"""
Workbench FastAPI application.

Entry point for the API server.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from backend.config import settings
from backend.context import create_context
from backend.routes import preview as preview_routes
from backend.routes import workspace as workspace_routes
from backend.routes import ws as ws_routes
from engine.workspace.types import ValidationError

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI application.

    Handles startup and shutdown logic:
    - Build the workbench context (store, compile client, log bridge, orchestrator)
    - Flush pending editor commits, drain compiles and close the log channel on shutdown
    """
    # Startup
    if getattr(app.state, "context", None) is None:
        app.state.context = create_context()
    print("Workbench context initialized")

    yield

    # Shutdown
    await app.state.context.aclose()
    app.state.context = None
    print("Workbench context closed")


app = FastAPI(
    title="Workbench",
    docs_url=None,
    redoc_url=None,
    lifespan=lifespan,
)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Rejected tree operations: nothing was mutated."""
    logger.info("workspace: rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=400, content={"detail": str(exc)})


# Register routes
app.include_router(workspace_routes.router)
app.include_router(preview_routes.router)
app.include_router(ws_routes.router)


@app.get("/health")
async def health():
    """Health check endpoint for uptime monitoring."""
    return {"status": "ok"}
