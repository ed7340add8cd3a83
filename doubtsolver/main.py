"""
Doubt Solver: Main Application
FastAPI app. Mounts routers, CORS, error handlers, uploaded images.
One app serves both variants (doubt_solver, decision_advisor); the
variant profile decides persistence, image upload and the LLM preamble.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from doubtsolver.config import (
    CORS_ORIGINS, LOG_LEVEL, HOST, UPLOAD_DIR, VERSION, VariantProfile, load_profile,
)
from doubtsolver.database import init_db
from doubtsolver.errors import DoubtSolverError
from doubtsolver.store import MemoryStore

logger = logging.getLogger("doubtsolver")


# ─── Lifespan (startup/shutdown) ─────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: logging + tables (when persistent). Shutdown: log only."""
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )

    profile = app.state.profile
    if profile.persistence:
        logger.info("Initializing database...")
        init_db()
    else:
        logger.info("Persistence disabled: history and tasks live in memory")

    logger.info(f"{profile.title} v{VERSION} ready (model={profile.model})")
    yield
    logger.info("Shutting down")


# ─── Error Handlers ──────────────────────────────────────────────────────────

def _register_error_handlers(app: FastAPI) -> None:
    """Every error leaves as {"error": message}."""

    @app.exception_handler(DoubtSolverError)
    async def _app_error(request: Request, exc: DoubtSolverError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def _invalid_request(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = "Invalid request"
        if errors:
            field = ".".join(str(p) for p in errors[0].get("loc", ()) if p != "body")
            if field:
                message = f"Invalid {field}: {errors[0].get('msg', '')}"
        return JSONResponse(status_code=400, content={"error": message})

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    @app.exception_handler(Exception)
    async def _unexpected(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


# ─── App ─────────────────────────────────────────────────────────────────────

def create_app(profile: Optional[VariantProfile] = None) -> FastAPI:
    profile = profile or load_profile()

    app = FastAPI(
        title=f"{profile.title} API",
        description="Answers student questions with an LLM and tracks weak topics",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.profile = profile
    app.state.memory_store = MemoryStore()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _register_error_handlers(app)

    from doubtsolver.routers import doubts, tasks, uploads
    app.include_router(doubts.router)
    app.include_router(tasks.router)

    if profile.image_upload:
        UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
        app.include_router(uploads.router)
        app.mount(uploads.UPLOAD_URL_PREFIX, StaticFiles(directory=str(UPLOAD_DIR)), name="uploads")

    @app.get("/")
    async def root():
        return {"status": "ok", "message": f"{profile.title} API running"}

    @app.get("/health")
    async def health():
        return {"status": "ok", "variant": profile.name, "version": VERSION}

    return app


app = create_app()


def run():
    """Console entry point: `doubt-solver`."""
    port = app.state.profile.port
    logger.info(f"Starting Uvicorn server on {HOST}:{port}")
    uvicorn.run("doubtsolver.main:app", host=HOST, port=port)


if __name__ == "__main__":
    run()
