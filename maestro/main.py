from contextlib import asynccontextmanager

from fastapi import FastAPI

from maestro import __version__
from maestro.api.v1.middleware.error_handler import ErrorHandlerMiddleware
from maestro.api.v1.middleware.logging_middleware import LoggingMiddleware
from maestro.api.v1.router import v1_router
from maestro.config import settings
from maestro.dependencies import build_git_service, build_llm_client, build_registry
from maestro.manifest.updater import ManifestLocks
from maestro.utils.logging import get_logger, setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(debug=settings.debug)
    logger = get_logger("startup")
    logger.info("Starting Maestro", version=__version__)

    # Tests may pre-populate the registry with stub handlers.
    if getattr(app.state, "handler_registry", None) is None:
        app.state.handler_registry = build_registry(build_llm_client(), build_git_service())
    logger.info("Handler registry initialized", handler_count=len(app.state.handler_registry))

    yield

    logger.info("Shutting down")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Maestro",
        description="Skill-routed concurrent task orchestration",
        version=__version__,
        lifespan=lifespan,
    )

    # The last middleware added is the outermost: the access log sees the
    # JSON error responses produced by the error handler.
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(LoggingMiddleware)

    app.include_router(v1_router, prefix="/api/v1")

    # Concurrent runs of the same manifest serialize their rewrites here.
    app.state.manifest_locks = ManifestLocks()

    return app


app = create_app()


def serve() -> None:
    import uvicorn

    uvicorn.run("maestro.main:app", host=settings.host, port=settings.port)
