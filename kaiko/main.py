import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session, sessionmaker

from kaiko.api.v1.health import router as health_router
from kaiko.api.v1.users import router as users_router
from kaiko.core.errors import KaikoError
from kaiko.core.logging import configure_logging
from kaiko.core.settings import settings
from kaiko.db.session import build_engine, build_session_factory

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Injected factories (tests) own their engine; otherwise build one per app.
    engine = None
    if app.state.session_factory is None:
        engine = build_engine(settings.DATABASE_URL)
        app.state.session_factory = build_session_factory(engine)
    try:
        yield
    finally:
        if engine is not None:
            engine.dispose()
            app.state.session_factory = None


async def handle_kaiko_error(request: Request, exc: KaikoError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.client_message})


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


def create_app(session_factory: sessionmaker[Session] | None = None) -> FastAPI:
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)
    app.state.session_factory = session_factory

    # Local dev: allow the Next.js dev server to call the API.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(KaikoError, handle_kaiko_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)

    app.include_router(
        health_router,
        prefix=settings.API_V1_STR,
        tags=["Health"],
    )
    app.include_router(
        users_router,
        prefix=settings.API_V1_STR,
        tags=["Users"],
    )
    return app


app = create_app()
