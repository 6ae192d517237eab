import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from raffle_desk.libs.result import Error
from .error import ClientError, ServerError, error_envelope

logger = logging.getLogger(__name__)


async def handle_client_error(request: Request, exc: ClientError):
    logger.warning(f"Client error: {exc.base_error.code} {exc.base_error.message}")
    body = error_envelope(exc.base_error, exc.status_code)
    headers = None
    if "retryAfter" in body:
        headers = {"Retry-After": str(body["retryAfter"])}
    return JSONResponse(status_code=exc.status_code, content=body, headers=headers)


async def handle_server_error(request: Request, exc: ServerError):
    logger.error(f"Server error: {exc.base_error.code} {exc.base_error.details}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_envelope(exc.base_error, status.HTTP_500_INTERNAL_SERVER_ERROR),
    )


async def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    error = Error(
        "SERVER_ERROR", "Internal server error", {"detail": type(exc).__name__}
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_envelope(error, status.HTTP_500_INTERNAL_SERVER_ERROR),
    )


def create_app(ApplicationConfig) -> FastAPI:
    logging.basicConfig(level=ApplicationConfig.LOG_LEVEL.upper())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if ApplicationConfig.AUTO_CREATE_TABLES:
            from raffle_desk.depends import init_db

            await init_db()
            logger.info("Database tables created/verified")
        yield

        from raffle_desk.depends import close_rate_limiter

        await close_rate_limiter()
        logger.info("Rate limiter store closed")

    app = FastAPI(title="Raffle Desk API", version="0.1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if ApplicationConfig.ENABLE_LOGGING_MIDDLEWARE:

        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            start = time.time()
            response = await call_next(request)
            elapsed_ms = round((time.time() - start) * 1000, 2)
            logger.info(
                f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms}ms)"
            )
            return response

    from raffle_desk.api.routes import actions, health_check

    app.include_router(health_check.router, tags=["Health"])
    app.include_router(actions.router, prefix=ApplicationConfig.API_PREFIX, tags=["Actions"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    return app
