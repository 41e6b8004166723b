"""FastAPI application factory"""

import logging
import time

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.adapter.db.immutability import register_immutability_listeners
from src.api.error import ClientError, client_error_handler
from src.api.routes import customers, distributions, reports

logger = logging.getLogger(__name__)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Invalid request parameters",
                "reason": f"{field}: {first.get('msg', 'invalid')}" if field else first.get("msg", "invalid"),
            }
        },
    )


def create_app(config) -> FastAPI:
    logging.getLogger().setLevel(config.LOG_LEVEL.upper())
    register_immutability_listeners()

    app = FastAPI(
        title="Package Settlement Service",
        description="Settles customer package releases against cash, store credit and account balances",
        version="1.0.0",
    )

    if config.CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.CORS_ORIGINS,
            allow_credentials=config.CORS_ALLOW_CREDENTIALS,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    if config.ENABLE_LOGGING_MIDDLEWARE:

        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            start = time.time()
            response = await call_next(request)
            elapsed_ms = int((time.time() - start) * 1000)
            logger.info(
                f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms}ms)"
            )
            return response

    app.add_exception_handler(ClientError, client_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    app.include_router(distributions.router, prefix=config.API_PREFIX)
    app.include_router(customers.router, prefix=config.API_PREFIX)
    app.include_router(reports.router, prefix=config.API_PREFIX)

    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "ok"}

    return app
