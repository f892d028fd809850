from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from .error import ClientError, ServerError
import logging

logger = logging.getLogger(__name__)


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = {"code": exc.base_error.code, "message": exc.base_error.message}
    logger.warning(
        "%s %s rejected with %s: %s",
        request.method,
        request.url.path,
        exc.status_code,
        exc.base_error.code,
    )
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


async def handle_server_error(request: Request, exc: ServerError):
    error_dict = {"code": exc.base_error.code, "message": "Internal server error"}
    # Details stay in the log, the caller gets a generic message
    logger.error(
        "%s %s failed with %s: %s",
        request.method,
        request.url.path,
        exc.base_error.code,
        exc.base_error.message,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": error_dict}
    )


def create_app(ApplicationConfig) -> FastAPI:
    app = FastAPI(title=ApplicationConfig.APP_NAME, version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from src.api.routes import health_check, recovery

    app.include_router(health_check.router, tags=["Health"])
    app.include_router(recovery.router, tags=["Recovery"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)

    return app
