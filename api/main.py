import logging
import time
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request

from api.shared.dtos import ErrorResponse, HealthCheckResponse
from api.shared.exceptions import ChatServiceException
from core.logging_config import configure_logging
from core.settings import SETTINGS
from di.container import ApplicationContainer as DependencyContainer
from infra.demo_data import seed_demo_data

configure_logging(SETTINGS.APP.LOG_LEVEL, SETTINGS.APP.JSON_LOGS)

logger = structlog.get_logger("chat")


class CustomFastAPI(FastAPI):
    container: DependencyContainer


@asynccontextmanager
async def lifespan(_app: CustomFastAPI):
    logger.info("Starting application initialization...")
    start_time = time.time()

    try:
        provider = _app.container.infrastructure.model_provider()
        logger.info(
            "Model provider selected",
            provider=provider.kind.value,
            default_model=provider.default_model,
        )

        if SETTINGS.APP.SEED_DEMO_DATA:
            await seed_demo_data(
                _app.container.services.project_repository(),
                _app.container.services.chat_repository(),
            )

        logger.info(
            f"✅ Application startup completed in {time.time() - start_time:.2f}s"
        )
    except Exception as e:
        logger.exception(f"❌ Failed to initialize application: {str(e)}")
        raise

    yield

    logger.info("Application shutdown complete")


async def service_exception_handler(request: Request, exc: ChatServiceException):
    if exc.status_code >= 500:
        logger.error(
            "Request failed", path=request.url.path, error_code=exc.error_code, error=exc.message
        )
    body = ErrorResponse(
        error=exc.error_code,
        detail=exc.message,
        details=exc.details or None,
        status_code=exc.status_code,
    )
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content={"error": "Validation Error", "detail": str(exc), "status_code": 422},
    )


async def general_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception", error=str(exc))
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal Server Error",
            "detail": "An unexpected error occurred",
            "status_code": 500,
        },
    )


def create_fastapi_app() -> CustomFastAPI:
    origins = {
        "http://localhost",
        "http://localhost:3000",
        "http://localhost:8000",
    }

    _app = CustomFastAPI(
        title="Chat API",
        description="Chats, projects and AI-generated replies",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Initialize dependency container
    _app.container = DependencyContainer()
    _app.container.infrastructure.config.from_dict(SETTINGS.model_dump())

    # Keep uvicorn's own loggers on
    logging.getLogger("uvicorn.error").disabled = False
    logging.getLogger("uvicorn.access").disabled = False

    _app.add_middleware(
        CORSMiddleware,
        allow_origins=list(origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _app.add_exception_handler(ChatServiceException, service_exception_handler)
    _app.add_exception_handler(RequestValidationError, validation_exception_handler)
    _app.add_exception_handler(Exception, general_exception_handler)

    # Include feature routers
    from api.features.chats.router import router as chats_router
    from api.features.projects.router import router as projects_router

    prefix = SETTINGS.APP.API_PREFIX.rstrip("/")
    _app.include_router(chats_router, prefix=f"{prefix}/chats", tags=["Chats"])
    _app.include_router(projects_router, prefix=f"{prefix}/projects", tags=["Projects"])

    @_app.get("/health", response_model=HealthCheckResponse)
    async def health():
        return HealthCheckResponse(status="ok")

    return _app


app = create_fastapi_app()
