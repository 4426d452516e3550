"""FastAPI application entry point.

This module creates and configures the FastAPI application, including:
- Exception handlers for API errors
- API v1 router mounting
- Health check endpoint
- The interview collaborators (session registry, AI orchestrator, guided
  engine) built once and stored on ``app.state``
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from resume_builder.api.v1.router import router as v1_router
from resume_builder.core.config import Settings, settings as default_settings
from resume_builder.core.errors import APIError
from resume_builder.core.responses import ErrorDetail, ErrorResponse
from resume_builder.interview.guided import GuidedInterview
from resume_builder.interview.orchestrator import InterviewOrchestrator
from resume_builder.interview.sessions import SessionRegistry
from resume_builder.providers.completion import CompletionClient
from resume_builder.providers.config import ProviderConfig
from resume_builder.providers.factory import create_llm_provider
from resume_builder.providers.llm.base import LLMProvider

logger = structlog.get_logger()


def api_error_handler(_request: Request, exc: APIError) -> JSONResponse:
    """Handle custom API errors.

    Args:
        request: The incoming request.
        exc: The APIError that was raised.

    Returns:
        JSONResponse with error envelope and appropriate status code.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=ErrorDetail(
                code=exc.code,
                message=exc.message,
                details=exc.details,
            )
        ).model_dump(),
    )


def validation_error_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Convert FastAPI's validation errors to the standard error envelope.

    Returns:
        JSONResponse with VALIDATION_ERROR code and field-level details.
    """
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(
            error=ErrorDetail(
                code="VALIDATION_ERROR",
                message="Request validation failed",
                details=[
                    {"loc": list(e["loc"]), "msg": e["msg"], "type": e["type"]}
                    for e in exc.errors()
                ],
            )
        ).model_dump(),
    )


def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unhandled exceptions.

    Returns 500 INTERNAL_ERROR without exposing stack traces; the
    exception is logged.
    """
    logger.exception("Unhandled exception", exc_info=exc, path=str(request.url.path))

    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error=ErrorDetail(
                code="INTERNAL_ERROR",
                message="An unexpected error occurred",
            )
        ).model_dump(),
    )


def create_app(
    settings: Settings | None = None,
    provider: LLMProvider | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings. Defaults to the environment-loaded
            settings.
        provider: LLM provider for AI-mode turns. Built from ``settings``
            when omitted.

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or default_settings
    if provider is None:
        provider = create_llm_provider(ProviderConfig.from_settings(settings))

    app = FastAPI(
        title="Resume Builder API",
        version="1.0.0",
        description="Interview-style resume builder",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "X-Request-ID"],
    )

    # Order matters: specific handlers first, then catch-all
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, internal_error_handler)

    client = CompletionClient(
        provider,
        temperature=settings.completion_temperature,
        max_tokens=settings.completion_max_tokens,
    )
    app.state.settings = settings
    app.state.registry = SessionRegistry()
    app.state.orchestrator = InterviewOrchestrator(
        client,
        confidence_threshold=settings.confidence_threshold,
        max_follow_ups=settings.max_follow_ups,
        max_multi_entry_follow_ups=settings.max_multi_entry_follow_ups,
    )
    app.state.guided = GuidedInterview()

    app.include_router(v1_router, prefix="/api/v1")

    # Health check endpoint (outside versioned API)
    @app.get("/health")
    def health_check() -> dict:
        """Health check endpoint for monitoring.

        Returns:
            {"status": "healthy"} if service is running.
        """
        return {"status": "healthy"}

    logger.info(
        "app_created",
        environment=settings.environment,
        llm_provider=provider.provider_name,
    )
    return app


# Used by uvicorn: uvicorn resume_builder.main:app
app = create_app()
