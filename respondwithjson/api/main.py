"""FastAPI application factory.

``create_app`` wires the helpers into an application:
- Logging setup from settings
- EnvelopeResponse as the default response class
- Envelope-shaped exception handlers
- A health check endpoint

Services include their own routers on the returned application.
"""

from fastapi import FastAPI

from respondwithjson.api.middleware.error_handler import register_exception_handlers
from respondwithjson.api.utils.responses import EnvelopeResponse
from respondwithjson.api.writer import respond_with_success
from respondwithjson.core.config import Settings, get_settings
from respondwithjson.core.logging import setup_logging


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings instance. If not provided, will use get_settings().

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    setup_logging(settings)

    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        docs_url=settings.docs_url,
        openapi_url=settings.openapi_url,
        redoc_url=None,
        default_response_class=EnvelopeResponse,
    )

    register_exception_handlers(application)

    @application.get("/health")
    async def health() -> EnvelopeResponse:
        """Health check endpoint for monitoring and container orchestration.

        Returns:
            EnvelopeResponse: Success envelope with the service status.
        """
        return respond_with_success({"status": "healthy"})

    return application
