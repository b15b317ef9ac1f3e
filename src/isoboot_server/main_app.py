import logging

import structlog
from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.errors import http_exception_handler
from .api.ipxe import router as ipxe_router
from .api.metrics import metrics_router
from .api.tree import router as tree_router
from .config import Settings, settings as default_settings
from .middleware import MetricsLoggingMiddleware
from .services.boot_script import BootConfiguration
from .services.iso_image import IsoTree


def configure_structlog(level: str) -> None:
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level.upper(), logging.INFO)),
    )


def create_app(
    image: IsoTree,
    boot_config: BootConfiguration | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    settings = settings or default_settings
    app = FastAPI(
        title="isoboot",
        version="0.1.0",
        description=(
            "Serves the contents of an ISO image over HTTP together with an iPXE "
            "script that boots a kernel and initrds from it."
        ),
        openapi_tags=[
            {"name": "PXE", "description": "iPXE boot script"},
            {"name": "Image", "description": "Browse and download image contents"},
            {"name": "Metrics", "description": "Prometheus metrics"},
        ],
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    app.state.image = image
    app.state.boot_config = boot_config or settings.boot_configuration()
    app.state.settings = settings

    configure_structlog(settings.log_level)
    app.add_middleware(MetricsLoggingMiddleware)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    app.include_router(ipxe_router)
    if settings.metrics_path:
        app.include_router(metrics_router(settings.metrics_path))
    # Catch-all, must stay last.
    app.include_router(tree_router)

    return app
