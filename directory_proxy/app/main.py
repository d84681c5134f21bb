"""
Main entrypoint for the Directory Proxy.

This module assembles the FastAPI application, sets up logging, CORS
and the service graph, and includes versioned routers.  The
``create_app`` function builds and configures the app, which is then
instantiated at module import time as ``app``.  Run it with uvicorn,
e.g.::

    uvicorn directory_proxy.app.main:app --port 3000
"""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.config import Settings, settings as default_settings
from .core.logging_config import setup_logging
from .core.dependencies import build_services
from .api.v1.router import router as v1_router
from .services.shopify_client import ShopifyClient, UpstreamError


def create_app(settings: Optional[Settings] = None, client: Optional[ShopifyClient] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Configuration to use; defaults to the environment‑derived
        module settings.
    client : Optional[ShopifyClient]
        Upstream client to use instead of one built from ``settings``.
        Tests pass a fake here.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    settings = settings or default_settings
    setup_logging(settings.log_level, settings.log_file or None)
    logger = logging.getLogger(__name__)

    app = FastAPI(title=settings.project_name, version=settings.api_version)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    app.state.settings = settings
    app.state.services = build_services(settings, client)

    app.include_router(v1_router, prefix=settings.api_prefix)

    @app.on_event("startup")
    async def startup_event() -> None:
        # A failed build keeps the persisted index from the last run.
        services = app.state.services
        try:
            rebuilt = await services.groups.rebuild()
        except UpstreamError as e:
            logger.warning(
                "Initial category group build failed, serving %d persisted groups: %s",
                len(services.group_store),
                e,
            )
            return
        logger.info("Directory proxy ready with %d category groups", len(rebuilt))

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        services = app.state.services
        await services.invalidator.drain()
        await services.client.aclose()

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
