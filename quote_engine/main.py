from fastapi import FastAPI

from quote_engine.api import catalog, health, quotes, templates
from quote_engine.core.logging_config import logger, setup_logging


def create_app() -> FastAPI:
    setup_logging()
    app = FastAPI(title="Quote Engine", version="0.1.0")

    # Routers
    app.include_router(health.router, tags=["health"])
    app.include_router(quotes.router, prefix="/quotes", tags=["quotes"])
    app.include_router(templates.router, prefix="/templates", tags=["templates"])
    app.include_router(catalog.router, prefix="/catalog", tags=["catalog"])

    logger.info("app_created", routes=len(app.routes))
    return app


app = create_app()
