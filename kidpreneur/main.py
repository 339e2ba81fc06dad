import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.staticfiles import StaticFiles

from .config import Settings, settings
from .routers import ideas
from .schemas.submission import HealthResponse
from .services.submission_store import init_storage

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(app_settings: Settings = settings) -> FastAPI:
    app = FastAPI(
        title="Kidpreneur API",
        description="API for submitting and browsing kids' business ideas",
        version="1.0.0",
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    # Include routers
    app.include_router(ideas.router)

    @app.on_event("startup")
    def on_startup():
        init_storage(app_settings.submissions_dir)
        logger.info("Submissions folder: %s", app_settings.submissions_dir)

    @app.get("/health", response_model=HealthResponse)
    def health():
        return HealthResponse()

    # Serve frontend; mounted last so the API routes win
    if app_settings.public_dir.is_dir():
        app.mount(
            "/",
            StaticFiles(directory=app_settings.public_dir, html=True),
            name="frontend",
        )
        logger.info("Serving frontend from: %s", app_settings.public_dir)

    return app


app = create_app()


def run():
    logger.info(
        "Kidpreneur server running at http://%s:%s",
        settings.host,
        settings.port,
    )
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
