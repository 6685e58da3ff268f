import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pos_backend.api.v1.routes_transactions import router as transactions_router
from pos_backend.core.config import Settings, settings as default_settings
from pos_backend.core.logging import configure_logging
from pos_backend.db.base import build_engine, build_sessionmaker, init_models

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = build_engine(
            settings.DB_URL,
            echo=settings.DB_ECHO,
            use_null_pool=settings.DB_URL.startswith("sqlite"),
        )
        app.state.engine = engine
        app.state.sessionmaker = build_sessionmaker(engine)
        if settings.DB_CREATE_ALL:
            await init_models(engine)
        logger.info("Connected to database %s", engine.url.render_as_string(hide_password=True))
        yield
        await engine.dispose()

    app = FastAPI(title="POS Backend API", lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(transactions_router)

    @app.get("/")
    async def root():
        return {"message": "POS Backend API is running correctly."}

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run(app, host=default_settings.HOST, port=default_settings.PORT)
