from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from studio import __version__
from studio.core.config import get_settings
from studio.infrastructure.database.session import dispose_engine, init_db
from studio.interfaces.http.routers import create_api_router
from studio.interfaces.ws import routes as websocket_routes

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    yield
    await dispose_engine()


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.project_name,
        description="Passport photo generation with a prepaid credit wallet",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(create_api_router(settings.api_prefix))
    app.include_router(websocket_routes.router)

    @app.get("/health", summary="Liveness probe")
    async def health() -> dict:
        return {"status": "ok", "version": __version__}

    return app


app = create_app()
