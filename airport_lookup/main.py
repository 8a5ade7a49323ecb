from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from airport_lookup.core.config import settings
from airport_lookup.core.logging import configure_logging
from airport_lookup.api.routes.airports import router as airports_router


def create_app() -> FastAPI:
    configure_logging(settings.log_level)

    app = FastAPI(title=settings.app_name)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.get("/healthz")
    async def healthz():
        return {"ok": True}

    app.include_router(airports_router, prefix="/api", tags=["airports"])

    return app

app = create_app()
