from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from one_liners.core.logging import configure_logging
from one_liners.core.settings import load_settings
from one_liners.routes import assistant, entries


def create_app() -> FastAPI:
    settings = load_settings()
    configure_logging(settings.log_level, settings.log_format)

    app = FastAPI(title="One-Liners Summary API", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(entries.router, prefix="/api")
    app.include_router(assistant.router, prefix="/api")

    @app.get("/", include_in_schema=False)
    async def root() -> JSONResponse:
        """Provide a lightweight landing page for container checks."""
        return JSONResponse(
            {
                "message": "One-Liners Summary API",
                "docs": "/docs",
                "entries": "/api/entries",
            }
        )

    return app


app = create_app()
