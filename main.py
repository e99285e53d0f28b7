"""
Consultorio API — application entry point.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.concurrency import run_in_threadpool

from api.middleware import register_middleware
from api.routes import router as api_router
from auth.password import verify_dummy
from auth.routes import router as auth_router
from auth.tokens import JwtSettings, TokenIssuer
from config.settings import Settings, config
from database.helpers import ensure_seed_admin
from database.session import init_models

logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
    stream=sys.stdout,
)
for _noisy in ("httpcore", "httpx", "aiosqlite", "sqlalchemy.engine"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the API.

    Raises ``ConfigurationError`` when the signing key is missing or too
    short, so a misconfigured process never starts serving.
    """
    settings = settings or config
    token_issuer = TokenIssuer(JwtSettings.from_settings(settings))

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Clinic records API: medicos, pacientes, consultas, usuarios.",
    )
    app.state.token_issuer = token_issuer

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_middleware(app)

    # Routes
    app.include_router(auth_router, prefix="/api/v1/auth")
    app.include_router(api_router, prefix="/api/v1")

    @app.get("/", tags=["meta"])
    async def root():
        return {"nombre": settings.app_name, "version": settings.app_version}

    @app.on_event("startup")
    async def on_startup():
        logger.info("Creating database tables…")
        await init_models()

        if await ensure_seed_admin(
            settings.seed_admin_correo,
            settings.seed_admin_password,
            settings.seed_admin_nombre,
        ):
            logger.info("Bootstrap account created.")

        # Build the decoy credential now so the first unknown-account login
        # costs the same as any other.
        await run_in_threadpool(verify_dummy, "")

        logger.info(
            "Tokens: issuer=%s audience=%s lifetime=%d min",
            settings.jwt_issuer,
            settings.jwt_audience,
            settings.jwt_expires_minutes,
        )
        logger.info("Application ready to accept requests.")

    return app


if __name__ == "__main__":
    uvicorn.run(
        "main:create_app",
        factory=True,
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level="debug" if config.debug else "info",
    )
