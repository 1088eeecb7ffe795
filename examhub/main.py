import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .auth.security import get_password_hash
from .database import build_storage
from .routes import admin as admin_routes
from .routes import auth as auth_routes
from .routes import student as student_routes
from .sample_data import load_sample_data
from .storage.base import Storage


logger = logging.getLogger(__name__)

ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@grademe.com")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "password123")
SEED_SAMPLE_DATA = os.getenv("SEED_SAMPLE_DATA", "").lower() in ("1", "true", "yes")
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]


def ensure_default_admin(storage: Storage) -> None:
    """Ensure there is at least one admin account for the first login."""
    if storage.get_account_by_email(ADMIN_EMAIL):
        return
    storage.create_account(
        {
            "email": ADMIN_EMAIL,
            "password": get_password_hash(ADMIN_PASSWORD),
            "name": "Admin User",
            "role": "admin",
            "is_admin": True,
        }
    )
    logger.info("Created default admin account %s", ADMIN_EMAIL)


def create_app(storage: Storage | None = None, seed_sample_data: bool = SEED_SAMPLE_DATA) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        ensure_default_admin(app.state.storage)
        if seed_sample_data:
            load_sample_data(app.state.storage)
        yield

    app = FastAPI(title="Exam Management System", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # one store per application; handlers reach it through get_storage
    app.state.storage = storage if storage is not None else build_storage()

    @app.get("/api/health")
    def health_check():
        return {"status": "ok"}

    app.include_router(auth_routes.router, prefix="/api/auth", tags=["auth"])
    app.include_router(admin_routes.router, prefix="/api/admin", tags=["admin"])
    app.include_router(student_routes.router, prefix="/api/student", tags=["student"])
    return app


app = create_app()
