import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from clinic.db import Base, engine
from clinic import models
from clinic.routes.voice_routes import router as voice_router


def _split_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]

def _env_flag(name: str, *, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def init_database() -> None:
    # Schema is owned by the main clinic service; only auto-create for local SQLite runs.
    if _env_flag("DB_AUTO_CREATE", default=(engine.dialect.name == "sqlite")):
        Base.metadata.create_all(bind=engine)


@asynccontextmanager
async def lifespan(_: FastAPI):
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
    init_database()
    yield

app = FastAPI(title="Clinic Voice Assistant Backend", lifespan=lifespan)

cors_origins = _split_csv(os.getenv("CORS_ORIGINS")) or [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(voice_router)


@app.get("/")
def read_root():
    return {"message": "Backend is running"}
