"""
Point d'entrée principal de l'API GymTrack.
Démarrage : uvicorn app.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

import app.models  # noqa: F401 — enregistre tous les modèles dans Base.metadata avant les routers
from app.config import settings
from app.routers import attendances, clients, photos, trainers
from app.scheduler import start_scheduler, stop_scheduler

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Cycle de vie de l'application : démarre et arrête le scheduler APScheduler."""
    start_scheduler()
    yield
    stop_scheduler()


app = FastAPI(
    title="GymTrack API",
    description="API de gestion des clients et des présences d'une salle de sport",
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

# CORS — autorise tous les ports localhost en développement (à restreindre en production).
app.add_middleware(
    CORSMiddleware,
    allow_origins=[],
    allow_origin_regex=r"https?://(localhost|127\.0\.0\.1)(:\d+)?",
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["Content-Type", "Authorization", "Accept"],
)


app.include_router(clients.router)
app.include_router(photos.router)
app.include_router(attendances.router)
app.include_router(trainers.router)

# Photos stockées en mode "path" : /uploads/<fichier>
app.mount("/uploads", StaticFiles(directory=settings.UPLOADS_DIR, check_dir=False), name="uploads")


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Intercepte toutes les exceptions non gérées pour garantir que la réponse 500
    passe bien par CORSMiddleware (qui injecte les headers CORS).
    """
    logger.error("Exception non gérée : %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Une erreur interne est survenue."},
    )


@app.get("/api/health", tags=["Santé"])
def health_check():
    """Vérifie que l'API est opérationnelle."""
    return {"status": "ok", "service": "GymTrack API", "version": "0.1.0"}
