from fastapi import APIRouter, Request
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)
router = APIRouter()

MODEL_NAME = "InsightFace Buffalo_L (512-dim embeddings)"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/")
async def root():
    return {
        "status": "online",
        "message": "ESP32-CAM Facial Recognition API (InsightFace)",
        "timestamp": _now(),
        "endpoints": {
            "GET /": "API information",
            "GET /ping": "Simple ping test",
            "GET /health": "Health check",
            "POST /upload": "Face recognition authorization",
            "POST /register": "Register a new person",
            "GET /persons": "List all registered persons",
        }
    }


@router.get("/ping")
async def ping(request: Request):
    client_ip = request.client.host if request.client else None
    logger.info(f"Ping received from: {client_ip}")
    return {
        "status": "success",
        "message": "pong",
        "timestamp": _now(),
        "clientIP": client_ip
    }


@router.get("/health")
async def health_check(request: Request):
    """Aggregate status; a degraded face service never blocks matching."""
    face_client = request.app.state.face_client
    face_service_healthy = face_client is not None and await face_client.check_health()

    return {
        "status": "healthy" if face_service_healthy else "degraded",
        "timestamp": _now(),
        "services": {
            "api": "healthy",
            "face_service": "healthy" if face_service_healthy else "unavailable",
            "firebase": "healthy" if request.app.state.firebase_service is not None else "unavailable"
        },
        "model": MODEL_NAME
    }
