
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging
import os

from face_auth.routes import health, recognition
from face_auth.services.face_matcher import FaceMatcher
from face_auth.services.face_service_client import FaceServiceClient
from face_auth.services.firebase_service import FirebaseService
from face_auth.utils.config import settings
from face_auth.utils.logger import setup_logging

setup_logging(level=logging.getLevelName(settings.LOG_LEVEL.upper()), log_dir=settings.LOG_DIR)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):

    logger.info("Starting Face Authorization Backend...")

    logger.info(f"Face recognition service at {settings.FACE_SERVICE_URL}")
    face_client = FaceServiceClient(settings.FACE_SERVICE_URL, timeout=settings.FACE_SERVICE_TIMEOUT)

    try:
        logger.info("Initializing Firebase...")
        if not os.path.exists(settings.FIREBASE_CREDENTIALS):
            logger.warning(f"Firebase credentials not found at {settings.FIREBASE_CREDENTIALS}")
            logger.warning("Authorization and registration will be disabled")
            firebase_service = None
        else:
            firebase_service = FirebaseService(
                settings.FIREBASE_CREDENTIALS,
                collection=settings.PERSONS_COLLECTION
            )
            logger.info("Firebase initialized successfully!")
    except Exception as e:
        logger.error(f"Startup error: {str(e)}", exc_info=True)
        logger.warning("Server starting with limited functionality")
        firebase_service = None

    app.state.face_client = face_client
    app.state.firebase_service = firebase_service
    app.state.face_matcher = None
    if firebase_service is not None:
        app.state.face_matcher = FaceMatcher(
            corpus_loader=firebase_service,
            comparator=face_client,
            threshold=settings.SIMILARITY_THRESHOLD,
            max_concurrency=settings.MAX_CONCURRENT_COMPARISONS,
            comparison_timeout=settings.FACE_SERVICE_TIMEOUT
        )

    yield

    logger.info("Shutting down services...")
    await face_client.close()


app = FastAPI(
    title="Face Authorization API",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, tags=["Health"])
app.include_router(recognition.router, tags=["Recognition"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "face_auth.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )
