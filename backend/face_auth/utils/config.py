from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""

    # Firebase
    FIREBASE_CREDENTIALS: str = "serviceAccountKey.json"
    PERSONS_COLLECTION: str = "known_persons"

    # Face recognition service (InsightFace)
    FACE_SERVICE_URL: str = "http://localhost:5000"
    FACE_SERVICE_TIMEOUT: float = 10.0

    # Matching
    # InsightFace typically reports 85-95% similarity for the same person
    SIMILARITY_THRESHOLD: float = 70.0
    MAX_CONCURRENT_COMPARISONS: int = 4

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    DEBUG: bool = False

    # Logging
    LOG_DIR: str = "logs"
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"
        case_sensitive = True


# Global settings instance
settings = Settings()
