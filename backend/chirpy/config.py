"""Application configuration"""
from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""

    # Storage
    DATABASE_PATH: str = "database.json"

    # Development mode lets POST /api/reset wipe the database as well as the hit counter
    DEV_MODE: bool = False

    # JWT Authentication
    JWT_SECRET: str = "chirpy-dev-secret-change-in-production"
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_EXPIRE_SECONDS: int = 3600               # 1 hour
    JWT_REFRESH_EXPIRE_SECONDS: int = 60 * 24 * 3600    # 60 days

    # Polka billing webhook
    POLKA_API_KEY: Optional[str] = None

    # Chirps
    CHIRP_MAX_LENGTH: int = 140

    # Static files served under /app
    STATIC_DIR: str = "."

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: str = "*"

    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_DEFAULT: List[str] = ["100/minute", "1000/hour"]
    RATE_LIMIT_LOGIN: str = "10/minute"
    RATE_LIMIT_STORAGE_URI: str = "memory://"

    # Monitoring
    METRICS_ENABLED: bool = True
    METRICS_PATH: str = "/metrics"

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins string into list"""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]


settings = Settings()
