"""
Configuration settings for the OMS Backend
"""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Server Configuration
    APP_NAME: str = "OMS Backend"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = True
    HOST: str = "0.0.0.0"
    PORT: int = 8001
    LOG_LEVEL: str = "INFO"

    # Firebase Configuration
    FIREBASE_CREDENTIALS_PATH: str = "./firebase-credentials.json"
    # Support for raw JSON credentials (env var)
    FIREBASE_CREDENTIALS_JSON: str = ""
    FIREBASE_PROJECT_ID: str = ""
    FIREBASE_EMULATOR_HOST: str = ""
    DEV_MODE: bool = False

    # JWT Configuration (internal session tokens issued after Firebase sign-in)
    JWT_SECRET_KEY: str = "change-me-in-production"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    # Object storage (S3). The NEXT_PUBLIC_ names are what the web client
    # deployment already exports.
    AWS_REGION: str = Field(
        default="us-east-1",
        validation_alias=AliasChoices("AWS_REGION", "NEXT_PUBLIC_AWS_REGION"),
    )
    AWS_ACCESS_KEY_ID: str = Field(
        default="",
        validation_alias=AliasChoices(
            "AWS_ACCESS_KEY_ID", "NEXT_PUBLIC_AWS_ACCESS_KEY_ID"),
    )
    AWS_SECRET_ACCESS_KEY: str = Field(
        default="",
        validation_alias=AliasChoices(
            "AWS_SECRET_ACCESS_KEY", "NEXT_PUBLIC_AWS_SECRET_ACCESS_KEY"),
    )
    S3_BUCKET_NAME: str = Field(
        default="",
        validation_alias=AliasChoices(
            "S3_BUCKET_NAME", "NEXT_PUBLIC_S3_BUCKET_NAME"),
    )
    MAX_UPLOAD_SIZE_MB: int = 10

    # CORS Configuration - Allow all localhost ports in development
    ALLOWED_ORIGINS: str = "http://localhost:3000,http://localhost:3001"

    @property
    def allowed_origins_list(self) -> List[str]:
        """Convert comma-separated origins to list"""
        origins = [origin.strip()
                   for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]
        # In development, explicitly add common localhost ports
        if self.DEBUG:
            localhost_ports = [3000, 3001, 5173]
            for port in localhost_ports:
                for host in ("localhost", "127.0.0.1"):
                    origin = f"http://{host}:{port}"
                    if origin not in origins:
                        origins.append(origin)
        return origins

    @property
    def max_upload_size_bytes(self) -> int:
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    model_config = {"env_file": ".env",
                    "case_sensitive": True, "extra": "allow",
                    "populate_by_name": True}


# Global settings instance
settings = Settings()
