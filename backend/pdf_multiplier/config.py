"""Configuration and environment variables"""
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Humand API
    humand_api_base_url: str = "https://api-prod.humand.co/public/api/v1"
    humand_api_token: Optional[str] = None
    api_timeout: float = 30.0  # seconds
    api_max_retries: int = 3
    api_retry_delay: float = 1.0  # seconds, multiplied by the attempt number
    upload_timeout: float = 300.0  # 5 minutes for document uploads

    # Response cache for catalog lookups (segmentations, users, folders)
    cache_enabled: bool = True
    cache_ttl: int = 1800  # 30 minutes

    # Redash (folder catalog)
    redash_api_base_url: str = "https://redash.humand.co/api/queries"
    redash_api_key: Optional[str] = None
    redash_folders_query_id: str = "17520"
    redash_timeout: float = 30.0
    redash_refresh_wait_time: float = 2.0

    # File validation
    max_file_size: int = 50 * 1024 * 1024  # 50MB
    max_filename_length: int = 255
    max_users_per_batch: int = 1000

    # Signature area policy (canvas pixels)
    min_signature_width: float = 50
    min_signature_height: float = 20
    preview_scale: float = 1.5

    # CORS Settings
    cors_origins: list = ["http://localhost:3000", "http://127.0.0.1:3000"]

    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
