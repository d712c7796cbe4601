"""
Core configuration for the Multipart Upload service and client.
Manages environment variables, AWS service settings and upload tuning.
"""
import os
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    # AWS Configuration
    aws_region: str = os.getenv("AWS_REGION", "us-east-1")
    s3_bucket_name: str = os.getenv("S3_BUCKET_NAME", "")
    s3_key_prefix: str = os.getenv("S3_KEY_PREFIX", "datasets")
    presign_expiry_seconds: int = int(os.getenv("PRESIGN_EXPIRY_SECONDS", "3600"))

    # API Configuration
    api_title: str = os.getenv("API_TITLE", "Multipart Upload API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")

    # Upload client configuration
    api_base_url: str = os.getenv("API_BASE_URL", "http://localhost:8000/api")
    upload_chunk_size: int = int(os.getenv("UPLOAD_CHUNK_SIZE", str(5 * 1024 * 1024)))
    upload_threads_quantity: int = int(os.getenv("UPLOAD_THREADS_QUANTITY", "5"))
    upload_stream_block_size: int = int(os.getenv("UPLOAD_STREAM_BLOCK_SIZE", str(64 * 1024)))
    http_timeout_seconds: float = float(os.getenv("HTTP_TIMEOUT_SECONDS", "60"))

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Environment
    environment: str = os.getenv("ENVIRONMENT", "dev")

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
