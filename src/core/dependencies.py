"""
Dependency injection container for FastAPI.
Provides singleton-like behavior for repositories.
"""
from functools import lru_cache
from src.repositories.s3_repository import S3Repository


@lru_cache()
def get_s3_repository() -> S3Repository:
    """Get S3Repository singleton instance."""
    return S3Repository()
