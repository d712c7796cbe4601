"""
Part planning for multipart uploads.
"""
from typing import List
from src.models.upload_part import Part
from src.core.exceptions import ValidationException


def plan_parts(file_size: int, chunk_size: int) -> List[Part]:
    """
    Split a file into contiguous 1-based parts of at most chunk_size bytes.

    An empty file still yields one empty part, since S3 requires at least
    one part per multipart upload.

    Args:
        file_size: Size of the source file in bytes
        chunk_size: Maximum part size in bytes

    Returns:
        Parts ordered by part number, covering [0, file_size) exactly once

    Raises:
        ValidationException: If file_size is negative or chunk_size is not positive
    """
    if file_size < 0:
        raise ValidationException(f"file_size must be >= 0, got: {file_size}")
    if chunk_size <= 0:
        raise ValidationException(f"chunk_size must be > 0, got: {chunk_size}")

    if file_size == 0:
        return [Part(part_number=1, start=0, end=0)]

    number_of_parts = -(-file_size // chunk_size)
    return [
        Part(
            part_number=index + 1,
            start=index * chunk_size,
            end=min((index + 1) * chunk_size, file_size)
        )
        for index in range(number_of_parts)
    ]
