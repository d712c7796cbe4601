"""
Custom exceptions for the Multipart Upload API and client.
Provides specific error types for different failure scenarios.
"""
from typing import Optional


class MultipartUploadException(Exception):
    """Base exception for all application errors."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ValidationException(MultipartUploadException):
    """Raised when request or argument validation fails."""
    pass


class S3Exception(MultipartUploadException):
    """Raised when S3 operation fails."""
    pass


class UploadClientException(MultipartUploadException):
    """Raised when a call to the upload API or a signed URL fails."""
    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class UploadStateException(MultipartUploadException):
    """Raised when an uploader is driven from an invalid state."""
    pass


class UploadException(MultipartUploadException):
    """Base class for terminal errors delivered to an uploader's error callback."""
    pass


class SessionCreationError(UploadException):
    """Raised when the multipart upload session could not be created."""
    pass


class PartTransferError(UploadException):
    """Raised when a part's signed URL request or byte transfer fails."""
    def __init__(self, message: str, part_number: int):
        self.part_number = part_number
        super().__init__(message)


class CancellationError(UploadException):
    """Raised for a transfer that was cancelled by an explicit abort."""
    def __init__(self, message: str, part_number: Optional[int] = None):
        self.part_number = part_number
        super().__init__(message)


class FinalizeError(UploadException):
    """Raised when completing the multipart upload fails after all parts succeeded."""
    pass
