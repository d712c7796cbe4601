"""
Data Transfer Objects for the multipart upload API.
Defines request and response schemas for API endpoints.
"""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class CreateUploadRequest(BaseModel):
    """Request schema for starting a multipart upload."""
    filename: str = Field(..., min_length=1, max_length=1024, description="Original filename")

    @field_validator('filename')
    @classmethod
    def validate_filename(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("filename cannot be empty")
        if "/" in v or "\\" in v:
            raise ValueError("filename cannot contain path separators")
        return v


class CreateUploadResponse(BaseModel):
    """Response schema for a created multipart upload."""
    model_config = ConfigDict(populate_by_name=True)

    upload_id: str = Field(..., alias="uploadId")
    file_key: str = Field(..., alias="fileKey")


class PartUrlRequest(BaseModel):
    """Request schema for a part's signed upload URL."""
    model_config = ConfigDict(populate_by_name=True)

    file_key: str = Field(..., alias="fileKey", min_length=1)
    upload_id: Optional[str] = Field(default=None, alias="uploadId")
    part_number: int = Field(..., alias="partNumber", ge=1, le=10000)


class PartUrlResponse(BaseModel):
    """Response schema carrying a pre-signed part URL."""
    model_config = ConfigDict(populate_by_name=True)

    signed_url: str = Field(..., alias="signedUrl")


class CompletedPartDTO(BaseModel):
    """A part entry in a completion request."""
    model_config = ConfigDict(populate_by_name=True)

    part_number: int = Field(..., alias="PartNumber", ge=1, le=10000)
    etag: str = Field(..., alias="ETag", min_length=1)


class CompleteUploadRequest(BaseModel):
    """Request schema for completing a multipart upload."""
    model_config = ConfigDict(populate_by_name=True)

    file_key: str = Field(..., alias="fileKey", min_length=1)
    upload_id: Optional[str] = Field(default=None, alias="uploadId")
    parts: list[CompletedPartDTO] = Field(..., min_length=1)


class CompleteUploadResponse(BaseModel):
    """Response schema wrapping the storage provider's completion result."""
    response: dict
