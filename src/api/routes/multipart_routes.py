"""
Multipart upload API routes.
Proxies session creation, part URL signing and completion to S3.
"""
from fastapi import APIRouter, Depends, Query, Response, status
from src.repositories.s3_repository import S3Repository
from src.core.dependencies import get_s3_repository
from src.core.exceptions import ValidationException
from src.models.dto.multipart_dto import (
    CreateUploadRequest,
    CreateUploadResponse,
    PartUrlRequest,
    PartUrlResponse,
    CompleteUploadRequest,
    CompleteUploadResponse
)

router = APIRouter(prefix="/api/multipart_uploads", tags=["Multipart Uploads"])


def _check_upload_id(path_upload_id: str, body_upload_id) -> None:
    if body_upload_id is not None and body_upload_id != path_upload_id:
        raise ValidationException("uploadId in body does not match the URL")


@router.post("", response_model=CreateUploadResponse, status_code=status.HTTP_201_CREATED)
async def create_multipart_upload(
    request: CreateUploadRequest,
    s3_repository: S3Repository = Depends(get_s3_repository)
):
    """
    Start a multipart upload and return its uploadId and fileKey.
    """
    result = s3_repository.create_multipart_upload(request.filename)
    return CreateUploadResponse(upload_id=result['upload_id'], file_key=result['file_key'])


@router.post("/{upload_id}/part_url", response_model=PartUrlResponse)
async def create_part_url(
    upload_id: str,
    request: PartUrlRequest,
    s3_repository: S3Repository = Depends(get_s3_repository)
):
    """
    Sign a PUT URL for one part of the upload.
    """
    _check_upload_id(upload_id, request.upload_id)
    signed_url = s3_repository.create_part_upload_url(request.file_key, upload_id, request.part_number)
    return PartUrlResponse(signed_url=signed_url)


@router.post("/{upload_id}/completions", response_model=CompleteUploadResponse)
async def complete_multipart_upload(
    upload_id: str,
    request: CompleteUploadRequest,
    s3_repository: S3Repository = Depends(get_s3_repository)
):
    """
    Assemble the uploaded parts into the final object.
    """
    _check_upload_id(upload_id, request.upload_id)
    parts = [{'PartNumber': p.part_number, 'ETag': p.etag} for p in request.parts]
    response = s3_repository.complete_multipart_upload(request.file_key, upload_id, parts)
    return CompleteUploadResponse(response=response)


@router.delete("/{upload_id}", status_code=status.HTTP_204_NO_CONTENT)
async def abort_multipart_upload(
    upload_id: str,
    file_key: str = Query(..., alias="fileKey", min_length=1),
    s3_repository: S3Repository = Depends(get_s3_repository)
):
    """
    Abort an unfinished upload and discard its parts on S3.
    """
    s3_repository.abort_multipart_upload(file_key, upload_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
