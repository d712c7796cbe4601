"""
S3 Repository for multipart upload operations.
Creates multipart uploads, signs part URLs and completes uploads on Amazon S3.
"""
import logging
import secrets
from typing import List
import boto3
from botocore.exceptions import ClientError
from src.core import config
from src.core.exceptions import S3Exception

logger = logging.getLogger(__name__)


class S3Repository:
    """Repository for S3 multipart upload operations."""

    def __init__(self):
        self.s3_client = boto3.client('s3', region_name=config.settings.aws_region)
        self.bucket_name = config.settings.s3_bucket_name

    def create_multipart_upload(self, filename: str) -> dict:
        """
        Start a multipart upload for a new object.

        Args:
            filename: Original filename, kept as the last key segment

        Returns:
            dict: upload_id and file_key of the new upload

        Raises:
            S3Exception: If the upload cannot be created
        """
        try:
            file_key = self._generate_s3_key(filename)
            response = self.s3_client.create_multipart_upload(
                Bucket=self.bucket_name,
                Key=file_key,
                ACL='private'
            )
            logger.info("Created multipart upload %s for %s", response['UploadId'], response['Key'])

            return {
                'upload_id': response['UploadId'],
                'file_key': response['Key']
            }

        except ClientError as e:
            raise S3Exception(f"Failed to create multipart upload: {str(e)}") from e
        except Exception as e:
            raise S3Exception(f"Unexpected error creating multipart upload: {str(e)}") from e

    def _generate_s3_key(self, filename: str) -> str:
        """
        Generate unique S3 key for file.

        Format: {prefix}/{64 hex chars}/{filename}
        """
        return f"{config.settings.s3_key_prefix}/{secrets.token_hex(32)}/{filename}"

    def create_part_upload_url(self, file_key: str, upload_id: str, part_number: int) -> str:
        """
        Generate a pre-signed PUT URL for one part.

        Args:
            file_key: S3 object key of the upload
            upload_id: Multipart upload identifier
            part_number: 1-based part number

        Returns:
            str: Signed URL valid for presign_expiry_seconds

        Raises:
            S3Exception: If signing fails
        """
        try:
            return self.s3_client.generate_presigned_url(
                'upload_part',
                Params={
                    'Bucket': self.bucket_name,
                    'Key': file_key,
                    'UploadId': upload_id,
                    'PartNumber': part_number
                },
                ExpiresIn=config.settings.presign_expiry_seconds,
                HttpMethod='PUT'
            )
        except ClientError as e:
            raise S3Exception(f"Failed to sign part URL: {str(e)}") from e
        except Exception as e:
            raise S3Exception(f"Unexpected error signing part URL: {str(e)}") from e

    def complete_multipart_upload(self, file_key: str, upload_id: str, parts: List[dict]) -> dict:
        """
        Complete a multipart upload.

        Args:
            file_key: S3 object key of the upload
            upload_id: Multipart upload identifier
            parts: [{'PartNumber': int, 'ETag': str}, ...] in any order

        Returns:
            dict: Location, Bucket, Key and ETag of the assembled object

        Raises:
            S3Exception: If completion fails
        """
        try:
            # S3 rejects parts that are not in ascending order
            sorted_parts = sorted(
                ({'PartNumber': p['PartNumber'], 'ETag': p['ETag']} for p in parts),
                key=lambda p: p['PartNumber']
            )
            response = self.s3_client.complete_multipart_upload(
                Bucket=self.bucket_name,
                Key=file_key,
                UploadId=upload_id,
                MultipartUpload={'Parts': sorted_parts}
            )
            logger.info("Completed multipart upload %s with %d parts", upload_id, len(sorted_parts))

            return {
                'Location': response.get('Location'),
                'Bucket': response.get('Bucket', self.bucket_name),
                'Key': response.get('Key', file_key),
                'ETag': response.get('ETag')
            }

        except ClientError as e:
            raise S3Exception(f"Failed to complete multipart upload: {str(e)}") from e
        except Exception as e:
            raise S3Exception(f"Unexpected error completing multipart upload: {str(e)}") from e

    def abort_multipart_upload(self, file_key: str, upload_id: str) -> None:
        """
        Abort a multipart upload and discard its uploaded parts.

        Raises:
            S3Exception: If the abort fails
        """
        try:
            self.s3_client.abort_multipart_upload(
                Bucket=self.bucket_name,
                Key=file_key,
                UploadId=upload_id
            )
            logger.info("Aborted multipart upload %s", upload_id)
        except ClientError as e:
            raise S3Exception(f"Failed to abort multipart upload: {str(e)}") from e
