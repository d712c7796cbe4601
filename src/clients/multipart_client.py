"""
HTTP client for the multipart upload API and pre-signed part URLs.
"""
import logging
from typing import AsyncIterable, List, Optional, Union
import httpx
from src.core import config
from src.core.exceptions import UploadClientException
from src.models.upload_part import CompletedPart

logger = logging.getLogger(__name__)


class MultipartUploadClient:
    """Async client for the three multipart endpoints and the part PUT."""

    def __init__(self, base_url: Optional[str] = None, http_client: Optional[httpx.AsyncClient] = None):
        self.base_url = (base_url or config.settings.api_base_url).rstrip('/')
        self._owns_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(timeout=config.settings.http_timeout_seconds)

    async def __aenter__(self) -> "MultipartUploadClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self.http_client.aclose()

    async def _post(self, path: str, payload: dict) -> dict:
        url = f"{self.base_url}{path}"
        try:
            response = await self.http_client.post(url, json=payload)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            raise UploadClientException(
                f"POST {path} failed with status {e.response.status_code}: {e.response.text}",
                status_code=e.response.status_code
            ) from e
        except httpx.HTTPError as e:
            raise UploadClientException(f"POST {path} failed: {str(e)}") from e
        except ValueError as e:
            raise UploadClientException(f"POST {path} returned invalid JSON: {str(e)}") from e

    async def create_upload(self, filename: str) -> dict:
        """
        Start a multipart upload.

        Returns:
            dict: upload_id and file_key assigned by the service

        Raises:
            UploadClientException: If the request fails or the response is incomplete
        """
        data = await self._post("/multipart_uploads", {"filename": filename})
        if not data.get("uploadId") or not data.get("fileKey"):
            raise UploadClientException("Create upload response is missing uploadId or fileKey")
        return {"upload_id": data["uploadId"], "file_key": data["fileKey"]}

    async def get_part_upload_url(self, file_key: str, upload_id: str, part_number: int) -> str:
        """
        Fetch a pre-signed PUT URL for one part.

        Raises:
            UploadClientException: If the request fails or no URL is returned
        """
        data = await self._post(
            f"/multipart_uploads/{upload_id}/part_url",
            {"fileKey": file_key, "uploadId": upload_id, "partNumber": part_number}
        )
        signed_url = data.get("signedUrl")
        if not signed_url:
            raise UploadClientException(f"No signed URL returned for part {part_number}")
        return signed_url

    async def complete_upload(self, file_key: str, upload_id: str, parts: List[CompletedPart]) -> dict:
        """
        Finalize the upload with the acknowledged parts.

        Returns:
            dict: The storage provider's completion response

        Raises:
            UploadClientException: If the request fails
        """
        data = await self._post(
            f"/multipart_uploads/{upload_id}/completions",
            {"fileKey": file_key, "uploadId": upload_id, "parts": [p.to_dict() for p in parts]}
        )
        return data.get("response", data)

    async def upload_part(
        self,
        signed_url: str,
        content: Union[bytes, AsyncIterable[bytes]],
        size: int
    ) -> httpx.Response:
        """
        PUT one part's bytes to its signed URL.

        Content-Length is always sent explicitly so streamed bodies are not
        chunk-encoded, which S3 rejects for pre-signed uploads.

        Raises:
            UploadClientException: On transport errors
        """
        try:
            return await self.http_client.put(
                signed_url,
                content=content,
                headers={"Content-Length": str(size)}
            )
        except httpx.HTTPError as e:
            raise UploadClientException(f"Part transfer failed: {str(e)}") from e
