"""
Shared test fixtures and utilities.
"""
import asyncio
import json
import os
import pytest
import httpx

API_BASE_URL = "http://api.test/api"


class FakeUploadApi:
    """
    In-process stand-in for the upload API and S3 signed URLs.

    Served through httpx.MockTransport; records every call so tests can
    assert on what the uploader sent.
    """

    def __init__(self):
        self.create_status = 201
        self.complete_status = 200
        self.put_statuses = {}
        self.omit_etag_for = set()
        self.put_delay = 0.0
        self.block_puts = False
        self.block_after = None
        self.release = asyncio.Event()
        self.all_started = asyncio.Event()

        self.uploader = None
        self.created_filenames = []
        self.part_url_requests = []
        self.put_bodies = {}
        self.completions = []
        self.puts_started = 0
        self.in_flight = 0
        self.max_in_flight = 0
        self.max_active = 0

    def client(self):
        from src.clients.multipart_client import MultipartUploadClient
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(self.handler))
        return MultipartUploadClient(base_url=API_BASE_URL, http_client=http_client)

    async def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if request.method == "PUT":
            return await self._put(request)
        body = json.loads(request.content)
        if path == "/api/multipart_uploads":
            self.created_filenames.append(body["filename"])
            if self.create_status != 201:
                return httpx.Response(self.create_status, json={"error": "boom"})
            return httpx.Response(201, json={"uploadId": "upload-1", "fileKey": f"datasets/abc/{body['filename']}"})
        if path.endswith("/part_url"):
            self.part_url_requests.append(body)
            return httpx.Response(200, json={"signedUrl": f"https://s3.test/part/{body['partNumber']}"})
        if path.endswith("/completions"):
            self.completions.append(body)
            if self.complete_status != 200:
                return httpx.Response(self.complete_status, json={"error": "boom"})
            return httpx.Response(200, json={"response": {"Location": "https://s3.test/datasets/abc/file", "Key": body["fileKey"]}})
        return httpx.Response(404)

    async def _put(self, request: httpx.Request) -> httpx.Response:
        part_number = int(request.url.path.rsplit("/", 1)[1])
        self.put_bodies[part_number] = request.content
        self.puts_started += 1
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        if self.uploader is not None:
            self.max_active = max(self.max_active, self.uploader.active_count)
        try:
            if self.block_puts and part_number not in self.put_statuses:
                if self.block_after is not None and self.puts_started >= self.block_after:
                    self.all_started.set()
                await self.release.wait()
            elif self.put_delay:
                await asyncio.sleep(self.put_delay)
        finally:
            self.in_flight -= 1

        status = self.put_statuses.get(part_number, 200)
        headers = {} if part_number in self.omit_etag_for else {"ETag": f'"etag-{part_number}"'}
        return httpx.Response(status, headers=headers)


@pytest.fixture
def fake_api():
    """Fake upload API plus signed-URL target."""
    return FakeUploadApi()


@pytest.fixture
def aws_env():
    """Mock AWS credentials and bucket configuration."""
    os.environ['AWS_ACCESS_KEY_ID'] = 'testing'
    os.environ['AWS_SECRET_ACCESS_KEY'] = 'testing'
    os.environ['AWS_SECURITY_TOKEN'] = 'testing'
    os.environ['AWS_SESSION_TOKEN'] = 'testing'
    os.environ['AWS_REGION'] = 'us-east-1'
    os.environ['S3_BUCKET_NAME'] = 'test-bucket'

    yield

    # Cleanup
    if 'S3_BUCKET_NAME' in os.environ:
        del os.environ['S3_BUCKET_NAME']
