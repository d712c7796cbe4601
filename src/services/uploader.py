"""
Chunked multipart upload orchestrator.

Splits a local file into parts, uploads up to ``threads_quantity`` parts at
once against pre-signed URLs, reports aggregate progress and completes the
upload once every part has been acknowledged.

All scheduling state (pending parts, active slots, completed parts) is only
touched from synchronous code running on the event loop, so no locking is
needed. A part failure terminates the session; parts are never retried.
"""
import asyncio
import functools
import logging
import os
from typing import AsyncIterator, BinaryIO, Callable, Dict, List, Optional, Union
from src.clients.multipart_client import MultipartUploadClient
from src.core import config
from src.core.exceptions import (
    CancellationError,
    FinalizeError,
    PartTransferError,
    SessionCreationError,
    UploadClientException,
    UploadException,
    UploadStateException,
    ValidationException
)
from src.models.upload_part import CompletedPart, Part, ProgressSnapshot, TransferSlot
from src.models.upload_state import UploadState
from src.services.part_planner import plan_parts
from src.services.progress import ProgressTracker

logger = logging.getLogger(__name__)

MAX_THREADS_QUANTITY = 15


def _noop(*args) -> None:
    pass


class Uploader:
    """
    Uploads one file as an S3 multipart upload through the upload API.

    Callbacks may be passed to the constructor or registered with the
    chainable on_progress/on_complete/on_error methods. All three default to
    no-ops; terminal outcomes are logged regardless. Exactly one of
    on_complete and on_error fires per session, exactly once.

    Known limitations: parts already uploaded when a session fails or is
    aborted are left on S3 until the upload is aborted manually, and
    progress is not rolled back for a part that fails mid-transfer.
    """

    def __init__(
        self,
        source: Union[str, os.PathLike, BinaryIO],
        client: MultipartUploadClient,
        filename: Optional[str] = None,
        chunk_size: Optional[int] = None,
        threads_quantity: Optional[int] = None,
        block_size: Optional[int] = None,
        on_progress: Optional[Callable[[ProgressSnapshot], None]] = None,
        on_complete: Optional[Callable[[dict], None]] = None,
        on_error: Optional[Callable[[UploadException], None]] = None
    ):
        self.source = source
        self.client = client
        self.filename = filename or self._default_filename(source)
        self.chunk_size = chunk_size or config.settings.upload_chunk_size
        self.threads_quantity = max(1, min(threads_quantity or config.settings.upload_threads_quantity, MAX_THREADS_QUANTITY))
        self.block_size = block_size or config.settings.upload_stream_block_size

        self.state = UploadState.IDLE
        self.upload_id: Optional[str] = None
        self.file_key: Optional[str] = None
        self.file_size = 0
        self.result: Optional[dict] = None
        self.error: Optional[UploadException] = None

        self._on_progress_fn = on_progress or _noop
        self._on_complete_fn = on_complete or _noop
        self._on_error_fn = on_error or _noop

        self._file: Optional[BinaryIO] = None
        self._owns_file = False
        self._pending: List[Part] = []
        self._active: Dict[int, TransferSlot] = {}
        self._completed: List[CompletedPart] = []
        self._planned_count = 0
        self._progress: Optional[ProgressTracker] = None
        self._last_progress: Optional[ProgressSnapshot] = None
        self._finalize_task: Optional[asyncio.Task] = None
        self._finished = asyncio.Event()

    @staticmethod
    def _default_filename(source) -> str:
        if isinstance(source, (str, os.PathLike)):
            name = os.fspath(source)
        else:
            name = getattr(source, "name", "")
        name = os.path.basename(name) if isinstance(name, str) else ""
        if not name:
            raise ValidationException("filename is required when the source has no name")
        return name

    def on_progress(self, fn: Callable[[ProgressSnapshot], None]) -> "Uploader":
        self._on_progress_fn = fn
        return self

    def on_complete(self, fn: Callable[[dict], None]) -> "Uploader":
        self._on_complete_fn = fn
        return self

    def on_error(self, fn: Callable[[UploadException], None]) -> "Uploader":
        self._on_error_fn = fn
        return self

    @property
    def active_count(self) -> int:
        return len(self._active)

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    @property
    def pending_parts(self) -> List[Part]:
        return list(self._pending)

    @property
    def completed_parts(self) -> List[CompletedPart]:
        return list(self._completed)

    async def start(self) -> Optional[dict]:
        """
        Run the upload session to a terminal state.

        Returns:
            The provider's completion response on success, otherwise None.
            Errors are delivered to the error callback, never raised.

        Raises:
            UploadStateException: If the uploader was already started or aborted
        """
        if self.state is not UploadState.IDLE:
            raise UploadStateException(f"Upload cannot start from state '{self.state.value}'")

        self.state = UploadState.PLANNING
        try:
            try:
                self._open_source()
                session = await self.client.create_upload(self.filename)
            except Exception as e:
                if self.state is UploadState.PLANNING:
                    self.state = UploadState.FAILED
                    self.error = SessionCreationError(f"Failed to create upload for {self.filename}: {e}")
                    self.error.__cause__ = e
                self._check_finished()
                return None

            self.upload_id = session["upload_id"]
            self.file_key = session["file_key"]

            if self.state is UploadState.ABORTED:
                logger.warning("Upload %s aborted before any part was sent", self.upload_id)
                self._check_finished()
                return None

            self._pending = plan_parts(self.file_size, self.chunk_size)
            self._planned_count = len(self._pending)
            self._progress = ProgressTracker(self.file_size)
            self.state = UploadState.RUNNING
            logger.info(
                "Uploading %s (%d bytes) as %d parts, upload_id=%s, threads=%d",
                self.filename, self.file_size, self._planned_count, self.upload_id, self.threads_quantity
            )

            self._send_next()
            await self._finished.wait()
        finally:
            self._close_source()

        return self.result if self.state is UploadState.DONE else None

    def abort(self) -> None:
        """
        Cancel every in-flight transfer and drop pending parts.

        Ignored once the upload is completing or has reached a terminal state.
        """
        if self.state is UploadState.IDLE:
            self.state = UploadState.ABORTED
            self.error = CancellationError("Upload canceled by user")
            self._check_finished()
            return

        if self.state is UploadState.PLANNING:
            self.state = UploadState.ABORTED
            self.error = CancellationError("Upload canceled by user")
            return

        if self.state is not UploadState.RUNNING:
            logger.debug("Ignoring abort in state %s", self.state.value)
            return

        logger.info("Aborting upload %s with %d parts in flight", self.upload_id, len(self._active))
        self.state = UploadState.ABORTED
        self._pending.clear()
        for slot in list(self._active.values()):
            slot.cancel()
        self._check_finished()

    def _open_source(self) -> None:
        if isinstance(self.source, (str, os.PathLike)):
            self._file = open(self.source, "rb")
            self._owns_file = True
        else:
            self._file = self.source
        self._file.seek(0, os.SEEK_END)
        self.file_size = self._file.tell()

    def _close_source(self) -> None:
        if self._owns_file and self._file is not None:
            self._file.close()
            self._file = None

    def _send_next(self) -> None:
        if self.state is not UploadState.RUNNING:
            return

        while self._pending and len(self._active) < self.threads_quantity:
            part = self._pending.pop()
            slot = TransferSlot(part)
            self._active[part.part_number] = slot
            slot.task = asyncio.create_task(self._send_part(slot))
            slot.task.add_done_callback(functools.partial(self._on_slot_done, slot))

        if not self._pending and not self._active:
            self.state = UploadState.COMPLETING
            self._finalize_task = asyncio.create_task(self._complete())

    async def _send_part(self, slot: TransferSlot) -> CompletedPart:
        part = slot.part
        try:
            signed_url = await self.client.get_part_upload_url(self.file_key, self.upload_id, part.part_number)
            response = await self.client.upload_part(signed_url, self._read_part(slot), part.size)
        except UploadClientException as e:
            raise PartTransferError(f"Failed to upload part {part.part_number}: {e.message}", part.part_number) from e

        if response.status_code != 200:
            raise PartTransferError(
                f"Failed to upload part {part.part_number}: status {response.status_code}",
                part.part_number
            )

        etag = response.headers.get("etag")
        if not etag:
            raise PartTransferError(f"Failed to upload part {part.part_number}: no ETag in response", part.part_number)

        return CompletedPart.from_response_etag(part.part_number, etag)

    async def _read_part(self, slot: TransferSlot) -> AsyncIterator[bytes]:
        part = slot.part
        offset = part.start
        while offset < part.end:
            # Reads stay on the loop so seek and read run back to back on the shared handle
            self._file.seek(offset)
            block = self._file.read(min(self.block_size, part.end - offset))
            if not block:
                raise PartTransferError(f"Source file ended inside part {part.part_number}", part.part_number)
            offset += len(block)
            yield block
            slot.loaded += len(block)
            self._report(self._progress.update(part.part_number, slot.loaded))

    def _on_slot_done(self, slot: TransferSlot, task: asyncio.Task) -> None:
        part = slot.part
        del self._active[part.part_number]
        self._report(self._progress.release(part.part_number))

        if task.cancelled():
            error = CancellationError(f"Upload of part {part.part_number} canceled", part.part_number)
        else:
            error = task.exception()
            if error is not None and not isinstance(error, UploadException):
                cause = error
                error = PartTransferError(f"Failed to upload part {part.part_number}: {cause}", part.part_number)
                error.__cause__ = cause

        if error is None:
            self._completed.append(task.result())
            logger.debug("Part %d uploaded", part.part_number)
            self._send_next()
            # A part can finish after the session already failed or was aborted
            self._check_finished()
            return

        if self.state is UploadState.RUNNING:
            # Back to pending and out of active in one step
            self._pending.append(part)
            self._fail(error)
            return

        if self.state is UploadState.FAILED:
            self._pending.append(part)
        if self.state is UploadState.ABORTED and self.error is None:
            self.error = error
        logger.debug("Part %d unwound after session ended: %s", part.part_number, error)
        self._check_finished()

    def _fail(self, error: UploadException) -> None:
        logger.warning("Upload %s failed: %s", self.upload_id, error)
        self.state = UploadState.FAILED
        self.error = error
        for slot in list(self._active.values()):
            slot.cancel()
        self._check_finished()

    async def _complete(self) -> None:
        parts = sorted(self._completed, key=lambda p: p.part_number)
        part_numbers = [p.part_number for p in parts]
        try:
            if part_numbers != list(range(1, self._planned_count + 1)):
                raise FinalizeError(f"Completed parts {part_numbers} do not match the {self._planned_count} planned parts")
            self.result = await self.client.complete_upload(self.file_key, self.upload_id, parts)
        except FinalizeError as e:
            self.state = UploadState.FAILED
            self.error = e
        except Exception as e:
            self.state = UploadState.FAILED
            self.error = FinalizeError(f"Failed to complete upload {self.upload_id}: {e}")
            self.error.__cause__ = e
        else:
            self.state = UploadState.DONE
            logger.info("Upload %s completed with %d parts", self.upload_id, len(parts))
        self._check_finished()

    def _report(self, snapshot: ProgressSnapshot) -> None:
        if snapshot == self._last_progress:
            return
        self._last_progress = snapshot
        self._on_progress_fn(snapshot)

    def _check_finished(self) -> None:
        if self._active or not self.state.is_terminal or self._finished.is_set():
            return
        try:
            if self.state is UploadState.DONE:
                self._on_complete_fn(self.result)
            else:
                if self.error is None:
                    self.error = CancellationError("Upload canceled by user")
                logger.error("Upload of %s ended in state %s: %s", self.filename, self.state.value, self.error)
                self._on_error_fn(self.error)
        finally:
            self._finished.set()
