"""
Domain models for multipart upload parts.
Represents planned byte ranges, acknowledged parts and progress snapshots.
"""
import asyncio
from typing import Optional


class Part:
    """A planned, immutable byte range [start, end) of the source file."""

    __slots__ = ("_part_number", "_start", "_end")

    def __init__(self, part_number: int, start: int, end: int):
        self._part_number = part_number
        self._start = start
        self._end = end

    @property
    def part_number(self) -> int:
        return self._part_number

    @property
    def start(self) -> int:
        return self._start

    @property
    def end(self) -> int:
        return self._end

    @property
    def size(self) -> int:
        return self._end - self._start

    def __eq__(self, other):
        if not isinstance(other, Part):
            return NotImplemented
        return (self._part_number, self._start, self._end) == (other._part_number, other._start, other._end)

    def __hash__(self):
        return hash((self._part_number, self._start, self._end))

    def __repr__(self):
        return f"Part(part_number={self._part_number}, start={self._start}, end={self._end})"


class CompletedPart:
    """A part acknowledged by the storage service."""

    def __init__(self, part_number: int, etag: str):
        self.part_number = part_number
        self.etag = etag

    @classmethod
    def from_response_etag(cls, part_number: int, etag: str) -> "CompletedPart":
        """Build from a raw ETag header value, stripping the surrounding quotes."""
        return cls(part_number=part_number, etag=etag.replace('"', ""))

    def to_dict(self) -> dict:
        """Wire representation expected by CompleteMultipartUpload."""
        return {"PartNumber": self.part_number, "ETag": self.etag}

    def __eq__(self, other):
        if not isinstance(other, CompletedPart):
            return NotImplemented
        return self.part_number == other.part_number and self.etag == other.etag

    def __repr__(self):
        return f"CompletedPart(part_number={self.part_number}, etag={self.etag})"


class TransferSlot:
    """An in-flight part transfer occupying one unit of upload concurrency."""

    def __init__(self, part: Part, task: Optional[asyncio.Task] = None):
        self.part = part
        self.task = task
        self.loaded = 0

    def cancel(self) -> None:
        if self.task is not None and not self.task.done():
            self.task.cancel()

    def __repr__(self):
        return f"TransferSlot(part_number={self.part.part_number}, loaded={self.loaded})"


class ProgressSnapshot:
    """Aggregate byte progress of an upload session."""

    def __init__(self, sent: int, total: int, percentage: int):
        self.sent = sent
        self.total = total
        self.percentage = percentage

    def to_dict(self) -> dict:
        return {"sent": self.sent, "total": self.total, "percentage": self.percentage}

    def __eq__(self, other):
        if not isinstance(other, ProgressSnapshot):
            return NotImplemented
        return (self.sent, self.total, self.percentage) == (other.sent, other.total, other.percentage)

    def __repr__(self):
        return f"ProgressSnapshot(sent={self.sent}, total={self.total}, percentage={self.percentage})"
