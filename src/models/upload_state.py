"""
Upload session lifecycle states.
"""
from enum import Enum


class UploadState(str, Enum):
    IDLE = "idle"
    PLANNING = "planning"
    RUNNING = "running"
    COMPLETING = "completing"
    DONE = "done"
    FAILED = "failed"
    ABORTED = "aborted"

    @property
    def is_terminal(self) -> bool:
        return self in (UploadState.DONE, UploadState.FAILED, UploadState.ABORTED)
