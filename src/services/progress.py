"""
Progress aggregation across concurrent part transfers.
"""
import math
from typing import Dict
from src.models.upload_part import ProgressSnapshot


class ProgressTracker:
    """
    Combines per-part byte counters into a single progress snapshot.

    In-flight counters are folded into uploaded_size exactly once when a
    part leaves the in-flight state, whatever the outcome. Bytes of a part
    that later fails are not subtracted, so the percentage is a best-effort
    indicator rather than an exact ledger.
    """

    def __init__(self, total: int):
        self.total = total
        self.uploaded_size = 0
        self._in_flight: Dict[int, int] = {}

    def update(self, part_number: int, loaded: int) -> ProgressSnapshot:
        self._in_flight[part_number] = loaded
        return self.snapshot()

    def release(self, part_number: int) -> ProgressSnapshot:
        self.uploaded_size += self._in_flight.pop(part_number, 0)
        return self.snapshot()

    def snapshot(self) -> ProgressSnapshot:
        sent = min(self.uploaded_size + sum(self._in_flight.values()), self.total)
        if self.total == 0:
            percentage = 100
        else:
            # Half-up rounding, not banker's rounding
            percentage = math.floor(100 * sent / self.total + 0.5)
        return ProgressSnapshot(sent=sent, total=self.total, percentage=percentage)
