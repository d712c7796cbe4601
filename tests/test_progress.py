"""
Unit tests for ProgressTracker and the part models.
"""
import pytest
from src.services.progress import ProgressTracker
from src.models.upload_part import CompletedPart, Part, ProgressSnapshot


class TestProgressTracker:
    """Test suite for ProgressTracker."""

    def test_in_flight_counters_are_summed(self):
        """Test sent combines every in-flight counter."""
        tracker = ProgressTracker(total=200)
        tracker.update(1, 50)
        snapshot = tracker.update(2, 30)

        assert snapshot == ProgressSnapshot(sent=80, total=200, percentage=40)

    def test_release_folds_counter_once(self):
        """Test a released part is counted once and not again on later updates."""
        tracker = ProgressTracker(total=100)
        tracker.update(1, 40)
        tracker.release(1)
        tracker.release(1)
        snapshot = tracker.update(2, 10)

        assert tracker.uploaded_size == 40
        assert snapshot.sent == 50

    def test_release_of_failed_part_keeps_partial_bytes(self):
        """Test bytes of a part that failed mid-transfer stay counted."""
        tracker = ProgressTracker(total=100)
        tracker.update(3, 25)

        assert tracker.release(3).sent == 25

    def test_sent_is_clamped_to_total(self):
        """Test sent never exceeds the file size."""
        tracker = ProgressTracker(total=10)
        tracker.update(1, 8)
        snapshot = tracker.update(2, 8)

        assert snapshot.sent == 10
        assert snapshot.percentage == 100

    def test_percentage_rounds_half_up(self):
        """Test 12.5% rounds to 13 and 2.5% to 3."""
        assert ProgressTracker(total=8).update(1, 1).percentage == 13
        assert ProgressTracker(total=40).update(1, 1).percentage == 3

    def test_empty_total_is_complete(self):
        """Test a zero-byte upload reports 100%."""
        snapshot = ProgressTracker(total=0).release(1)

        assert snapshot.to_dict() == {"sent": 0, "total": 0, "percentage": 100}


class TestPartModels:
    """Test suite for Part and CompletedPart."""

    def test_part_is_read_only(self):
        """Test part attributes cannot be reassigned."""
        part = Part(part_number=1, start=0, end=10)
        with pytest.raises(AttributeError):
            part.part_number = 2

    def test_etag_quotes_are_stripped(self):
        """Test the ETag header value is stored without quotes."""
        part = CompletedPart.from_response_etag(4, '"9b2cf535f27731c974343645a3985328"')

        assert part.etag == "9b2cf535f27731c974343645a3985328"
        assert part.to_dict() == {"PartNumber": 4, "ETag": "9b2cf535f27731c974343645a3985328"}
