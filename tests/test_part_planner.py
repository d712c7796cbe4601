"""
Unit tests for the part planner.
"""
import pytest
from src.services.part_planner import plan_parts
from src.core.exceptions import ValidationException

MIB = 1024 * 1024


class TestPlanParts:
    """Test suite for plan_parts."""

    @pytest.mark.parametrize("file_size,chunk_size", [
        (1, 1),
        (10, 3),
        (12 * MIB, 5 * MIB),
        (15 * MIB, 5 * MIB),
        (5 * MIB - 1, 5 * MIB),
        (1000003, 4096),
    ])
    def test_parts_cover_file_exactly_once(self, file_size, chunk_size):
        """Test parts are contiguous, 1-based and cover [0, file_size)."""
        parts = plan_parts(file_size, chunk_size)

        assert len(parts) == -(-file_size // chunk_size)
        assert [p.part_number for p in parts] == list(range(1, len(parts) + 1))
        assert parts[0].start == 0
        assert parts[-1].end == file_size
        for previous, current in zip(parts, parts[1:]):
            assert previous.end == current.start
        assert all(0 < p.size <= chunk_size for p in parts)

    def test_twelve_mib_in_five_mib_chunks(self):
        """Test the 12 MiB / 5 MiB split is 5, 5 and 2 MiB."""
        parts = plan_parts(12 * MIB, 5 * MIB)

        assert [p.size for p in parts] == [5 * MIB, 5 * MIB, 2 * MIB]
        assert parts[2].start == 10 * MIB

    def test_empty_file_yields_one_empty_part(self):
        """Test a zero-byte file still produces exactly one part."""
        parts = plan_parts(0, 5 * MIB)

        assert len(parts) == 1
        assert parts[0].part_number == 1
        assert (parts[0].start, parts[0].end) == (0, 0)
        assert parts[0].size == 0

    def test_plan_is_deterministic(self):
        """Test planning the same file twice gives equal parts."""
        assert plan_parts(100, 7) == plan_parts(100, 7)

    def test_negative_file_size(self):
        """Test negative file sizes are rejected."""
        with pytest.raises(ValidationException) as exc_info:
            plan_parts(-1, 10)
        assert "file_size" in str(exc_info.value)

    @pytest.mark.parametrize("chunk_size", [0, -5])
    def test_non_positive_chunk_size(self, chunk_size):
        """Test chunk sizes must be positive."""
        with pytest.raises(ValidationException) as exc_info:
            plan_parts(10, chunk_size)
        assert "chunk_size" in str(exc_info.value)
