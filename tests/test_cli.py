"""
Unit tests for the upload CLI.
"""
from unittest.mock import patch
from click.testing import CliRunner
from src.cli import cli
from src.core.exceptions import PartTransferError


class TestUploadCommand:
    """Test suite for the upload command."""

    def test_upload_success(self, tmp_path):
        """Test a completed upload prints the object location."""
        source = tmp_path / "data.csv"
        source.write_bytes(b"a,b\n1,2\n")

        async def fake_run(path, api_url, chunk_size, threads, progress):
            assert (api_url, chunk_size, threads) == ("http://api.test/api", 1024, 3)
            return {"response": {"Location": "https://s3.test/datasets/k/data.csv"}}

        with patch("src.cli._run_upload", new=fake_run):
            result = CliRunner().invoke(cli, [
                "upload", str(source), "--api-url", "http://api.test/api", "--chunk-size", "1024", "--threads", "3"
            ])

        assert result.exit_code == 0
        assert "https://s3.test/datasets/k/data.csv" in result.output

    def test_upload_failure_exits_non_zero(self, tmp_path):
        """Test an upload error is reported with exit code 1."""
        source = tmp_path / "data.csv"
        source.write_bytes(b"x")

        async def fake_run(path, api_url, chunk_size, threads, progress):
            return {"error": PartTransferError("Failed to upload part 1: status 403", 1)}

        with patch("src.cli._run_upload", new=fake_run):
            result = CliRunner().invoke(cli, ["upload", str(source)])

        assert result.exit_code == 1
        assert "status 403" in result.output

    def test_upload_missing_file(self):
        """Test a missing path is rejected by click."""
        result = CliRunner().invoke(cli, ["upload", "does-not-exist.bin"])

        assert result.exit_code == 2

    def test_log_level_defaults_to_warning(self, tmp_path):
        """Test logging falls back to WARNING when --log-level is not given."""
        source = tmp_path / "data.csv"
        source.write_bytes(b"x")

        async def fake_run(path, api_url, chunk_size, threads, progress):
            return {"response": {"Key": "datasets/k/data.csv"}}

        with patch("src.cli._run_upload", new=fake_run), patch("src.cli.configure_logging") as configure:
            result = CliRunner().invoke(cli, ["upload", str(source)])

        assert result.exit_code == 0
        configure.assert_called_once_with("WARNING")
