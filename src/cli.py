"""
Command-line front end for chunked multipart uploads.
Uploads a local file through the upload API with a live progress bar.
"""
import asyncio
import signal
import sys
from typing import Optional

import click
from rich.console import Console
from rich.progress import BarColumn, DownloadColumn, Progress, TextColumn, TransferSpeedColumn

from src.clients.multipart_client import MultipartUploadClient
from src.core import config
from src.core.logging_config import configure_logging
from src.services.uploader import Uploader

console = Console()


async def _run_upload(path: str, api_url: str, chunk_size: Optional[int], threads: Optional[int], progress: Progress):
    task_id = progress.add_task("upload", filename=click.format_filename(path), total=None)
    outcome = {}

    def on_progress(snapshot):
        progress.update(task_id, completed=snapshot.sent, total=snapshot.total)

    async with MultipartUploadClient(base_url=api_url) as client:
        uploader = Uploader(
            path,
            client,
            chunk_size=chunk_size,
            threads_quantity=threads,
            on_progress=on_progress,
            on_complete=lambda response: outcome.update(response=response),
            on_error=lambda error: outcome.update(error=error)
        )

        loop = asyncio.get_running_loop()
        try:
            loop.add_signal_handler(signal.SIGINT, uploader.abort)
        except NotImplementedError:
            # Windows event loops have no signal handlers; Ctrl-C then stops the process
            pass

        await uploader.start()

    return outcome


@click.group()
@click.option('--log-level', default=None, help='Log level (defaults to WARNING)')
def cli(log_level):
    """Multipart upload client."""
    configure_logging(log_level or "WARNING")


@cli.command()
@click.argument('path', type=click.Path(exists=True, dir_okay=False, readable=True))
@click.option('--api-url', default=lambda: config.settings.api_base_url, envvar='API_BASE_URL', help='Upload API base URL')
@click.option('--chunk-size', type=click.IntRange(min=1), default=None, help='Part size in bytes')
@click.option('--threads', '-t', type=click.IntRange(min=1), default=None, help='Parts uploaded at once (max 15)')
def upload(path, api_url, chunk_size, threads):
    """Upload PATH as a multipart upload."""
    with Progress(
        TextColumn("[bold blue]{task.fields[filename]}"),
        BarColumn(),
        "[progress.percentage]{task.percentage:>3.0f}%",
        DownloadColumn(),
        TransferSpeedColumn(),
        console=console
    ) as progress:
        outcome = asyncio.run(_run_upload(path, api_url, chunk_size, threads, progress))

    if "error" in outcome:
        console.print(f"[red]Upload failed: {outcome['error']}[/red]")
        sys.exit(1)

    response = outcome.get("response") or {}
    console.print(f"[green]Uploaded[/green] {response.get('Location') or response.get('Key', '')}")


if __name__ == "__main__":
    cli()
