"""CLI commands for transfertrack."""

from __future__ import annotations

import logging
import sys
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import TYPE_CHECKING

import typer
from rich.console import Console
from rich.logging import RichHandler

from transfertrack.adapters.storage import FilesystemStore
from transfertrack.config import PUSH_PROMPTS
from transfertrack.core.exceptions import TerminalUnavailableError, TransferTrackError
from transfertrack.core.services import DEFAULT_MEDIA_TYPE, push_files
from transfertrack.progress import StatusPrinter, TextTarget, new_manager, wrap


if TYPE_CHECKING:
    from transfertrack.core.ports import TargetPort
    from transfertrack.progress import TrackingManager


app = typer.Typer(
    name="transfertrack",
    help="Push files to a content store with live terminal progress.",
    no_args_is_help=True,
)

logger = logging.getLogger(__name__)


@app.callback()
def callback() -> None:
    """Push files to a content store with live terminal progress."""


def _configure_logging(verbose: bool) -> None:
    """Send library logs to stderr through rich."""
    handler = RichHandler(console=Console(stderr=True), show_path=False)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[handler],
        force=True,
    )


def _echo_error(error: TransferTrackError) -> None:
    typer.echo(f"Error: {error}", err=True)
    if error.recovery_hint:
        typer.echo(f"Hint: {error.recovery_hint}", err=True)


@app.command()
def push(
    store: Path = typer.Argument(
        ...,
        help="Directory of the content store. Created if missing.",
        file_okay=False,
    ),
    files: list[Path] = typer.Argument(
        ...,
        help="Files to push.",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    tag: str | None = typer.Option(
        None,
        "--tag",
        "-t",
        help="Reference to attach to the last pushed file.",
    ),
    media_type: str = typer.Option(
        DEFAULT_MEDIA_TYPE,
        "--media-type",
        help="Media type recorded for every file.",
    ),
    concurrency: int = typer.Option(
        3,
        "--concurrency",
        "-c",
        min=1,
        help="Number of files pushed in parallel.",
    ),
    no_tty: bool = typer.Option(
        False,
        "--no-tty",
        help="Print plain status lines instead of live progress.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logs and untitled content.",
    ),
) -> None:
    """Push files to a content store.

    Examples:
        transfertrack push ./store layer.tar config.json
        transfertrack push ./store app.tar --tag v1
        transfertrack push ./store *.tar --concurrency 8 --no-tty
    """
    _configure_logging(verbose)

    store_target = FilesystemStore(store)
    manager: TrackingManager | None = None
    target: TargetPort
    if not no_tty:
        try:
            manager = new_manager(sys.stderr)
        except TerminalUnavailableError as e:
            logger.debug("Falling back to plain output: %s", e)
    if manager is not None:
        target = wrap(store_target, manager, PUSH_PROMPTS)
    else:
        target = TextTarget(
            store_target, StatusPrinter(sys.stdout), PUSH_PROMPTS, verbose=verbose
        )

    error: TransferTrackError | None = None
    try:
        report = push_files(
            target,
            files,
            executor=ThreadPoolExecutor(max_workers=concurrency),
            media_type=media_type,
            reference=tag,
        )
    except TransferTrackError as e:
        error = e
    finally:
        if manager is not None:
            try:
                manager.stop()
            except TransferTrackError as e:
                # a failed transfer is reported before a terminal failure
                error = error or e

    if error is not None:
        _echo_error(error)
        raise typer.Exit(1) from None

    typer.echo(f"Pushed {report.pushed} file(s) to {store}")
    if report.skipped:
        typer.echo(f"Skipped {len(report.skipped)} file(s) already in the store")
    if tag:
        typer.echo(f"Tagged {report.descriptors[-1].digest} as {tag}")


def main() -> None:
    """Entry point for the CLI."""
    app()
