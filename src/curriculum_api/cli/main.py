from __future__ import annotations

import sys
import time
from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from pydantic import BaseModel

from curriculum_api.schemas.models import DataValidationError
from curriculum_api.tools.config import get_settings
from curriculum_api.tools.pipeline import load_data_store
from curriculum_api.tools.provider import InMemoryDataProvider
from curriculum_api.tools.state import ServerState
from curriculum_api.tools.summary import summarize


app = typer.Typer(help="freeCodeCamp curriculum metadata store (load, validate, query)")

DATA_PATH_OPTION = typer.Option(None, "--data-path", help="Curriculum structure directory (default: $DATA_PATH)")


def _configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level)


def _report_failure(error: DataValidationError) -> None:
    typer.echo("Error: Failed to load curriculum data", err=True)
    typer.echo(f"  Details: {error.message}", err=True)
    typer.echo(f"  File: {error.file_path}", err=True)
    if error.field:
        typer.echo(f"  Field: {error.field}", err=True)


def _load_provider(data_path: Optional[Path]) -> InMemoryDataProvider:
    settings = get_settings()
    _configure_logging(settings.log_level)
    result = load_data_store(data_path or settings.data_path, settings.load_concurrency)
    if not result.success:
        _report_failure(result.error)
        raise typer.Exit(code=1)
    return InMemoryDataProvider(result.data)


def _print_model(model: Optional[BaseModel], kind: str, key: str) -> None:
    if model is None:
        typer.echo(f"{kind} not found: {key}", err=True)
        raise typer.Exit(code=1)
    typer.echo(model.model_dump_json(indent=2))


@app.command("check")
def check(data_path: Optional[Path] = DATA_PATH_OPTION):
    """
    Load and validate the whole curriculum, then print what was loaded.
    Exits with status 1 on the first data error.
    """
    state = ServerState()
    started = time.perf_counter()
    provider = _load_provider(data_path)
    elapsed_ms = int((time.perf_counter() - started) * 1000)
    # Only reached after a complete load; failures exit inside _load_provider
    state.mark_ready()

    summary = summarize(provider)
    typer.echo("Curriculum data OK" if state.is_ready() else "Curriculum data not ready")
    typer.echo(f"  Superblocks: {summary.superblock_count}")
    typer.echo(f"  Certifications: {summary.certification_count}")
    typer.echo(f"  Chapters: {summary.chapter_count}")
    typer.echo(f"  Modules: {summary.module_count}")
    typer.echo(f"  Blocks: {summary.block_count}")
    typer.echo(f"  Challenges: {summary.challenge_count}")
    typer.echo(f"  Load time: {elapsed_ms} ms")
    if elapsed_ms > 1000:
        logger.warning("Load time exceeded 1 second")


@app.command("curriculum")
def curriculum(data_path: Optional[Path] = DATA_PATH_OPTION):
    """Print the curriculum manifest."""
    provider = _load_provider(data_path)
    typer.echo(provider.get_curriculum().model_dump_json(indent=2))


@app.command("superblock")
def superblock(
    dashed_name: str = typer.Argument(..., help="Superblock id, e.g. responsive-web-design"),
    data_path: Optional[Path] = DATA_PATH_OPTION,
):
    """Print one superblock."""
    provider = _load_provider(data_path)
    _print_model(provider.get_superblock(dashed_name), "Superblock", dashed_name)


@app.command("block")
def block(
    dashed_name: str = typer.Argument(..., help="Block id"),
    data_path: Optional[Path] = DATA_PATH_OPTION,
):
    """Print one block with its challenge list."""
    provider = _load_provider(data_path)
    _print_model(provider.get_block(dashed_name), "Block", dashed_name)


@app.command("challenge")
def challenge(
    challenge_id: str = typer.Argument(..., help="Challenge id"),
    data_path: Optional[Path] = DATA_PATH_OPTION,
):
    """Print one challenge's metadata."""
    provider = _load_provider(data_path)
    _print_model(provider.get_challenge(challenge_id), "Challenge", challenge_id)


def main():
    app()


if __name__ == "__main__":
    main()
