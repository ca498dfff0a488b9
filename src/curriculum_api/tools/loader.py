from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Awaitable, Callable, Dict, Optional, Sequence, Set

from loguru import logger

from curriculum_api.schemas.models import DataValidationError, Failure, Result, Success
from curriculum_api.schemas.raw_models import RawJson
from curriculum_api.tools.config import DEFAULT_LOAD_CONCURRENCY


CURRICULUM_FILE = "curriculum.json"
SUPERBLOCKS_DIR = "superblocks"
BLOCKS_DIR = "blocks"


def curriculum_path(data_path: Path | str) -> Path:
    return Path(data_path).resolve() / CURRICULUM_FILE


def superblock_path(data_path: Path | str, dashed_name: str) -> Path:
    return Path(data_path).resolve() / SUPERBLOCKS_DIR / f"{dashed_name}.json"


def block_path(data_path: Path | str, dashed_name: str) -> Path:
    return Path(data_path).resolve() / BLOCKS_DIR / f"{dashed_name}.json"


def _read_json(path: Path) -> RawJson:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object, got {type(data).__name__}")
    return data


async def _load(path: Path, label: str) -> Result[RawJson]:
    try:
        data = await asyncio.to_thread(_read_json, path)
    except (OSError, ValueError) as exc:
        # json.JSONDecodeError and UnicodeDecodeError are both ValueErrors
        return Failure(DataValidationError(f"Failed to load {label}: {exc}", str(path)))
    return Success(data)


async def load_curriculum_file(data_path: Path | str) -> Result[RawJson]:
    path = curriculum_path(data_path)
    logger.debug(f"Reading curriculum manifest {path}")
    return await _load(path, CURRICULUM_FILE)


async def load_superblock_file(dashed_name: str, data_path: Path | str) -> Result[RawJson]:
    return await _load(superblock_path(data_path, dashed_name), f'superblock "{dashed_name}"')


async def load_block_file(dashed_name: str, data_path: Path | str) -> Result[RawJson]:
    return await _load(block_path(data_path, dashed_name), f'block "{dashed_name}"')


async def list_block_files(data_path: Path | str) -> Set[str]:
    """Ids of every block file present on disk."""
    blocks_dir = Path(data_path).resolve() / BLOCKS_DIR

    def _scan() -> Set[str]:
        if not blocks_dir.is_dir():
            return set()
        return {p.stem for p in blocks_dir.glob("*.json") if p.is_file()}

    return await asyncio.to_thread(_scan)


async def _load_many(
    names: Sequence[str],
    load_one: Callable[[str, Path | str], Awaitable[Result[RawJson]]],
    data_path: Path | str,
    max_concurrency: int,
) -> Result[Dict[str, RawJson]]:
    semaphore = asyncio.Semaphore(max(1, max_concurrency))

    async def _bounded(name: str) -> Result[RawJson]:
        async with semaphore:
            return await load_one(name, data_path)

    results = await asyncio.gather(*(_bounded(n) for n in names))

    # Fail fast: the first failure in input order wins, the rest are dropped
    for result in results:
        if not result.success:
            return result

    loaded: Dict[str, RawJson] = {}
    for name, result in zip(names, results):
        loaded[name] = result.data
    return Success(loaded)


async def load_all_superblocks(
    names: Sequence[str],
    data_path: Path | str,
    max_concurrency: Optional[int] = None,
) -> Result[Dict[str, RawJson]]:
    logger.info(f"Loading {len(names)} superblock files")
    return await _load_many(names, load_superblock_file, data_path, max_concurrency or DEFAULT_LOAD_CONCURRENCY)


async def load_all_blocks(
    names: Sequence[str],
    data_path: Path | str,
    max_concurrency: Optional[int] = None,
) -> Result[Dict[str, RawJson]]:
    logger.info(f"Loading {len(names)} block files")
    return await _load_many(names, load_block_file, data_path, max_concurrency or DEFAULT_LOAD_CONCURRENCY)
