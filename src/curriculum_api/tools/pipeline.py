from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Dict, List, Optional

from loguru import logger

from curriculum_api.schemas.models import BlockData, Failure, PipelineInvariantError, Result, Success, SuperblockData
from curriculum_api.schemas.raw_models import RawSuperblock, referenced_blocks
from curriculum_api.tools.loader import (
    block_path,
    curriculum_path,
    list_block_files,
    load_all_blocks,
    load_all_superblocks,
    load_curriculum_file,
    superblock_path,
)
from curriculum_api.tools.normalizer import (
    build_block_parents,
    normalize_block,
    normalize_curriculum,
    normalize_superblock,
)
from curriculum_api.tools.store import DataStore, build_data_store
from curriculum_api.tools.validators import (
    parse_curriculum,
    parse_superblock,
    validate_block_enums,
    validate_block_fields,
    validate_challenge_structure,
    validate_curriculum_references,
    validate_superblock_references,
)


async def initialize_data_store(
    data_path: Path | str,
    max_concurrency: Optional[int] = None,
) -> Result[DataStore]:
    """Load, validate and index the curriculum tree under ``data_path``.

    Returns the first error met at any phase, unchanged. A block left without
    a parent superblock raises ``PipelineInvariantError`` instead: that can
    only come from a bug in the reverse index, not from the data.
    """
    data_path = Path(data_path).resolve()
    logger.info(f"Loading curriculum data from {data_path}")

    # 1. manifest
    manifest = await load_curriculum_file(data_path)
    if not manifest.success:
        return manifest
    parsed_manifest = parse_curriculum(manifest.data, str(curriculum_path(data_path)))
    if not parsed_manifest.success:
        return parsed_manifest
    raw_curriculum = parsed_manifest.data

    # 2. superblocks, then their shape (flat or chapters)
    loaded_superblocks = await load_all_superblocks(raw_curriculum.superblocks, data_path, max_concurrency)
    if not loaded_superblocks.success:
        return loaded_superblocks
    raw_superblocks: Dict[str, RawSuperblock] = {}
    for name, raw in loaded_superblocks.data.items():
        parsed = parse_superblock(raw, str(superblock_path(data_path, name)))
        if not parsed.success:
            return parsed
        raw_superblocks[name] = parsed.data

    # 3. every referenced block, once, in first-seen order
    block_names: List[str] = []
    seen = set()
    for superblock in raw_superblocks.values():
        for block_name in referenced_blocks(superblock.structure):
            if block_name not in seen:
                seen.add(block_name)
                block_names.append(block_name)

    # Missing files are left to the reference check, which names the superblock
    on_disk = await list_block_files(data_path)
    loaded_blocks = await load_all_blocks([n for n in block_names if n in on_disk], data_path, max_concurrency)
    if not loaded_blocks.success:
        return loaded_blocks
    raw_blocks = loaded_blocks.data

    # 4. validation
    checked = validate_curriculum_references()
    if not checked.success:
        return checked
    checked = validate_superblock_references(raw_superblocks, raw_blocks, data_path)
    if not checked.success:
        return checked
    for name, raw in raw_blocks.items():
        path = str(block_path(data_path, name))
        checked = validate_block_fields(raw, path)
        if checked.success:
            checked = validate_block_enums(raw, path)
        if checked.success:
            checked = validate_challenge_structure(raw.get("challengeOrder"), path)
        if not checked.success:
            return checked

    # 5. normalization
    curriculum = normalize_curriculum(raw_curriculum)
    certifications = set(curriculum.certifications)
    superblocks: Dict[str, SuperblockData] = {
        name: normalize_superblock(name, raw, certifications) for name, raw in raw_superblocks.items()
    }
    parents = build_block_parents(superblocks)

    blocks: Dict[str, BlockData] = {}
    for name, raw in raw_blocks.items():
        owners = parents.get(name)
        if not owners:
            raise PipelineInvariantError(f'Block "{name}" has no parent superblock')
        blocks[name] = normalize_block(name, raw, owners)

    # 6. store
    store = build_data_store(curriculum, superblocks, blocks)
    logger.info(
        f"Loaded {len(store.superblocks)} superblocks, {len(store.blocks)} blocks, "
        f"{len(store.challenges)} challenges"
    )
    return Success(store)


def load_data_store(data_path: Path | str, max_concurrency: Optional[int] = None) -> Result[DataStore]:
    """Blocking wrapper for callers outside an event loop."""
    result = asyncio.run(initialize_data_store(data_path, max_concurrency))
    if isinstance(result, Failure):
        logger.error(f"Curriculum load failed: {result.error}")
    return result
