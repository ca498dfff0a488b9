from __future__ import annotations

from typing import Set

from curriculum_api.schemas.models import StoreSummary
from curriculum_api.tools.provider import DataProvider


def summarize(provider: DataProvider) -> StoreSummary:
    """Count what the provider can reach from the curriculum manifest.

    Shared blocks are counted once, and so are their challenges.
    """
    curriculum = provider.get_curriculum()
    superblock_count = chapter_count = module_count = 0
    block_names: Set[str] = set()

    for sb_name in curriculum.superblocks:
        superblock = provider.get_superblock(sb_name)
        if superblock is None:
            continue
        superblock_count += 1
        chapter_count += len(superblock.chapters)
        module_count += sum(len(ch.modules) for ch in superblock.chapters)
        block_names.update(superblock.blocks)

    challenge_ids: Set[str] = set()
    for block_name in block_names:
        block = provider.get_block(block_name)
        if block is not None:
            challenge_ids.update(ch.id for ch in block.challenges)

    return StoreSummary(
        superblock_count=superblock_count,
        chapter_count=chapter_count,
        module_count=module_count,
        block_count=len(block_names),
        challenge_count=len(challenge_ids),
        certification_count=sum(1 for c in curriculum.certifications if provider.get_superblock(c) is not None),
    )
