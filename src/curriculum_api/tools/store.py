from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping

from curriculum_api.schemas.models import BlockData, ChallengeMetadata, CurriculumData, SuperblockData


@dataclass(frozen=True)
class DataStore:
    """Read-only snapshot of the whole curriculum.

    Built once before any reader exists and never mutated afterwards, so
    concurrent readers need no locking. Every map is a ``MappingProxyType``
    over a private dict and every entity is a frozen model.
    """

    curriculum: CurriculumData
    superblocks: Mapping[str, SuperblockData]
    blocks: Mapping[str, BlockData]
    challenges: Mapping[str, ChallengeMetadata]


def build_challenge_map(blocks: Mapping[str, BlockData]) -> Dict[str, ChallengeMetadata]:
    challenges: Dict[str, ChallengeMetadata] = {}
    for block in blocks.values():
        for challenge in block.challenges:
            # ids are UUIDs upstream; a collision keeps the last one seen
            challenges[challenge.id] = challenge
    return challenges


def build_data_store(
    curriculum: CurriculumData,
    superblocks: Mapping[str, SuperblockData],
    blocks: Mapping[str, BlockData],
) -> DataStore:
    return DataStore(
        curriculum=curriculum,
        superblocks=MappingProxyType(dict(superblocks)),
        blocks=MappingProxyType(dict(blocks)),
        challenges=MappingProxyType(build_challenge_map(blocks)),
    )
