from __future__ import annotations

from typing import Optional, Protocol

from curriculum_api.schemas.models import BlockData, ChallengeMetadata, CurriculumData, SuperblockData
from curriculum_api.tools.store import DataStore


class DataProvider(Protocol):
    """The only surface request handlers may use to read curriculum data.

    Lookups return ``None`` for unknown keys and never raise.
    """

    def get_curriculum(self) -> CurriculumData: ...

    def get_superblock(self, dashed_name: str) -> Optional[SuperblockData]: ...

    def get_block(self, dashed_name: str) -> Optional[BlockData]: ...

    def get_challenge(self, challenge_id: str) -> Optional[ChallengeMetadata]: ...


class InMemoryDataProvider:
    def __init__(self, store: DataStore):
        self._store = store

    def get_curriculum(self) -> CurriculumData:
        return self._store.curriculum

    def get_superblock(self, dashed_name: str) -> Optional[SuperblockData]:
        return self._store.superblocks.get(dashed_name)

    def get_block(self, dashed_name: str) -> Optional[BlockData]:
        return self._store.blocks.get(dashed_name)

    def get_challenge(self, challenge_id: str) -> Optional[ChallengeMetadata]:
        return self._store.challenges.get(challenge_id)
