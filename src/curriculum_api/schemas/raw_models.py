from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Literal, Optional, Tuple, Union

# Decoded JSON straight from disk, before validation
RawJson = Dict[str, Any]

RAW_BLOCK_LAYOUTS: Tuple[str, ...] = (
    "link",
    "challenge-list",
    "challenge-grid",
    "dialogue-grid",
    "project-list",
    "legacy-challenge-list",
    "legacy-challenge-grid",
    "legacy-link",
)

RAW_BLOCK_LABELS: Tuple[str, ...] = (
    "lecture",
    "lab",
    "workshop",
    "review",
    "quiz",
    "exam",
    "warm-up",
    "practice",
    "learn",
)


@dataclass(frozen=True)
class RawCurriculum:
    superblocks: Tuple[str, ...]
    certifications: Tuple[str, ...]


@dataclass(frozen=True)
class RawModule:
    dashed_name: str
    blocks: Tuple[str, ...]
    module_type: Optional[str] = None
    coming_soon: bool = False


@dataclass(frozen=True)
class RawChapter:
    dashed_name: str
    modules: Tuple[RawModule, ...]
    coming_soon: bool = False


@dataclass(frozen=True)
class FlatStructure:
    """Legacy superblock: a plain ``blocks`` array."""

    blocks: Tuple[str, ...]
    kind: Literal["flat"] = "flat"


@dataclass(frozen=True)
class ChapterStructure:
    """v9 superblock: ``chapters -> modules -> blocks``."""

    chapters: Tuple[RawChapter, ...]
    kind: Literal["chapters"] = "chapters"


SuperblockStructure = Union[FlatStructure, ChapterStructure]


@dataclass(frozen=True)
class RawSuperblock:
    name: Optional[str]
    structure: SuperblockStructure


def referenced_blocks(structure: SuperblockStructure) -> List[str]:
    """Every block id a superblock points at, in order, duplicates kept."""
    if isinstance(structure, FlatStructure):
        return list(structure.blocks)
    names: List[str] = []
    for chapter in structure.chapters:
        for module in chapter.modules:
            names.extend(module.blocks)
    return names
