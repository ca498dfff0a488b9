from __future__ import annotations

from typing import AbstractSet, Dict, List, Mapping, Optional, Sequence

from curriculum_api.schemas.models import (
    BlockData,
    BlockLabel,
    BlockLayout,
    ChallengeMetadata,
    ChapterData,
    CurriculumData,
    ModuleData,
    RequiredResource,
    SuperblockData,
)
from curriculum_api.schemas.raw_models import (
    ChapterStructure,
    FlatStructure,
    RawChapter,
    RawCurriculum,
    RawJson,
    RawSuperblock,
    referenced_blocks,
)


BLOCK_LAYOUT_MAPPING: Dict[str, BlockLayout] = {
    "link": BlockLayout.LINK,
    "challenge-list": BlockLayout.CHALLENGE_LIST,
    "challenge-grid": BlockLayout.CHALLENGE_GRID,
    "dialogue-grid": BlockLayout.DIALOGUE_GRID,
    "project-list": BlockLayout.PROJECT_LIST,
    "legacy-challenge-list": BlockLayout.LEGACY_CHALLENGE_LIST,
    "legacy-challenge-grid": BlockLayout.LEGACY_CHALLENGE_GRID,
    "legacy-link": BlockLayout.LEGACY_LINK,
}

BLOCK_LABEL_MAPPING: Dict[str, BlockLabel] = {
    "lecture": BlockLabel.LECTURE,
    "lab": BlockLabel.LAB,
    "workshop": BlockLabel.WORKSHOP,
    "review": BlockLabel.REVIEW,
    "quiz": BlockLabel.QUIZ,
    "exam": BlockLabel.EXAM,
    "warm-up": BlockLabel.WARM_UP,
    "practice": BlockLabel.PRACTICE,
    "learn": BlockLabel.LEARN,
}


def normalize_block_layout(raw: str) -> BlockLayout:
    # KeyError here means validation was skipped
    return BLOCK_LAYOUT_MAPPING[raw]


def normalize_block_label(raw: Optional[str]) -> Optional[BlockLabel]:
    return BLOCK_LABEL_MAPPING[raw] if raw is not None else None


def display_name(dashed_name: str) -> str:
    return " ".join(word.capitalize() for word in dashed_name.split("-") if word)


def normalize_curriculum(raw: RawCurriculum) -> CurriculumData:
    return CurriculumData(superblocks=raw.superblocks, certifications=raw.certifications)


def _normalize_chapter(chapter: RawChapter, superblock_dashed_name: str) -> ChapterData:
    return ChapterData(
        dashed_name=chapter.dashed_name,
        modules=tuple(
            ModuleData(
                dashed_name=module.dashed_name,
                blocks=module.blocks,
                module_type=module.module_type,
                coming_soon=module.coming_soon,
                chapter_dashed_name=chapter.dashed_name,
                superblock_dashed_name=superblock_dashed_name,
            )
            for module in chapter.modules
        ),
        coming_soon=chapter.coming_soon,
        superblock_dashed_name=superblock_dashed_name,
    )


def normalize_superblock(
    dashed_name: str,
    raw: RawSuperblock,
    certifications: AbstractSet[str],
) -> SuperblockData:
    structure = raw.structure
    if isinstance(structure, ChapterStructure):
        chapters = tuple(_normalize_chapter(ch, dashed_name) for ch in structure.chapters)
    elif isinstance(structure, FlatStructure):
        chapters = ()
    else:
        raise TypeError(f"Unknown superblock structure: {structure!r}")

    return SuperblockData(
        name=raw.name or display_name(dashed_name),
        dashed_name=dashed_name,
        # Duplicates are kept; de-duplicating is up to consumers
        blocks=tuple(referenced_blocks(structure)),
        chapters=chapters,
        is_certification=dashed_name in certifications,
    )


def build_block_parents(superblocks: Mapping[str, SuperblockData]) -> Dict[str, List[str]]:
    """Reverse index block id -> superblock ids, in discovery order."""
    parents: Dict[str, List[str]] = {}
    for superblock_name, superblock in superblocks.items():
        for block_name in superblock.blocks:
            owners = parents.setdefault(block_name, [])
            if superblock_name not in owners:
                owners.append(superblock_name)
    return parents


def normalize_challenge_metadata(raw: RawJson, block_dashed_name: str) -> ChallengeMetadata:
    # Content fields (description, tests, solutions...) are dropped on purpose
    return ChallengeMetadata(id=raw["id"], title=raw["title"], block_dashed_name=block_dashed_name)


def _normalize_required(raw: Optional[Sequence[RawJson]]) -> Optional[tuple]:
    if raw is None:
        return None
    return tuple(RequiredResource(src=r.get("src"), link=r.get("link")) for r in raw)


def normalize_block(
    dashed_name: str,
    raw: RawJson,
    superblock_dashed_names: Sequence[str],
) -> BlockData:
    return BlockData(
        name=raw["name"],
        dashed_name=dashed_name,
        help_category=raw["helpCategory"],
        challenges=tuple(normalize_challenge_metadata(ch, dashed_name) for ch in raw["challengeOrder"]),
        block_layout=normalize_block_layout(raw["blockLayout"]),
        block_label=normalize_block_label(raw.get("blockLabel")),
        is_upcoming_change=raw.get("isUpcomingChange") or False,
        uses_multifile_editor=raw.get("usesMultifileEditor"),
        has_editable_boundaries=raw.get("hasEditableBoundaries"),
        disable_loop_protect_tests=raw.get("disableLoopProtectTests"),
        disable_loop_protect_preview=raw.get("disableLoopProtectPreview"),
        required=_normalize_required(raw.get("required")),
        template=raw.get("template"),
        superblock_dashed_names=tuple(superblock_dashed_names),
    )
