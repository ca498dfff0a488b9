from __future__ import annotations

from enum import Enum
from typing import Generic, Optional, Tuple, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field


class BlockLayout(str, Enum):
    LINK = "LINK"
    CHALLENGE_LIST = "CHALLENGE_LIST"
    CHALLENGE_GRID = "CHALLENGE_GRID"
    DIALOGUE_GRID = "DIALOGUE_GRID"
    PROJECT_LIST = "PROJECT_LIST"
    LEGACY_CHALLENGE_LIST = "LEGACY_CHALLENGE_LIST"
    LEGACY_CHALLENGE_GRID = "LEGACY_CHALLENGE_GRID"
    LEGACY_LINK = "LEGACY_LINK"


class BlockLabel(str, Enum):
    LECTURE = "LECTURE"
    LAB = "LAB"
    WORKSHOP = "WORKSHOP"
    REVIEW = "REVIEW"
    QUIZ = "QUIZ"
    EXAM = "EXAM"
    WARM_UP = "WARM_UP"
    PRACTICE = "PRACTICE"
    LEARN = "LEARN"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class RequiredResource(_Frozen):
    # Exactly one of the two is set (checked before normalization)
    src: Optional[str] = None  # script URL
    link: Optional[str] = None  # stylesheet URL


class ChallengeMetadata(_Frozen):
    """Structural metadata only; challenge content never enters the store."""

    id: str
    title: str
    block_dashed_name: str


class CurriculumData(_Frozen):
    superblocks: Tuple[str, ...]
    certifications: Tuple[str, ...]


class ModuleData(_Frozen):
    dashed_name: str
    blocks: Tuple[str, ...]
    module_type: Optional[str] = None
    coming_soon: bool = False
    chapter_dashed_name: str
    superblock_dashed_name: str


class ChapterData(_Frozen):
    dashed_name: str
    modules: Tuple[ModuleData, ...]
    coming_soon: bool = False
    superblock_dashed_name: str


class SuperblockData(_Frozen):
    name: str
    dashed_name: str
    # Flattened view of every block, in chapter/module order for v9 superblocks
    blocks: Tuple[str, ...]
    chapters: Tuple[ChapterData, ...] = Field(default_factory=tuple)
    is_certification: bool


class BlockData(_Frozen):
    name: str
    dashed_name: str
    help_category: str
    challenges: Tuple[ChallengeMetadata, ...]
    block_layout: BlockLayout
    block_label: Optional[BlockLabel]
    is_upcoming_change: bool
    uses_multifile_editor: Optional[bool]
    has_editable_boundaries: Optional[bool]
    disable_loop_protect_tests: Optional[bool]
    disable_loop_protect_preview: Optional[bool]
    required: Optional[Tuple[RequiredResource, ...]]
    template: Optional[str]
    # A v9 block may be shared by several superblocks
    superblock_dashed_names: Tuple[str, ...]


class StoreSummary(_Frozen):
    superblock_count: int
    chapter_count: int
    module_count: int
    block_count: int
    challenge_count: int
    certification_count: int


class DataValidationError(Exception):
    """A load-time data problem, located by file and (optionally) field."""

    def __init__(self, message: str, file_path: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.file_path = file_path
        self.field = field

    def __str__(self) -> str:
        text = f"{self.message} (file: {self.file_path}"
        if self.field:
            text += f", field: {self.field}"
        return text + ")"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DataValidationError):
            return NotImplemented
        return (self.message, self.file_path, self.field) == (other.message, other.file_path, other.field)

    def __hash__(self) -> int:
        return hash((self.message, self.file_path, self.field))


class PipelineInvariantError(RuntimeError):
    """Raised when the loader itself produced an inconsistent state."""


T = TypeVar("T")


class Success(Generic[T]):
    __slots__ = ("data",)
    success = True

    def __init__(self, data: T):
        self.data = data

    def __repr__(self) -> str:
        return f"Success({self.data!r})"


class Failure:
    __slots__ = ("error",)
    success = False

    def __init__(self, error: DataValidationError):
        self.error = error

    def __repr__(self) -> str:
        return f"Failure({self.error!r})"


Result = Union[Success[T], Failure]
