from __future__ import annotations

from pathlib import Path
from typing import Any, List, Mapping, Optional

from curriculum_api.schemas.models import DataValidationError, Failure, Result, Success
from curriculum_api.schemas.raw_models import (
    RAW_BLOCK_LABELS,
    RAW_BLOCK_LAYOUTS,
    ChapterStructure,
    FlatStructure,
    RawChapter,
    RawCurriculum,
    RawJson,
    RawModule,
    RawSuperblock,
    referenced_blocks,
)

OK: Success[None] = Success(None)


BLOCK_FLAGS = (
    "isUpcomingChange",
    "usesMultifileEditor",
    "hasEditableBoundaries",
    "disableLoopProtectTests",
    "disableLoopProtectPreview",
)


def _is_str_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(v, str) for v in value)


def _check_flag(raw: RawJson, key: str, file_path: str, field: str) -> Result[None]:
    # JSON "false" is a string; bool("false") would read it as True
    value = raw.get(key)
    if value is not None and not isinstance(value, bool):
        return Failure(DataValidationError(f'Invalid {key} value: {value!r}. Expected true or false', file_path, field))
    return OK


# --- shape parsing ---

def parse_curriculum(raw: RawJson, file_path: str) -> Result[RawCurriculum]:
    for key in ("superblocks", "certifications"):
        if not _is_str_list(raw.get(key)):
            return Failure(DataValidationError(f'"{key}" must be a list of strings', file_path, key))
    return Success(RawCurriculum(tuple(raw["superblocks"]), tuple(raw["certifications"])))


def _parse_module(raw: Any, path: str, file_path: str) -> Result[RawModule]:
    if not isinstance(raw, dict):
        return Failure(DataValidationError("Module entry must be an object", file_path, path))
    if not isinstance(raw.get("dashedName"), str) or not raw["dashedName"]:
        return Failure(DataValidationError('Module is missing required "dashedName"', file_path, f"{path}.dashedName"))
    if not _is_str_list(raw.get("blocks")):
        return Failure(DataValidationError('Module "blocks" must be a list of strings', file_path, f"{path}.blocks"))
    module_type = raw.get("moduleType")
    if module_type is not None and not isinstance(module_type, str):
        return Failure(DataValidationError('Module "moduleType" must be a string', file_path, f"{path}.moduleType"))
    checked = _check_flag(raw, "comingSoon", file_path, f"{path}.comingSoon")
    if not checked.success:
        return checked
    return Success(
        RawModule(
            dashed_name=raw["dashedName"],
            blocks=tuple(raw["blocks"]),
            module_type=module_type,
            coming_soon=raw.get("comingSoon") or False,
        )
    )


def _parse_chapter(raw: Any, path: str, file_path: str) -> Result[RawChapter]:
    if not isinstance(raw, dict):
        return Failure(DataValidationError("Chapter entry must be an object", file_path, path))
    if not isinstance(raw.get("dashedName"), str) or not raw["dashedName"]:
        return Failure(DataValidationError('Chapter is missing required "dashedName"', file_path, f"{path}.dashedName"))
    if not isinstance(raw.get("modules"), list):
        return Failure(DataValidationError('Chapter "modules" must be a list', file_path, f"{path}.modules"))
    checked = _check_flag(raw, "comingSoon", file_path, f"{path}.comingSoon")
    if not checked.success:
        return checked
    modules: List[RawModule] = []
    for j, raw_module in enumerate(raw["modules"]):
        result = _parse_module(raw_module, f"{path}.modules[{j}]", file_path)
        if not result.success:
            return result
        modules.append(result.data)
    return Success(
        RawChapter(
            dashed_name=raw["dashedName"],
            modules=tuple(modules),
            coming_soon=raw.get("comingSoon") or False,
        )
    )


def parse_superblock(raw: RawJson, file_path: str) -> Result[RawSuperblock]:
    """Decide which schema generation a superblock file uses.

    ``chapters`` takes precedence over ``blocks`` when a file carries both.
    """
    name = raw.get("name")
    if name is not None and not isinstance(name, str):
        return Failure(DataValidationError('"name" must be a string', file_path, "name"))

    if raw.get("chapters") is not None:
        if not isinstance(raw["chapters"], list):
            return Failure(DataValidationError('"chapters" must be a list', file_path, "chapters"))
        chapters: List[RawChapter] = []
        for i, raw_chapter in enumerate(raw["chapters"]):
            result = _parse_chapter(raw_chapter, f"chapters[{i}]", file_path)
            if not result.success:
                return result
            chapters.append(result.data)
        return Success(RawSuperblock(name=name, structure=ChapterStructure(tuple(chapters))))

    if raw.get("blocks") is not None:
        if not _is_str_list(raw["blocks"]):
            return Failure(DataValidationError('"blocks" must be a list of strings', file_path, "blocks"))
        return Success(RawSuperblock(name=name, structure=FlatStructure(tuple(raw["blocks"]))))

    return Failure(DataValidationError('Superblock must define either "blocks" or "chapters"', file_path, "blocks"))


# --- cross-reference checks ---

def validate_curriculum_references() -> Result[None]:
    # Certifications may name retired superblocks that no longer ship a
    # structure file, so the manifest is never cross-checked.
    return OK


def validate_superblock_references(
    superblocks: Mapping[str, RawSuperblock],
    blocks: Mapping[str, Any],
    data_path: Optional[Path | str] = None,
) -> Result[None]:
    for superblock_name, superblock in superblocks.items():
        for block_name in referenced_blocks(superblock.structure):
            if block_name in blocks:
                continue
            file_path = f"superblocks/{superblock_name}.json"
            if data_path is not None:
                file_path = str(Path(data_path).resolve() / file_path)
            return Failure(
                DataValidationError(
                    f'Block "{block_name}" referenced in superblock "{superblock_name}" but file not found',
                    file_path,
                    "blocks",
                )
            )
    return OK


# --- per-block checks ---

def validate_block_fields(block: RawJson, block_path: str) -> Result[None]:
    for key in ("name", "helpCategory"):
        if not isinstance(block.get(key), str):
            return Failure(DataValidationError(f'Block is missing required string "{key}"', block_path, key))
    for key in BLOCK_FLAGS:
        checked = _check_flag(block, key, block_path, key)
        if not checked.success:
            return checked
    return OK


def validate_block_enums(block: RawJson, block_path: str) -> Result[None]:
    layout = block.get("blockLayout")
    if layout not in RAW_BLOCK_LAYOUTS:
        return Failure(
            DataValidationError(
                f'Invalid blockLayout value: "{layout}". Valid values: {", ".join(RAW_BLOCK_LAYOUTS)}',
                block_path,
                "blockLayout",
            )
        )

    label = block.get("blockLabel")
    if label is not None and label not in RAW_BLOCK_LABELS:
        return Failure(
            DataValidationError(
                f'Invalid blockLabel value: "{label}". Valid values: {", ".join(RAW_BLOCK_LABELS)}',
                block_path,
                "blockLabel",
            )
        )

    required = block.get("required")
    if required is not None:
        if not isinstance(required, list):
            return Failure(DataValidationError('"required" must be a list', block_path, "required"))
        for i, resource in enumerate(required):
            keys = [k for k in ("src", "link") if isinstance(resource, dict) and k in resource]
            if len(keys) != 1 or not isinstance(resource[keys[0]], str):
                return Failure(
                    DataValidationError(
                        f'Invalid required resource at index {i}: {resource!r}. Expected exactly one of "src" or "link" as a string',
                        block_path,
                        f"required[{i}]",
                    )
                )

    template = block.get("template")
    if template is not None and not isinstance(template, str):
        return Failure(
            DataValidationError(f'Invalid template value: "{template}". Expected a string', block_path, "template")
        )

    return OK


def validate_challenge_structure(challenges: Any, block_path: str) -> Result[None]:
    if not isinstance(challenges, list) or not challenges:
        return Failure(DataValidationError("challengeOrder array must not be empty", block_path, "challengeOrder"))

    for i, challenge in enumerate(challenges):
        entry = challenge if isinstance(challenge, dict) else {}
        if not isinstance(entry.get("id"), str) or not entry["id"]:
            return Failure(
                DataValidationError(
                    f'Challenge at index {i} is missing required "id" field',
                    block_path,
                    f"challengeOrder[{i}].id",
                )
            )
        if not isinstance(entry.get("title"), str) or not entry["title"]:
            return Failure(
                DataValidationError(
                    f'Challenge at index {i} is missing required "title" field',
                    block_path,
                    f"challengeOrder[{i}].title",
                )
            )
    return OK
