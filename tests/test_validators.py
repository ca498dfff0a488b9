import pytest

from conftest import make_block
from curriculum_api.schemas.raw_models import ChapterStructure, FlatStructure
from curriculum_api.tools.validators import (
    parse_curriculum,
    parse_superblock,
    validate_block_enums,
    validate_block_fields,
    validate_challenge_structure,
    validate_curriculum_references,
    validate_superblock_references,
)

PATH = "/data/blocks/test.json"


def _superblock(raw):
    result = parse_superblock(raw, "/data/superblocks/sb.json")
    assert result.success, result
    return result.data


def test_curriculum_check_is_permissive() -> None:
    assert validate_curriculum_references().success


def test_parse_curriculum_rejects_missing_certifications() -> None:
    result = parse_curriculum({"superblocks": ["a"]}, "/data/curriculum.json")

    assert not result.success
    assert result.error.field == "certifications"


def test_parse_superblock_flat() -> None:
    superblock = _superblock({"name": "Test", "blocks": ["a", "b"]})

    assert superblock.name == "Test"
    assert superblock.structure == FlatStructure(("a", "b"))


def test_parse_superblock_chapters_win_over_blocks() -> None:
    superblock = _superblock(
        {
            "blocks": ["ignored"],
            "chapters": [{"dashedName": "ch", "modules": [{"dashedName": "m", "blocks": ["a"]}]}],
        }
    )

    assert isinstance(superblock.structure, ChapterStructure)
    assert superblock.structure.chapters[0].modules[0].blocks == ("a",)


def test_parse_superblock_without_blocks_or_chapters() -> None:
    result = parse_superblock({"name": "Empty"}, "/data/superblocks/empty.json")

    assert not result.success
    assert result.error.field == "blocks"


def test_parse_superblock_reports_nested_field_path() -> None:
    raw = {
        "chapters": [
            {"dashedName": "ch", "modules": [{"dashedName": "ok", "blocks": []}, {"dashedName": "bad", "blocks": "a"}]}
        ]
    }

    result = parse_superblock(raw, "/data/superblocks/sb.json")

    assert not result.success
    assert result.error.field == "chapters[0].modules[1].blocks"


def test_superblock_references_all_present() -> None:
    superblocks = {"sb": _superblock({"blocks": ["block-1", "block-2"]})}
    blocks = {"block-1": make_block("block-1"), "block-2": make_block("block-2")}

    assert validate_superblock_references(superblocks, blocks).success


def test_superblock_reference_missing_flat() -> None:
    superblocks = {"test-superblock": _superblock({"blocks": ["block-1", "missing-block"]})}

    result = validate_superblock_references(superblocks, {"block-1": make_block("block-1")})

    assert not result.success
    assert "missing-block" in result.error.message
    assert "test-superblock" in result.error.message
    assert result.error.field == "blocks"
    assert result.error.file_path == "superblocks/test-superblock.json"


def test_superblock_reference_missing_in_module() -> None:
    superblocks = {
        "v9": _superblock(
            {"chapters": [{"dashedName": "ch", "modules": [{"dashedName": "m", "blocks": ["here", "gone"]}]}]}
        )
    }

    result = validate_superblock_references(superblocks, {"here": make_block("here")}, "/data")

    assert not result.success
    assert '"gone"' in result.error.message
    assert result.error.file_path.endswith("superblocks/v9.json")


@pytest.mark.parametrize(
    "layout",
    [
        "link",
        "challenge-list",
        "challenge-grid",
        "dialogue-grid",
        "project-list",
        "legacy-challenge-list",
        "legacy-challenge-grid",
        "legacy-link",
    ],
)
def test_every_layout_is_accepted(layout: str) -> None:
    assert validate_block_enums(make_block("b", blockLayout=layout), PATH).success


def test_invalid_layout_echoes_value() -> None:
    result = validate_block_enums(make_block("b", blockLayout="not-a-real-layout"), PATH)

    assert not result.success
    assert "not-a-real-layout" in result.error.message
    assert result.error.field == "blockLayout"
    assert result.error.file_path == PATH


def test_missing_layout_is_invalid() -> None:
    block = make_block("b")
    del block["blockLayout"]

    assert validate_block_enums(block, PATH).error.field == "blockLayout"


def test_invalid_label() -> None:
    result = validate_block_enums(make_block("b", blockLabel="seminar"), PATH)

    assert not result.success
    assert '"seminar"' in result.error.message
    assert result.error.field == "blockLabel"


def test_absent_label_is_fine() -> None:
    assert validate_block_enums(make_block("b"), PATH).success


@pytest.mark.parametrize(
    "resource",
    [
        {},
        {"src": "a.js", "link": "b.css"},
        {"src": 3},
        "https://cdn.example.com/x.js",
    ],
)
def test_invalid_required_resource(resource) -> None:
    result = validate_block_enums(make_block("b", required=[{"src": "ok.js"}, resource]), PATH)

    assert not result.success
    assert result.error.field == "required[1]"


def test_template_must_be_string() -> None:
    result = validate_block_enums(make_block("b", template=7), PATH)

    assert not result.success
    assert result.error.field == "template"


def test_block_fields_required() -> None:
    block = make_block("b")
    del block["helpCategory"]

    result = validate_block_fields(block, PATH)

    assert not result.success
    assert result.error.field == "helpCategory"


def test_challenge_list_must_not_be_empty() -> None:
    result = validate_challenge_structure([], PATH)

    assert not result.success
    assert result.error.field == "challengeOrder"


def test_challenge_list_missing_is_empty() -> None:
    assert validate_challenge_structure(None, PATH).error.field == "challengeOrder"


def test_first_bad_challenge_index_is_reported() -> None:
    challenges = [
        {"id": "a", "title": "A"},
        {"id": "b", "title": "B"},
        {"id": "", "title": "C"},
        {"id": "d"},
    ]

    result = validate_challenge_structure(challenges, PATH)

    assert not result.success
    assert result.error.field == "challengeOrder[2].id"
    assert "index 2" in result.error.message


def test_challenge_without_title() -> None:
    result = validate_challenge_structure([{"id": "a", "title": "A"}, {"id": "b"}], PATH)

    assert result.error.field == "challengeOrder[1].title"


def test_valid_challenges() -> None:
    assert validate_challenge_structure([{"id": "a", "title": "A", "extra": 1}], PATH).success


def test_module_coming_soon_must_be_boolean() -> None:
    raw = {
        "chapters": [
            {"dashedName": "ch", "modules": [{"dashedName": "m", "blocks": ["a"], "comingSoon": "false"}]}
        ]
    }

    result = parse_superblock(raw, "/data/superblocks/sb.json")

    assert not result.success
    assert result.error.field == "chapters[0].modules[0].comingSoon"


def test_boolean_coming_soon_is_kept() -> None:
    superblock = _superblock(
        {"chapters": [{"dashedName": "ch", "comingSoon": False, "modules": [{"dashedName": "m", "blocks": [], "comingSoon": True}]}]}
    )

    chapter = superblock.structure.chapters[0]
    assert chapter.coming_soon is False
    assert chapter.modules[0].coming_soon is True


@pytest.mark.parametrize("value", ["false", 0, 1, [], {}])
def test_block_flags_reject_non_booleans(value) -> None:
    result = validate_block_fields(make_block("b", hasEditableBoundaries=value), PATH)

    assert not result.success
    assert result.error.field == "hasEditableBoundaries"


def test_block_flags_accept_booleans_and_null() -> None:
    block = make_block("b", isUpcomingChange=True, usesMultifileEditor=None, disableLoopProtectPreview=False)

    assert validate_block_fields(block, PATH).success
