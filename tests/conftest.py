from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import pytest


def make_block(name: str, challenges: int = 1, prefix: Optional[str] = None, **extra: Any) -> Dict[str, Any]:
    prefix = prefix or name
    block: Dict[str, Any] = {
        "name": name.replace("-", " ").title(),
        "dashedName": name,
        "helpCategory": "HTML-CSS",
        "challengeOrder": [
            {"id": f"{prefix}-{i}", "title": f"Step {i}", "description": "content is never loaded"}
            for i in range(1, challenges + 1)
        ],
        "blockLayout": "challenge-list",
        "isUpcomingChange": False,
    }
    block.update(extra)
    return block


def write_tree(
    root: Path,
    manifest: Dict[str, Any],
    superblocks: Dict[str, Any],
    blocks: Dict[str, Any],
) -> Path:
    (root / "superblocks").mkdir(parents=True, exist_ok=True)
    (root / "blocks").mkdir(parents=True, exist_ok=True)
    (root / "curriculum.json").write_text(json.dumps(manifest), encoding="utf-8")
    for name, payload in superblocks.items():
        (root / "superblocks" / f"{name}.json").write_text(json.dumps(payload), encoding="utf-8")
    for name, payload in blocks.items():
        (root / "blocks" / f"{name}.json").write_text(json.dumps(payload), encoding="utf-8")
    return root


def sample_manifest() -> Dict[str, Any]:
    # "legacy-front-end" has no superblock file on purpose
    return {
        "superblocks": ["responsive-web-design", "full-stack-developer"],
        "certifications": ["responsive-web-design", "legacy-front-end"],
    }


def sample_superblocks() -> Dict[str, Any]:
    return {
        "responsive-web-design": {
            "name": "Responsive Web Design",
            "blocks": ["basic-html-and-html5", "basic-css"],
        },
        "full-stack-developer": {
            "chapters": [
                {
                    "dashedName": "html",
                    "modules": [
                        {
                            "dashedName": "basic-html",
                            "moduleType": "review",
                            "blocks": ["workshop-cat-photo-app", "basic-css"],
                        },
                        {
                            "dashedName": "semantic-html",
                            "comingSoon": True,
                            "blocks": ["lecture-semantic-html"],
                        },
                    ],
                },
                {
                    "dashedName": "css",
                    "comingSoon": True,
                    "modules": [{"dashedName": "css-basics", "blocks": ["basic-css"]}],
                },
            ]
        },
    }


def sample_blocks() -> Dict[str, Any]:
    return {
        "basic-html-and-html5": make_block("basic-html-and-html5", challenges=2, prefix="html"),
        "basic-css": make_block(
            "basic-css",
            prefix="css",
            blockLayout="challenge-grid",
            blockLabel="learn",
            required=[
                {"link": "https://cdn.example.com/bootstrap.css"},
                {"src": "https://cdn.example.com/jquery.js"},
            ],
            template="html",
        ),
        "workshop-cat-photo-app": make_block(
            "workshop-cat-photo-app",
            challenges=2,
            prefix="cat",
            blockLayout="challenge-grid",
            blockLabel="workshop",
            usesMultifileEditor=True,
            hasEditableBoundaries=True,
            disableLoopProtectTests=False,
        ),
        "lecture-semantic-html": make_block(
            "lecture-semantic-html",
            prefix="sem",
            blockLayout="dialogue-grid",
            blockLabel="lecture",
            isUpcomingChange=True,
        ),
    }


@pytest.fixture
def build_tree(tmp_path: Path) -> Callable[..., Path]:
    """Write a curriculum tree, with the sample data unless overridden."""

    def _build(
        manifest: Optional[Dict[str, Any]] = None,
        superblocks: Optional[Dict[str, Any]] = None,
        blocks: Optional[Dict[str, Any]] = None,
    ) -> Path:
        return write_tree(
            tmp_path / "structure",
            manifest if manifest is not None else sample_manifest(),
            superblocks if superblocks is not None else sample_superblocks(),
            blocks if blocks is not None else sample_blocks(),
        )

    return _build


@pytest.fixture
def data_dir(build_tree: Callable[..., Path]) -> Path:
    return build_tree()
