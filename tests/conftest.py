"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from assetsweep.catalog.json_catalog import link_referencers
from assetsweep.models.asset import AssetId, AssetRecord

RecordFactory = Callable[..., dict[AssetId, AssetRecord]]


@pytest.fixture(autouse=True)
def isolated_xdg(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point config and state directories into the test's temp directory."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "state"))
    return tmp_path


@pytest.fixture
def make_records() -> RecordFactory:
    """Factory building linked records from a dependency mapping.

    Example:
        make_records({"/Game/A": ["/Game/B"], "/Game/B": []})
    """

    def _make(
        graph: dict[str, list[str]],
        *,
        classes: dict[str, str] | None = None,
        sizes: dict[str, int] | None = None,
    ) -> dict[AssetId, AssetRecord]:
        classes = classes or {}
        sizes = sizes or {}
        records = [
            AssetRecord(
                asset_id=AssetId(asset_id),
                size_bytes=sizes.get(asset_id, 100),
                asset_class=classes.get(asset_id, "StaticMesh"),
                dependencies=tuple(AssetId(d) for d in dependencies),
            )
            for asset_id, dependencies in graph.items()
        ]
        return link_referencers(records)

    return _make


@pytest.fixture
def sample_catalog_data() -> dict[str, Any]:
    """Small project export: one map, a used prop chain and unused content.

    Unused: a mutual cycle (/Game/Old/A <-> /Game/Old/B), an asset that
    depends on the cycle (/Game/Old/C) and an isolated texture.
    """
    return {
        "assets": [
            {
                "id": "/Game/Maps/Main",
                "size": 4096,
                "class": "World",
                "dependencies": ["/Game/Props/Chair"],
            },
            {
                "id": "/Game/Props/Chair",
                "size": 2048,
                "class": "StaticMesh",
                "dependencies": ["/Game/Materials/Wood"],
            },
            {"id": "/Game/Materials/Wood", "size": 1024, "class": "Material"},
            {
                "id": "/Game/Old/A",
                "size": 100,
                "class": "Blueprint",
                "dependencies": ["/Game/Old/B"],
            },
            {
                "id": "/Game/Old/B",
                "size": 200,
                "class": "Blueprint",
                "dependencies": ["/Game/Old/A"],
            },
            {
                "id": "/Game/Old/C",
                "size": 300,
                "class": "StaticMesh",
                "dependencies": ["/Game/Old/A"],
            },
            {"id": "/Game/Old/Tex", "size": 400, "class": "Texture2D"},
            {"id": "/Game/Developers/Me/Test", "size": 50, "class": "StaticMesh"},
        ]
    }


@pytest.fixture
def catalog_file(tmp_path: Path, sample_catalog_data: dict[str, Any]) -> Path:
    """Write the sample export to a JSON file."""
    path = tmp_path / "assets.json"
    path.write_text(json.dumps(sample_catalog_data))
    return path


@pytest.fixture
def content_root(tmp_path: Path, sample_catalog_data: dict[str, Any]) -> Path:
    """Create one .uasset file per sample asset under a content directory."""
    root = tmp_path / "Content"
    for entry in sample_catalog_data["assets"]:
        relative = entry["id"].removeprefix("/Game/")
        path = root / f"{relative}.uasset"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"\0" * 8)
    return root
