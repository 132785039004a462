"""Unit tests for asset models."""

import pytest
from assetsweep.models.asset import AssetId, AssetRecord, is_under_path, normalize_path, total_size


class TestNormalizePath:
    """Tests for normalize_path()."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("/Game/Props", "/Game/Props"),
            ("Game/Props/", "/Game/Props"),
            (" /Game/Props// ", "/Game/Props"),
            ("/", "/"),
            ("", "/"),
        ],
    )
    def test_normalize(self, raw: str, expected: str) -> None:
        """Slashes are normalized at both ends."""
        assert normalize_path(raw) == expected


class TestIsUnderPath:
    """Tests for is_under_path()."""

    def test_respects_folder_boundaries(self) -> None:
        """Sibling folders sharing a prefix do not match."""
        assert is_under_path("/Game/Props/Chair", "/Game/Props")
        assert is_under_path("/Game/Props/Sub/Lamp", "/Game/Props/")
        assert not is_under_path("/Game/PropsOld/Chair", "/Game/Props")
        assert not is_under_path("/Game/Props", "/Game/Props")

    def test_root_contains_everything(self) -> None:
        """The content root matches every asset."""
        assert is_under_path("/Game/A", "/")


class TestAssetRecord:
    """Tests for AssetRecord."""

    def test_path_and_name(self) -> None:
        """The id splits into folder and name."""
        record = AssetRecord(asset_id=AssetId("/Game/Props/Chair"))

        assert record.path == "/Game/Props"
        assert record.name == "Chair"
        assert record.is_under("/Game")

    def test_empty_id_rejected(self) -> None:
        """Records need an id."""
        with pytest.raises(ValueError, match="empty"):
            AssetRecord(asset_id=AssetId(""))

    def test_negative_size_rejected(self) -> None:
        """Sizes cannot be negative."""
        with pytest.raises(ValueError, match="negative"):
            AssetRecord(asset_id=AssetId("/Game/A"), size_bytes=-1)

    def test_total_size(self) -> None:
        """total_size sums record sizes."""
        records = [
            AssetRecord(asset_id=AssetId("/Game/A"), size_bytes=10),
            AssetRecord(asset_id=AssetId("/Game/B"), size_bytes=32),
        ]

        assert total_size(records) == 42
