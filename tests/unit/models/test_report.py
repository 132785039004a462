"""Unit tests for scan report models."""

from assetsweep.models.asset import AssetId, AssetRecord
from assetsweep.models.report import CleanerStats, ScanReport


class TestCleanerStats:
    """Tests for CleanerStats."""

    def test_to_dict(self) -> None:
        """Stats serialize with stable keys."""
        stats = CleanerStats(total_count=8, unused_count=4, unused_size=1000, circular_count=2)

        data = stats.to_dict()

        assert data["total"] == 8
        assert data["unused"] == 4
        assert data["unused_size_bytes"] == 1000
        assert data["circular"] == 2
        assert data["excluded"] == 0

    def test_content_root_counts(self) -> None:
        """Audit counts are serialized next to the graph numbers."""
        data = CleanerStats(empty_folder_count=3, non_asset_count=2, corrupted_count=1).to_dict()

        assert data["empty_folders"] == 3
        assert data["non_asset_files"] == 2
        assert data["corrupted_files"] == 1


class TestScanReport:
    """Tests for ScanReport."""

    def test_create_and_serialize(self) -> None:
        """Reports carry metadata, summary and sorted id lists."""
        record = AssetRecord(
            asset_id=AssetId("/Game/Old/C"),
            size_bytes=300,
            asset_class="StaticMesh",
            dependencies=(AssetId("/Game/Old/A"),),
        )

        report = ScanReport.create(
            catalog="assets.json",
            stats=CleanerStats(unused_count=1),
            unused=[record],
            excluded=["/Game/Z", "/Game/B"],
            linked=[],
        )
        data = report.to_dict()

        assert data["metadata"]["catalog"] == "assets.json"
        assert data["metadata"]["assetsweep_version"]
        assert data["summary"]["unused"] == 1
        assert data["unused"] == [
            {
                "id": "/Game/Old/C",
                "class": "StaticMesh",
                "size_bytes": 300,
                "dependencies": ["/Game/Old/A"],
                "referencers": [],
            }
        ]
        assert data["excluded"] == ["/Game/B", "/Game/Z"]
        assert data["linked"] == []
        assert data["invalid_files"] == {"non_asset": [], "corrupted": []}

    def test_invalid_files_listed(self) -> None:
        """Invalid file lists keep their order."""
        report = ScanReport.create(
            catalog="assets.json",
            stats=CleanerStats(non_asset_count=2, corrupted_count=1),
            unused=[],
            excluded=[],
            linked=[],
            non_asset_files=["Content/b.txt", "Content/a.psd"],
            corrupted_files=["Content/Old.uasset"],
        )

        assert report.to_dict()["invalid_files"] == {
            "non_asset": ["Content/b.txt", "Content/a.psd"],
            "corrupted": ["Content/Old.uasset"],
        }
