"""Unit tests for scan command.

Tests for the CLI scan command implementation.
"""

import json
from pathlib import Path

from assetsweep.cli.main import app
from typer.testing import CliRunner

runner = CliRunner()


class TestScanCommand:
    """Tests for assetsweep scan command."""

    def test_scan_help(self) -> None:
        """Scan command shows help."""
        result = runner.invoke(app, ["scan", "--help"])

        assert result.exit_code == 0
        assert "--format" in result.stdout
        assert "--export" in result.stdout

    def test_scan_table(self, catalog_file: Path) -> None:
        """Table output lists unused assets and a summary."""
        result = runner.invoke(app, ["-q", "scan", str(catalog_file)])

        assert result.exit_code == 0
        assert "Unused Assets" in result.stdout
        assert "/Game/Old/Tex" in result.stdout
        assert "/Game/Props/Chair" not in result.stdout
        assert "4 unused asset(s)" in result.stdout

    def test_scan_json(self, catalog_file: Path) -> None:
        """JSON output is machine readable."""
        result = runner.invoke(app, ["-q", "scan", "--format", "json", str(catalog_file)])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [asset["id"] for asset in data["unused"]] == [
            "/Game/Old/A",
            "/Game/Old/B",
            "/Game/Old/C",
            "/Game/Old/Tex",
        ]
        assert data["summary"]["circular"] == 2

    def test_scan_options_after_catalog(self, catalog_file: Path) -> None:
        """Options may follow the catalog argument."""
        result = runner.invoke(app, ["-q", "scan", str(catalog_file), "-f", "json"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["summary"]["unused"] == 4

    def test_scan_export(self, catalog_file: Path, tmp_path: Path) -> None:
        """--export writes the report to a file."""
        export = tmp_path / "out" / "unused.json"

        result = runner.invoke(app, ["-q", "scan", "--export", str(export), str(catalog_file)])

        assert result.exit_code == 0
        data = json.loads(export.read_text())
        assert data["summary"]["unused"] == 4
        assert data["metadata"]["catalog"] == str(catalog_file)

    def test_scan_with_policy_exclusions(self, catalog_file: Path, tmp_path: Path) -> None:
        """Policy exclusions remove assets and their dependencies."""
        policy = tmp_path / "policy.toml"
        policy.write_text('[exclusions]\nassets = ["/Game/Old/C"]\n')

        result = runner.invoke(
            app, ["-q", "scan", "-f", "json", "--policy", str(policy), str(catalog_file)]
        )

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [asset["id"] for asset in data["unused"]] == ["/Game/Old/Tex"]
        assert data["excluded"] == ["/Game/Old/C"]
        assert data["linked"] == ["/Game/Old/A", "/Game/Old/B"]

    def test_scan_limit(self, catalog_file: Path) -> None:
        """--limit shortens the table."""
        result = runner.invoke(app, ["-q", "scan", "--limit", "1", str(catalog_file)])

        assert result.exit_code == 0
        assert "showing 1 of 4" in result.stdout

    def test_scan_nothing_unused(self, tmp_path: Path) -> None:
        """A clean project reports no unused assets."""
        catalog = tmp_path / "assets.json"
        catalog.write_text(json.dumps({"assets": [{"id": "/Game/Map", "class": "World"}]}))

        result = runner.invoke(app, ["-q", "scan", str(catalog)])

        assert result.exit_code == 0
        assert "No unused assets found." in result.stdout

    def test_scan_missing_catalog(self, tmp_path: Path) -> None:
        """A missing catalog exits with an error."""
        result = runner.invoke(app, ["scan", str(tmp_path / "missing.json")])

        assert result.exit_code == 1

    def test_scan_invalid_policy(self, catalog_file: Path, tmp_path: Path) -> None:
        """An invalid policy exits with an error."""
        policy = tmp_path / "policy.toml"
        policy.write_text("chunk_limit = 0\n")

        result = runner.invoke(app, ["scan", "--policy", str(policy), str(catalog_file)])

        assert result.exit_code == 1

    def test_scan_content_root(self, catalog_file: Path, content_root: Path) -> None:
        """--content-root adds the audit of the content directory."""
        (content_root / "notes.txt").write_text("x")
        (content_root / "Ghost.uasset").write_bytes(b"\0")
        (content_root / "Empty").mkdir()

        result = runner.invoke(
            app,
            ["-q", "scan", str(catalog_file), "-r", str(content_root), "-f", "json"],
        )

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["summary"]["empty_folders"] == 1
        assert data["invalid_files"] == {
            "non_asset": [str(content_root / "notes.txt")],
            "corrupted": [str(content_root / "Ghost.uasset")],
        }

    def test_scan_without_content_root_has_no_audit(self, catalog_file: Path) -> None:
        """Without --content-root the audit counts stay at zero."""
        result = runner.invoke(app, ["-q", "scan", str(catalog_file), "-f", "json"])

        data = json.loads(result.stdout)
        assert data["summary"]["non_asset_files"] == 0
        assert data["invalid_files"] == {"non_asset": [], "corrupted": []}

    def test_scan_missing_content_root(self, catalog_file: Path, tmp_path: Path) -> None:
        """A content root that does not exist is a usage error."""
        result = runner.invoke(app, ["scan", str(catalog_file), "-r", str(tmp_path / "nope")])

        assert result.exit_code == 2
