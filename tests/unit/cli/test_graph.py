"""Unit tests for graph command."""

import json
from pathlib import Path

from assetsweep.cli.main import app
from typer.testing import CliRunner

runner = CliRunner()


class TestGraphCommand:
    """Tests for assetsweep graph command."""

    def test_graph_json_all(self, catalog_file: Path) -> None:
        """All nodes of the pool are listed with their kinds."""
        result = runner.invoke(app, ["-q", "graph", "-f", "json", str(catalog_file)])

        assert result.exit_code == 0
        kinds = {node["id"]: node["kind"] for node in json.loads(result.stdout)}
        assert kinds == {
            "/Game/Old/A": "circular",
            "/Game/Old/B": "circular",
            "/Game/Old/C": "root",
            "/Game/Old/Tex": "root",
        }

    def test_graph_roots(self, catalog_file: Path) -> None:
        """--kind roots limits output to root nodes."""
        result = runner.invoke(
            app, ["-q", "graph", "--kind", "roots", "-f", "json", str(catalog_file)]
        )

        assert result.exit_code == 0
        assert [node["id"] for node in json.loads(result.stdout)] == [
            "/Game/Old/C",
            "/Game/Old/Tex",
        ]

    def test_graph_leaves(self, catalog_file: Path) -> None:
        """--kind leaves shows nodes without in-pool dependencies."""
        result = runner.invoke(
            app, ["-q", "graph", "--kind", "leaves", "-f", "json", str(catalog_file)]
        )

        assert [node["id"] for node in json.loads(result.stdout)] == ["/Game/Old/Tex"]

    def test_graph_table_lists_cycles(self, catalog_file: Path) -> None:
        """The table view lists dependency cycles."""
        result = runner.invoke(app, ["-q", "graph", "--kind", "circular", str(catalog_file)])

        assert result.exit_code == 0
        assert "Circular Nodes" in result.stdout
        assert "1 dependency cycle(s)" in result.stdout

    def test_graph_no_nodes(self, tmp_path: Path) -> None:
        """An empty selection prints a message."""
        catalog = tmp_path / "assets.json"
        catalog.write_text(json.dumps({"assets": [{"id": "/Game/Junk"}]}))

        result = runner.invoke(app, ["-q", "graph", "--kind", "circular", str(catalog)])

        assert result.exit_code == 0
        assert "No circular nodes." in result.stdout
