"""Unit tests for cleaner policy loading and saving."""

from pathlib import Path
from unittest.mock import patch

import pytest
from assetsweep.core.policy import (
    CleanerPolicy,
    PolicyError,
    PolicyParseError,
    PolicyValidationError,
    load_policy,
    save_policy,
)
from assetsweep.graph.exclusion import ExclusionRules


class TestCleanerPolicy:
    """Tests for the CleanerPolicy model."""

    def test_defaults(self) -> None:
        """Defaults keep maps and developer folders."""
        policy = CleanerPolicy()

        assert policy.primary_classes == ["World", "PrimaryAssetLabel"]
        assert policy.developer_paths == ["/Game/Developers", "/Game/Collections"]
        assert policy.scan_developer_folders is False
        assert policy.exclusions.is_empty
        assert policy.chunk_limit == 100
        assert policy.retry_on_no_progress is False

    def test_developer_paths_normalized(self) -> None:
        """Developer folders are normalized like exclusion paths."""
        policy = CleanerPolicy(developer_paths=["Game/Devs/", ""])

        assert policy.developer_paths == ["/Game/Devs"]

    def test_extensions_lowercased(self) -> None:
        """Source extensions are compared case-insensitively."""
        policy = CleanerPolicy(source_extensions=[".CPP", ".ini"])

        assert policy.source_extensions == [".cpp", ".ini"]

    def test_extension_needs_dot(self) -> None:
        """Extensions without a leading dot are rejected."""
        with pytest.raises(ValueError, match="must start with"):
            CleanerPolicy(source_extensions=["cpp"])

    def test_chunk_limit_positive(self) -> None:
        """The fallback chunk must hold at least one asset."""
        with pytest.raises(ValueError):
            CleanerPolicy(chunk_limit=0)


class TestLoadPolicy:
    """Tests for load_policy()."""

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        """No policy file means default policy."""
        assert load_policy(tmp_path / "policy.toml") == CleanerPolicy()

    def test_loads_toml(self, tmp_path: Path) -> None:
        """Policy values are read from TOML."""
        path = tmp_path / "policy.toml"
        path.write_text(
            "chunk_limit = 5\n"
            'source_roots = ["Source"]\n'
            "\n"
            "[exclusions]\n"
            'paths = ["/Game/Keep/"]\n'
            'classes = ["Texture2D"]\n'
        )

        policy = load_policy(path)

        assert policy.chunk_limit == 5
        assert policy.source_roots == [Path("Source")]
        assert policy.exclusions.paths == ["/Game/Keep"]
        assert policy.exclusions.classes == ["Texture2D"]

    def test_invalid_toml(self, tmp_path: Path) -> None:
        """Syntax errors raise PolicyParseError."""
        path = tmp_path / "policy.toml"
        path.write_text("chunk_limit = = 5\n")

        with pytest.raises(PolicyParseError):
            load_policy(path)

    def test_unknown_key(self, tmp_path: Path) -> None:
        """Unknown keys raise PolicyValidationError."""
        path = tmp_path / "policy.toml"
        path.write_text("chunk_limt = 5\n")

        with pytest.raises(PolicyValidationError):
            load_policy(path)

    def test_default_location(self, isolated_xdg: Path) -> None:
        """Without a path the XDG config location is used."""
        path = isolated_xdg / "config" / "assetsweep" / "policy.toml"
        path.parent.mkdir(parents=True)
        path.write_text("scan_developer_folders = true\n")

        assert load_policy().scan_developer_folders is True


class TestSavePolicy:
    """Tests for save_policy()."""

    def test_round_trip(self, tmp_path: Path) -> None:
        """A saved policy loads back equal."""
        policy = CleanerPolicy(
            exclusions=ExclusionRules(assets=["/Game/A"], paths=["/Game/Keep"]),
            source_roots=[tmp_path / "Source"],
            retry_on_no_progress=True,
        )
        path = tmp_path / "sub" / "policy.toml"

        saved = save_policy(policy, path)

        assert saved == path
        assert load_policy(path) == policy

    def test_no_temp_files_left(self, tmp_path: Path) -> None:
        """The atomic write leaves only the policy file behind."""
        save_policy(CleanerPolicy(), tmp_path / "policy.toml")

        assert [p.name for p in tmp_path.iterdir()] == ["policy.toml"]

    def test_write_failure(self, tmp_path: Path) -> None:
        """Write errors raise PolicyError and clean up the temp file."""
        with (
            patch("assetsweep.core.policy.os.replace", side_effect=OSError("disk full")),
            pytest.raises(PolicyError, match="disk full"),
        ):
            save_policy(CleanerPolicy(), tmp_path / "policy.toml")

        assert list(tmp_path.iterdir()) == []
