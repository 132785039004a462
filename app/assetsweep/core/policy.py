"""Cleaner policy configuration.

The policy decides which assets count as used (primary classes, developer
folders, source roots scanned for indirect references), which assets are
excluded from cleanup, and how the deletion loop behaves. It is stored as
TOML and validated with Pydantic.
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated, Any

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from assetsweep.catalog.source_scanner import DEFAULT_SOURCE_EXTENSIONS
from assetsweep.core.paths import get_policy_path
from assetsweep.errors import AssetSweepError
from assetsweep.graph.exclusion import ExclusionRules
from assetsweep.graph.sequencer import DEFAULT_CHUNK_LIMIT
from assetsweep.models.asset import normalize_path

logger = logging.getLogger(__name__)


class PolicyError(AssetSweepError):
    """Base exception for policy-related errors."""


class PolicyParseError(PolicyError):
    """Raised when the policy file cannot be parsed."""


class PolicyValidationError(PolicyError):
    """Raised when the policy content is invalid."""


class CleanerPolicy(BaseModel):
    """Configuration of the unused-asset cleaner.

    Attributes:
        exclusions: Assets, folders and classes excluded from cleanup.
        primary_classes: Asset classes that are always used, together with
            everything they depend on.
        developer_paths: Per-developer and collection folders.
        scan_developer_folders: If False, assets under developer_paths are
            never cleanup candidates.
        source_roots: Directories scanned for assets referenced by path.
        source_extensions: File suffixes read by the source scan.
        chunk_limit: Batch size when no safe batch can be derived.
        retry_on_no_progress: Repeat a round once before failing when it
            deleted nothing.
    """

    model_config = ConfigDict(extra="forbid")

    exclusions: Annotated[
        ExclusionRules,
        Field(default_factory=ExclusionRules, description="Exclusion rules"),
    ]
    primary_classes: Annotated[
        list[str],
        Field(
            default_factory=lambda: ["World", "PrimaryAssetLabel"],
            description="Asset classes that are always in use",
        ),
    ]
    developer_paths: Annotated[
        list[str],
        Field(
            default_factory=lambda: ["/Game/Developers", "/Game/Collections"],
            description="Developer and collection folders",
        ),
    ]
    scan_developer_folders: Annotated[
        bool, Field(description="Treat developer folders as cleanup candidates")
    ] = False
    source_roots: Annotated[
        list[Path],
        Field(default_factory=list, description="Directories scanned for indirect references"),
    ]
    source_extensions: Annotated[
        list[str],
        Field(
            default_factory=lambda: list(DEFAULT_SOURCE_EXTENSIONS),
            description="File suffixes read by the source scan",
        ),
    ]
    chunk_limit: Annotated[
        int, Field(gt=0, description="Fallback deletion batch size")
    ] = DEFAULT_CHUNK_LIMIT
    retry_on_no_progress: Annotated[
        bool, Field(description="Retry a round once when it deletes nothing")
    ] = False

    @field_validator("developer_paths")
    @classmethod
    def normalize_developer_paths(cls, v: list[str]) -> list[str]:
        """Normalize folder paths."""
        return [normalize_path(p) for p in v if p.strip()]

    @field_validator("source_extensions")
    @classmethod
    def validate_extensions(cls, v: list[str]) -> list[str]:
        """Validate that every extension starts with a dot."""
        for ext in v:
            if not ext.startswith("."):
                msg = f"Source extension must start with '.': {ext!r}"
                raise ValueError(msg)
        return [ext.lower() for ext in v]


def load_policy(path: Path | None = None) -> CleanerPolicy:
    """Load and validate the cleaner policy.

    A missing policy file is not an error: the defaults apply.

    Args:
        path: Path to the policy file. If None, uses the default path.

    Returns:
        Validated CleanerPolicy.

    Raises:
        PolicyParseError: If the TOML syntax is invalid.
        PolicyValidationError: If the content doesn't match the schema.
        PolicyError: If the file exists but cannot be read.
    """
    policy_path = path or get_policy_path()

    if not policy_path.exists():
        logger.debug("No policy at %s, using defaults", policy_path)
        return CleanerPolicy()

    try:
        with open(policy_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise PolicyParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise PolicyError(f"Failed to read policy: {e}") from e

    try:
        return CleanerPolicy.model_validate(data)
    except ValidationError as e:
        raise PolicyValidationError(f"Invalid policy content: {e}") from e


def save_policy(policy: CleanerPolicy, path: Path | None = None) -> Path:
    """Save the cleaner policy to a TOML file.

    The file is written atomically through a temporary file in the same
    directory and os.replace().

    Args:
        policy: Policy to save.
        path: Destination. If None, uses the default path.

    Returns:
        Path where the policy was saved.

    Raises:
        PolicyError: If the file cannot be written.
    """
    policy_path = path or get_policy_path()

    tmp_path: Path | None = None
    try:
        policy_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=policy_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(_policy_to_dict(policy), f)
        os.replace(str(tmp_path), str(policy_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise PolicyError(f"Failed to write policy: {e}") from e

    return policy_path


def _policy_to_dict(policy: CleanerPolicy) -> dict[str, Any]:
    """Convert a policy to a TOML-serializable dictionary."""
    return policy.model_dump(mode="json")
