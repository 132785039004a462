"""Deletion executors for assetsweep.

This module exports the executor interface and the filesystem-backed
implementations used to remove assets and empty folders.
"""

from assetsweep.operators.base import DeletionExecutor, DeletionResult
from assetsweep.operators.filesystem import FilesystemExecutor
from assetsweep.operators.folders import (
    FolderCleanupResult,
    content_folder,
    delete_empty_folders,
    find_empty_folders,
)

__all__ = [
    "DeletionExecutor",
    "DeletionResult",
    "FilesystemExecutor",
    "FolderCleanupResult",
    "content_folder",
    "delete_empty_folders",
    "find_empty_folders",
]
