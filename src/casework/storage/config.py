"""Storage configuration for Casework.

Paths are read from the environment each time a factory is called, so tests
and tools can redirect storage with environment variables.
"""

import os

from .file_repo import FilePackRepository, FileSaveRepository
from .repository import PackRepository, SaveRepository

DEFAULT_PACKS_PATH = "packs"
DEFAULT_SAVES_PATH = "saves"


def get_packs_path() -> str:
    """Get configured packs path from environment."""
    return os.environ.get("CASEWORK_PACKS_PATH", DEFAULT_PACKS_PATH)


def get_saves_path() -> str:
    """Get configured saves path from environment."""
    return os.environ.get("CASEWORK_SAVES_PATH", DEFAULT_SAVES_PATH)


def get_pack_repository() -> PackRepository:
    """Factory function to create the pack repository."""
    return FilePackRepository(get_packs_path())


def get_save_repository() -> SaveRepository:
    """Factory function to create the save repository."""
    return FileSaveRepository(get_saves_path())
