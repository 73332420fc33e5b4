"""Storage module for Casework.

This module provides repository interfaces and JSON file implementations
for content packs and campaign saves.

Usage:
    from casework.storage import get_pack_repository, get_save_repository

    pack = get_pack_repository().get_pack("core")
    save = get_save_repository().load("default")

Configuration via environment variables:
    CASEWORK_PACKS_PATH: Path to packs directory (default: "packs")
    CASEWORK_SAVES_PATH: Path to saves directory (default: "saves")
"""

from .config import (
    get_pack_repository,
    get_packs_path,
    get_save_repository,
    get_saves_path,
)
from .file_repo import FilePackRepository, FileSaveRepository, load_pack_file
from .repository import PackRepository, SaveRepository
from .schemas import ContentPack, Question, QuestionChoice, SaveGame

__all__ = [
    # Abstract interfaces
    "PackRepository",
    "SaveRepository",
    # File implementations
    "FilePackRepository",
    "FileSaveRepository",
    "load_pack_file",
    # Schemas
    "ContentPack",
    "Question",
    "QuestionChoice",
    "SaveGame",
    # Configuration
    "get_packs_path",
    "get_saves_path",
    # Factory functions
    "get_pack_repository",
    "get_save_repository",
]
