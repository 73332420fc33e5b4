"""Abstract repository interfaces for Casework storage.

Content packs feed the Director; saves hold the caller's campaign progress.
The Director itself never touches storage.
"""

from abc import ABC, abstractmethod
from typing import Optional

from .schemas import ContentPack, SaveGame


class PackRepository(ABC):
    """Abstract base class for content pack storage."""

    @abstractmethod
    def list_packs(self) -> list[dict]:
        """Return metadata for all available packs.

        Returns:
            List of dicts containing: {id, title, version, topics, event_count}
        """
        pass

    @abstractmethod
    def get_pack(self, pack_id: str) -> Optional[ContentPack]:
        """Load and validate a pack by ID.

        Args:
            pack_id: Unique identifier for the pack

        Returns:
            Validated pack, or None if not found

        Raises:
            pydantic.ValidationError: If the stored pack is malformed
        """
        pass

    @abstractmethod
    def save_pack(self, pack: ContentPack) -> str:
        """Save pack, return ID."""
        pass

    @abstractmethod
    def delete_pack(self, pack_id: str) -> bool:
        """Delete pack.

        Returns:
            True if deleted, False if not found
        """
        pass


class SaveRepository(ABC):
    """Abstract base class for save storage."""

    @abstractmethod
    def save(self, save_id: str, save_game: SaveGame) -> SaveGame:
        """Persist a save, stamping last_played.

        Returns:
            The save as written
        """
        pass

    @abstractmethod
    def load(self, save_id: str) -> SaveGame:
        """Load a save.

        Missing or unreadable saves come back as a fresh initial save.
        """
        pass

    @abstractmethod
    def list_saves(self) -> list[dict]:
        """List saves with {id, day, last_played}, most recent first."""
        pass

    @abstractmethod
    def delete(self, save_id: str) -> bool:
        """Delete save.

        Returns:
            True if deleted, False if not found
        """
        pass
