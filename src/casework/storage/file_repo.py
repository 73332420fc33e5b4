"""File-based repository implementations using JSON files.

Packs are stored in the packs/ directory, saves in saves/.
"""

import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from .repository import PackRepository, SaveRepository
from .schemas import ContentPack, SaveGame

logger = logging.getLogger(__name__)


def slugify(text: str) -> str:
    """Convert text to a filename-safe slug.

    Examples:
        >>> slugify("Core NJ Pack")
        'core-nj-pack'
        >>> slugify("core.v2")
        'corev2'
    """
    text = text.lower()
    text = re.sub(r"[\s_]+", "-", text)
    text = re.sub(r"[^a-z0-9-]", "", text)
    text = re.sub(r"-+", "-", text)
    return text.strip("-")


class FilePackRepository(PackRepository):
    """JSON file-based content pack repository.

    Stores packs as individual JSON files named after the slugified pack ID.
    """

    def __init__(self, packs_path: str | Path = "packs"):
        """Initialize repository.

        Args:
            packs_path: Path to packs directory
        """
        self.packs_path = Path(packs_path)
        self.packs_path.mkdir(parents=True, exist_ok=True)

    def _get_pack_path(self, pack_id: str) -> Path:
        """Get path to pack file."""
        return self.packs_path / f"{slugify(pack_id)}.json"

    def list_packs(self) -> list[dict]:
        """Return metadata for all available packs."""
        packs = []
        for path in self.packs_path.glob("*.json"):
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
                packs.append({
                    "id": data.get("id", path.stem),
                    "title": data.get("title", path.stem),
                    "version": data.get("version", ""),
                    "topics": data.get("topics", []),
                    "event_count": len(data.get("events", [])),
                })
        return sorted(packs, key=lambda x: x["title"])

    def get_pack(self, pack_id: str) -> Optional[ContentPack]:
        """Load and validate a pack by ID."""
        path = self._get_pack_path(pack_id)
        if not path.exists():
            return None
        return load_pack_file(path)

    def save_pack(self, pack: ContentPack) -> str:
        """Save pack, return ID."""
        path = self._get_pack_path(pack.id)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(pack.model_dump(mode="json"), f, indent=2)
        logger.info(f"Saved pack {pack.id} ({len(pack.events)} events) to {path}")
        return pack.id

    def delete_pack(self, pack_id: str) -> bool:
        """Delete pack."""
        path = self._get_pack_path(pack_id)
        if path.exists():
            path.unlink()
            return True
        return False


def load_pack_file(path: str | Path) -> ContentPack:
    """Load and validate a pack from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist
        pydantic.ValidationError: If the pack is malformed
    """
    with open(path, encoding="utf-8") as f:
        return ContentPack.model_validate(json.load(f))


class FileSaveRepository(SaveRepository):
    """JSON file-based save repository.

    Unreadable saves load as an initial save and log a warning.
    """

    def __init__(self, saves_path: str | Path = "saves"):
        """Initialize repository.

        Args:
            saves_path: Path to saves directory
        """
        self.saves_path = Path(saves_path)
        self.saves_path.mkdir(parents=True, exist_ok=True)

    def _get_save_path(self, save_id: str) -> Path:
        """Get path to save file."""
        return self.saves_path / f"{slugify(save_id)}.json"

    def save(self, save_id: str, save_game: SaveGame) -> SaveGame:
        """Persist a save, stamping last_played."""
        stamped = save_game.model_copy(
            update={"last_played": datetime.now(timezone.utc).isoformat()}, deep=True
        )
        with open(self._get_save_path(save_id), "w", encoding="utf-8") as f:
            json.dump(stamped.model_dump(mode="json"), f, indent=2)
        return stamped

    def load(self, save_id: str) -> SaveGame:
        """Load a save, falling back to an initial save."""
        path = self._get_save_path(save_id)
        if not path.exists():
            return SaveGame()
        try:
            with open(path, encoding="utf-8") as f:
                return SaveGame.model_validate(json.load(f))
        except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
            logger.warning(f"Failed to parse save {save_id}, resetting: {e}")
            return SaveGame()

    def list_saves(self) -> list[dict]:
        """List saves, most recent first."""
        saves = []
        for path in self.saves_path.glob("*.json"):
            with open(path, encoding="utf-8") as f:
                try:
                    data = json.load(f)
                except (json.JSONDecodeError, UnicodeDecodeError):
                    logger.warning(f"Skipping unreadable save {path.name}")
                    continue
                saves.append({
                    "id": path.stem,
                    "day": data.get("day", 1),
                    "last_played": data.get("last_played", ""),
                })
        return sorted(saves, key=lambda x: x["last_played"], reverse=True)

    def delete(self, save_id: str) -> bool:
        """Delete save."""
        path = self._get_save_path(save_id)
        if path.exists():
            path.unlink()
            return True
        return False
