"""
Topple - Snapshot Store

Single-slot local persistence: one JSON file for the current game and
one for the last setup configuration. A missing, unreadable or corrupt
file is treated as "no saved game".
"""

import logging
import os
from pathlib import Path

from pydantic import ValidationError

from topple.engine.game import Game
from topple.engine.validators import GameConfig
from topple.storage.models import GameConfigRecord, GameRecord

logger = logging.getLogger(__name__)


class SnapshotStore:
    """Saves and loads the current game snapshot on the local filesystem."""

    def __init__(self, path: Path | str, config_path: Path | str | None = None) -> None:
        self.path = Path(path)
        self.config_path = Path(config_path) if config_path else self.path.with_name("game-config.json")

    # -- Game snapshot -------------------------------------------------------

    def save(self, game: Game) -> None:
        """Write the snapshot, replacing any previous one."""
        payload = GameRecord.from_game(game).model_dump_json()
        try:
            self._write(self.path, payload)
        except OSError:
            logger.exception("Failed to save game state to %s", self.path)

    def load(self) -> Game | None:
        """Read the saved snapshot, or None if there is none or it is unusable."""
        payload = self._read(self.path)
        if payload is None:
            return None
        try:
            return GameRecord.model_validate_json(payload).to_game()
        except (ValidationError, ValueError):
            logger.exception("Discarding corrupt game state in %s", self.path)
            return None

    def clear(self) -> None:
        self._remove(self.path)

    def has_saved_game(self) -> bool:
        return self.path.is_file()

    # -- Setup configuration -------------------------------------------------

    def save_config(self, config: GameConfig) -> None:
        """Remember the setup form for the next game."""
        payload = GameConfigRecord.from_config(config).model_dump_json()
        try:
            self._write(self.config_path, payload)
        except OSError:
            logger.exception("Failed to save game config to %s", self.config_path)

    def load_config(self) -> GameConfig | None:
        payload = self._read(self.config_path)
        if payload is None:
            return None
        try:
            return GameConfigRecord.model_validate_json(payload).to_config()
        except ValidationError:
            logger.exception("Discarding corrupt game config in %s", self.config_path)
            return None

    def clear_config(self) -> None:
        self._remove(self.config_path)

    # -- File helpers --------------------------------------------------------

    @staticmethod
    def _write(path: Path, payload: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_name(path.name + ".tmp")
        tmp.write_text(payload, encoding="utf-8")
        os.replace(tmp, path)

    @staticmethod
    def _read(path: Path) -> str | None:
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError):
            logger.exception("Failed to read %s", path)
            return None

    @staticmethod
    def _remove(path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError:
            logger.exception("Failed to remove %s", path)
