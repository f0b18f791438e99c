"""
Topple - Snapshot History

Bounded undo/redo over immutable snapshots. Because snapshots are never
edited in place, keeping references to earlier ones is enough.
"""

from topple.engine.game import Game


class SnapshotHistory:
    """
    Linear history with a cursor.

    Pushing after an undo discards everything after the cursor; only the
    most recent `limit` snapshots are kept.
    """

    def __init__(self, limit: int = 50) -> None:
        if limit < 1:
            raise ValueError(f"History limit must be at least 1, got {limit}")
        self.limit = limit
        self._snapshots: list[Game] = []
        self._index = -1

    def __len__(self) -> int:
        return len(self._snapshots)

    @property
    def current(self) -> Game | None:
        return self._snapshots[self._index] if self._snapshots else None

    @property
    def can_undo(self) -> bool:
        return self._index > 0

    @property
    def can_redo(self) -> bool:
        return self._index < len(self._snapshots) - 1

    def push(self, game: Game) -> None:
        """Record a new snapshot unless it equals the current one."""
        if self.current == game:
            return
        self._snapshots = self._snapshots[: self._index + 1]
        self._snapshots.append(game)
        if len(self._snapshots) > self.limit:
            del self._snapshots[: len(self._snapshots) - self.limit]
        self._index = len(self._snapshots) - 1

    def undo(self) -> Game | None:
        """Step back one snapshot. Returns None when there is nothing to undo."""
        if not self.can_undo:
            return None
        self._index -= 1
        return self._snapshots[self._index]

    def redo(self) -> Game | None:
        """Step forward one snapshot. Returns None when there is nothing to redo."""
        if not self.can_redo:
            return None
        self._index += 1
        return self._snapshots[self._index]

    def clear(self) -> None:
        self._snapshots = []
        self._index = -1
