"""
Topple - Snapshot Records

Pydantic models for the serialized snapshot. They mirror the engine's
value types in a flat, JSON-friendly shape and default-fill fields that
older saves may lack (log, score events, per-color maps, round flags).
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator, model_validator

from topple.engine.base import (
    BOARD_SIZE,
    MAX_PLAYERS,
    MIN_PLAYERS,
    PIECES_PER_COLOR,
    GameLogEntry,
    GameStatus,
    LogEntryType,
    Piece,
    PlayerColor,
    Position,
    ScoreEvent,
    ScoreReason,
)
from topple.engine.board import Board, Cell
from topple.engine.game import Game
from topple.engine.players import DualColorMode, Player, SingleColorMode
from topple.engine.validators import GameConfig, PlayerConfig


class PositionRecord(BaseModel):
    row: int
    col: int

    def to_position(self) -> Position:
        return Position(self.row, self.col)


class PieceRecord(BaseModel):
    """Mirrors a Piece."""

    id: str
    player_id: str
    color: PlayerColor
    placed_at: datetime
    round_number: int

    model_config = {"from_attributes": True}

    def to_piece(self) -> Piece:
        return Piece(
            id=self.id,
            player_id=self.player_id,
            color=self.color,
            placed_at=self.placed_at,
            round_number=self.round_number,
        )


class CellRecord(BaseModel):
    """Mirrors a Cell."""

    row: int
    col: int
    level: int = Field(ge=1, le=5)
    stack: list[PieceRecord] = Field(default_factory=list)

    model_config = {"from_attributes": True}

    def to_cell(self) -> Cell:
        return Cell(
            row=self.row,
            col=self.col,
            level=self.level,
            stack=tuple(p.to_piece() for p in self.stack),
        )


class BoardRecord(BaseModel):
    """Mirrors a Board (cells only; the level layout is a constant)."""

    cells: list[list[CellRecord]]

    model_config = {"from_attributes": True}

    @field_validator("cells")
    @classmethod
    def check_shape(cls, cells: list[list[CellRecord]]) -> list[list[CellRecord]]:
        if len(cells) != BOARD_SIZE or any(len(row) != BOARD_SIZE for row in cells):
            raise ValueError(f"Board must have {BOARD_SIZE}x{BOARD_SIZE} cells")
        for row_index, row in enumerate(cells):
            for col_index, cell in enumerate(row):
                if (cell.row, cell.col) != (row_index, col_index):
                    raise ValueError(f"Cell ({cell.row}, {cell.col}) stored at ({row_index}, {col_index})")
        return cells

    @classmethod
    def from_board(cls, board: Board) -> "BoardRecord":
        return cls(cells=[
            [
                CellRecord(
                    row=cell.row,
                    col=cell.col,
                    level=cell.level,
                    stack=[PieceRecord.model_validate(p) for p in cell.stack],
                )
                for cell in row
            ]
            for row in board.cells
        ])

    def to_board(self) -> Board:
        return Board(cells=tuple(tuple(c.to_cell() for c in row) for row in self.cells))


class PlayerRecord(BaseModel):
    """
    Flat player record.

    Dual-color players carry color2 and the two per-color maps; for
    single-color players those three fields are absent.
    """

    id: str
    name: str
    color: PlayerColor
    color2: PlayerColor | None = None
    score: int = 0
    score_by_color: dict[PlayerColor, int] | None = None
    pieces_remaining: int = PIECES_PER_COLOR
    pieces_remaining_by_color: dict[PlayerColor, int] | None = None
    total_pieces: int = PIECES_PER_COLOR
    order: int = 0
    is_active: bool = False

    @classmethod
    def from_player(cls, player: Player) -> "PlayerRecord":
        return cls(
            id=player.id,
            name=player.name,
            color=player.color,
            color2=player.color2,
            score=player.score,
            score_by_color=player.score_by_color,
            pieces_remaining=player.pieces_remaining,
            pieces_remaining_by_color=player.pieces_remaining_by_color,
            total_pieces=player.total_pieces,
            order=player.order,
            is_active=player.is_active,
        )

    def to_player(self) -> Player:
        if self.color2 is None:
            mode: SingleColorMode | DualColorMode = SingleColorMode(
                color=self.color,
                score=self.score,
                pieces_remaining=self.pieces_remaining,
            )
        else:
            # Saves without the per-color maps book everything to the primary color.
            scores = self.score_by_color or {self.color: self.score}
            pieces = self.pieces_remaining_by_color or {}
            mode = DualColorMode(
                color_a=self.color,
                color_b=self.color2,
                score_a=scores.get(self.color, 0),
                score_b=scores.get(self.color2, 0),
                pieces_a=pieces.get(self.color, PIECES_PER_COLOR),
                pieces_b=pieces.get(self.color2, PIECES_PER_COLOR),
            )
        return Player(
            id=self.id,
            name=self.name,
            mode=mode,
            order=self.order,
            is_active=self.is_active,
        )


class ScoreEventRecord(BaseModel):
    """Mirrors a ScoreEvent."""

    id: str
    player_id: str
    points: int
    reason: ScoreReason
    round_number: int
    details: str = ""
    color: PlayerColor | None = None

    model_config = {"from_attributes": True}

    @classmethod
    def from_event(cls, event: ScoreEvent) -> "ScoreEventRecord":
        return cls.model_validate(event)

    def to_event(self) -> ScoreEvent:
        return ScoreEvent(**self.model_dump())


class LogEntryRecord(BaseModel):
    """Mirrors a GameLogEntry. Older saves have no sequence numbers."""

    id: str
    type: LogEntryType
    message: str
    timestamp: datetime
    round_number: int
    sequence: int | None = None
    player_id: str | None = None
    player_name: str | None = None
    points: int | None = None
    position: PositionRecord | None = None

    @classmethod
    def from_entry(cls, entry: GameLogEntry) -> "LogEntryRecord":
        position = None
        if entry.position is not None:
            position = PositionRecord(row=entry.position.row, col=entry.position.col)
        return cls(
            id=entry.id,
            type=entry.type,
            message=entry.message,
            timestamp=entry.timestamp,
            round_number=entry.round_number,
            sequence=entry.sequence,
            player_id=entry.player_id,
            player_name=entry.player_name,
            points=entry.points,
            position=position,
        )

    def to_entry(self, index: int) -> GameLogEntry:
        return GameLogEntry(
            id=self.id,
            type=self.type,
            message=self.message,
            timestamp=self.timestamp,
            round_number=self.round_number,
            sequence=self.sequence if self.sequence is not None else index,
            player_id=self.player_id,
            player_name=self.player_name,
            points=self.points,
            position=self.position.to_position() if self.position else None,
        )


class GameRecord(BaseModel):
    """Serialized game snapshot."""

    id: str
    status: GameStatus
    players: list[PlayerRecord] = Field(min_length=MIN_PLAYERS, max_length=MAX_PLAYERS)
    current_player_index: int = 0
    round_number: int = 1
    victory_points: int = Field(gt=0)
    board: BoardRecord
    dice_roll: int | None = Field(default=None, ge=1, le=6)
    topple_occurred: bool = False
    topple_player_id: str | None = None
    dice_rolled_in_round: bool = False
    log: list[LogEntryRecord] = Field(default_factory=list)
    score_events: list[ScoreEventRecord] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    @field_validator("log", "score_events", mode="before")
    @classmethod
    def default_empty_lists(cls, value: object) -> object:
        return [] if value is None else value

    @model_validator(mode="after")
    def check_current_player(self) -> "GameRecord":
        if not 0 <= self.current_player_index < len(self.players):
            raise ValueError(
                f"Current player index {self.current_player_index} is out of range "
                f"for {len(self.players)} players"
            )
        return self

    @classmethod
    def from_game(cls, game: Game) -> "GameRecord":
        return cls(
            id=game.id,
            status=game.status,
            players=[PlayerRecord.from_player(p) for p in game.players],
            current_player_index=game.current_player_index,
            round_number=game.round_number,
            victory_points=game.victory_points,
            board=BoardRecord.from_board(game.board),
            dice_roll=game.dice_roll,
            topple_occurred=game.topple_occurred,
            topple_player_id=game.topple_player_id,
            dice_rolled_in_round=game.dice_rolled_in_round,
            log=[LogEntryRecord.from_entry(e) for e in game.log],
            score_events=[ScoreEventRecord.from_event(e) for e in game.score_events],
            created_at=game.created_at,
            updated_at=game.updated_at,
        )

    def to_game(self) -> Game:
        return Game(
            id=self.id,
            status=self.status,
            players=tuple(p.to_player() for p in self.players),
            current_player_index=self.current_player_index,
            round_number=self.round_number,
            victory_points=self.victory_points,
            board=self.board.to_board(),
            created_at=self.created_at,
            updated_at=self.updated_at,
            dice_roll=self.dice_roll,
            topple_occurred=self.topple_occurred,
            topple_player_id=self.topple_player_id,
            dice_rolled_in_round=self.dice_rolled_in_round,
            log=tuple(e.to_entry(i) for i, e in enumerate(self.log)),
            score_events=tuple(e.to_event() for e in self.score_events),
        )


class PlayerConfigRecord(BaseModel):
    name: str
    color: PlayerColor
    color2: PlayerColor | None = None
    order: int = 0


class GameConfigRecord(BaseModel):
    """The last setup form, remembered between games."""

    player_count: int
    players: list[PlayerConfigRecord] = Field(default_factory=list)
    victory_points: int = 100

    @classmethod
    def from_config(cls, config: GameConfig) -> "GameConfigRecord":
        return cls(
            player_count=config.player_count,
            players=[
                PlayerConfigRecord(name=p.name, color=p.color, color2=p.color2, order=p.order)
                for p in config.players
            ],
            victory_points=config.victory_points,
        )

    def to_config(self) -> GameConfig:
        return GameConfig(
            player_count=self.player_count,
            players=tuple(
                PlayerConfig(name=p.name, color=p.color, color2=p.color2, order=p.order)
                for p in self.players
            ),
            victory_points=self.victory_points,
        )
