"""
Topple - Round Lifecycle

A round is one board-filling episode with its own piece supply; the game
is the cumulative score competition across rounds. The game can only end
at a round boundary, once somebody has reached the victory points.
"""

import logging
from dataclasses import replace
from datetime import datetime

from topple.engine.base import GameStatus, LogDraft, LogEntryType, extend_log, utc_now
from topple.engine.board import BoardEngine
from topple.engine.game import Game
from topple.engine.players import Player

logger = logging.getLogger(__name__)


class RoundEngine:
    """Stateless round and game-end sequencing."""

    @classmethod
    def check_game_end(cls, game: Game) -> bool:
        """True iff the round has ended and a player reached the victory points."""
        if game.status != GameStatus.ROUND_END:
            return False
        return any(p.score >= game.victory_points for p in game.players)

    @classmethod
    def qualifying_players(cls, game: Game) -> list[Player]:
        return [p for p in game.players if p.score >= game.victory_points]

    @classmethod
    def determine_winner(cls, game: Game) -> Player | None:
        """
        Pick the winner of a finished game.

        Among players at or above the victory points the highest score
        wins; on an exact tie the first such player in turn order wins.

        Returns:
            The winner, or None if the game has not ended or nobody qualifies
        """
        if game.status != GameStatus.GAME_END:
            return None

        winner: Player | None = None
        for player in cls.qualifying_players(game):
            if winner is None or player.score > winner.score:
                winner = player
        return winner

    @classmethod
    def end_round(cls, game: Game, now: datetime | None = None) -> Game:
        """
        Close the current round, cascading into game end when due.

        Args:
            game: Snapshot whose round is over
            now: Current time (defaults to utc_now())

        Returns:
            Snapshot with status gameEnd (and a game_end log entry) or
            roundEnd (and a round_end log entry)
        """
        now = now or utc_now()
        ended = replace(game, status=GameStatus.ROUND_END)

        if cls.check_game_end(ended):
            finished = replace(ended, status=GameStatus.GAME_END)
            winner = cls.determine_winner(finished)
            if winner is not None:
                suffix = ""
                if len(cls.qualifying_players(finished)) > 1:
                    suffix = " (highest score among players who reached victory points)"
                message = f"Game ended! {winner.name} won with {winner.score} points{suffix}"
            else:
                message = f"Game ended! A player reached {game.victory_points} victory points"

            logger.info("Game %s ended in round %d", game.id, game.round_number)
            draft = LogDraft(
                type=LogEntryType.GAME_END,
                message=message,
                player_id=winner.id if winner else None,
                player_name=winner.name if winner else None,
            )
            return replace(
                finished,
                log=extend_log(game.log, [draft], game.round_number, now),
                updated_at=now,
            )

        if game.topple_occurred:
            reason = "topple occurred"
        elif game.all_pieces_played:
            reason = "all pieces played"
        else:
            reason = "ended early"
        logger.info("Game %s: round %d ended (%s)", game.id, game.round_number, reason)

        draft = LogDraft(
            type=LogEntryType.ROUND_END,
            message=f"Round {game.round_number} ended ({reason})",
        )
        return replace(
            ended,
            log=extend_log(game.log, [draft], game.round_number, now),
            updated_at=now,
        )

    @classmethod
    def start_new_round(cls, game: Game, now: datetime | None = None) -> Game:
        """
        Start the next round.

        Only legal from roundEnd. Clears the board, refills every supply,
        resets the round flags and hands the turn to the first player.
        Scores are carried over unchanged.

        Returns:
            The new snapshot, or the input unchanged if not at roundEnd
        """
        if game.status != GameStatus.ROUND_END:
            return game

        now = now or utc_now()
        round_number = game.round_number + 1
        players = tuple(
            p.with_pieces_reset().with_active(i == 0)
            for i, p in enumerate(game.players)
        )
        draft = LogDraft(
            type=LogEntryType.ROUND_START,
            message=f"Round {round_number} started",
        )
        logger.info("Game %s: round %d started", game.id, round_number)

        return replace(
            game,
            status=GameStatus.PLAYING,
            board=BoardEngine.create_empty_board(),
            players=players,
            round_number=round_number,
            current_player_index=0,
            dice_roll=None,
            topple_occurred=False,
            topple_player_id=None,
            dice_rolled_in_round=False,
            log=extend_log(game.log, [draft], round_number, now),
            updated_at=now,
        )
