"""
Single-game controller with audit logging.

GameSession owns the authoritative board for one game, calls the pure rules
and the move selector, and writes an audit line for every attempt, rejection
and applied move. It is the only part of the package that logs.
"""

import logging
import random
import time
from dataclasses import dataclass, field
from enum import Enum
from logging.handlers import RotatingFileHandler
from typing import List, Optional

from .ai import Difficulty, coerce_difficulty, select_move
from .errors import TicTacToeError
from .game import (
    Board,
    GameStatus,
    Mark,
    Outcome,
    ValidationResult,
    apply_move,
    coerce_mark,
    create_empty_board,
    format_board,
    outcome,
    validate_move,
)

AUDIT_LOGGER_NAME = "tictactoe.audit"
AUDIT_FORMAT = "%(asctime)s %(levelname)s %(message)s"


class GameMode(str, Enum):
    PVP = "pvp"
    VS_AI = "vs_ai"


@dataclass(frozen=True)
class MoveRecord:
    mark: Mark
    index: int


def configure_audit_logging(level=logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Attach stream (and optional rotating file) handlers to the audit logger.

    Calling it again replaces the handlers instead of stacking them.
    """
    logger = logging.getLogger(AUDIT_LOGGER_NAME)
    logger.setLevel(level)
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    fmt = logging.Formatter(AUDIT_FORMAT)
    stream = logging.StreamHandler()
    stream.setFormatter(fmt)
    logger.addHandler(stream)

    if log_file:
        fh = RotatingFileHandler(log_file, maxBytes=256_000, backupCount=3, encoding="utf-8")
        fh.setFormatter(fmt)
        logger.addHandler(fh)

    logger.propagate = False
    return logger


@dataclass
class GameSession:
    """
    One game of tic-tac-toe, player vs player or player vs AI.

    State machine: empty -> in progress -> won/draw, and restart() is the only
    way out of a finished game.
    """

    mode: GameMode = GameMode.VS_AI
    ai_mark: Mark = Mark.O
    difficulty: Difficulty = Difficulty.OPTIMAL
    rng: Optional[random.Random] = None
    ai_delay: float = 0.0
    logger: Optional[logging.Logger] = None
    board: Board = field(default_factory=create_empty_board)
    history: List[MoveRecord] = field(default_factory=list)

    def __post_init__(self):
        self.mode = GameMode(self.mode)
        self.ai_mark = coerce_mark(self.ai_mark)
        self.difficulty = coerce_difficulty(self.difficulty)
        if self.logger is None:
            self.logger = logging.getLogger(AUDIT_LOGGER_NAME)

    def _audit(self, event: str, level=logging.INFO, **data):
        self.logger.log(level, "[AUDIT] %s :: %s", event, data)

    @property
    def current_player(self) -> Mark:
        return Mark.X if len(self.history) % 2 == 0 else Mark.O

    @property
    def outcome(self) -> Outcome:
        return outcome(self.board)

    @property
    def game_over(self) -> bool:
        return self.outcome.is_terminal

    @property
    def is_ai_turn(self) -> bool:
        return self.mode is GameMode.VS_AI and self.current_player == self.ai_mark

    def play(self, index) -> ValidationResult:
        """
        Apply a human move for the side to play.

        Returns the validation result; a rejected move leaves the session
        untouched. Returns ValidationResult(False) with no reason when the
        game is over or it is the AI's turn.
        """
        player = self.current_player
        self._audit("MOVE_ATTEMPT", player=str(player), index=index, before=list(self.board))

        result = validate_move(self.board, index)
        if not result.valid:
            self._audit("MOVE_REJECT", reason=result.reason.value, player=str(player), index=index)
            return result
        if self.game_over:
            self._audit("MOVE_REJECT", reason="GameOver", player=str(player), index=index)
            return ValidationResult(False)
        if self.is_ai_turn:
            self._audit("MOVE_REJECT", reason="NotYourTurn", player=str(player), index=index)
            return ValidationResult(False)

        self._apply(player, index, "MOVE_APPLY")
        return result

    def ai_turn(self) -> Optional[int]:
        """Let the AI move if it is its turn. Returns the index played or None."""
        if self.game_over or not self.is_ai_turn:
            return None

        if self.ai_delay > 0:
            time.sleep(self.ai_delay)

        try:
            index = select_move(self.board, self.ai_mark, self.difficulty, rng=self.rng)
        except TicTacToeError as err:
            self._audit("MOVE_ERROR", level=logging.ERROR, code=err.code, message=str(err))
            raise

        self._apply(self.ai_mark, index, "AI_MOVE")
        return index

    def restart(self):
        self._audit("GAME_RESTART", before=list(self.board))
        self.board = create_empty_board()
        self.history = []

    def _apply(self, mark: Mark, index: int, event: str):
        self.board = apply_move(self.board, mark, index)
        self.history.append(MoveRecord(mark, index))
        self._audit(event, player=str(mark), index=index, after=list(self.board))

        result = self.outcome
        if result.status is GameStatus.WON:
            self._audit("GAME_WIN", winner=str(result.winner), final_board=list(self.board))
        elif result.status is GameStatus.DRAW:
            self._audit("GAME_DRAW", final_board=list(self.board))

    def render(self) -> str:
        return format_board(self.board)
