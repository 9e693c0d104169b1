"""
TicTacToe board rules.

Board representation: tuple of length 9, row-major
  -  0: empty
  - +1: X
  - -1: O

Every function here is pure: boards are read, never modified, and any
new board is returned as a fresh tuple.
"""

import numbers
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import List, Optional, Sequence, Tuple

from .errors import CellOccupiedError, InvalidBoardError, InvalidIndexError, InvalidMarkError

BOARD_SIZE = 9
EMPTY = 0

# Winning lines (rows, columns, diagonals)
WIN_LINES = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),  # rows
    (0, 3, 6), (1, 4, 7), (2, 5, 8),  # columns
    (0, 4, 8), (2, 4, 6),              # diagonals
)

Board = Tuple[int, ...]


class Mark(IntEnum):
    """Player symbol. X always moves first."""

    X = 1
    O = -1

    @property
    def other(self) -> "Mark":
        return Mark(-self.value)

    def __str__(self) -> str:
        return self.name

    def __format__(self, spec: str) -> str:
        return format(self.name, spec)


_MARKS = (Mark.X, Mark.O)


def coerce_mark(mark) -> Mark:
    """Accept Mark.X / Mark.O or the strings "X" / "O"."""
    if isinstance(mark, Mark):
        return mark
    if isinstance(mark, str) and mark in ("X", "O"):
        return Mark[mark]
    raise InvalidMarkError(f"invalid mark {mark!r}")


class ValidationReason(str, Enum):
    INVALID_BOARD = "InvalidBoard"
    INVALID_INDEX = "InvalidIndex"
    CELL_OCCUPIED = "CellOccupied"


class GameStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    WON = "won"
    DRAW = "draw"


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validate_move. Truthy when the move is legal."""
    valid: bool
    reason: Optional[ValidationReason] = None

    def __bool__(self) -> bool:
        return self.valid


@dataclass(frozen=True)
class Outcome:
    status: GameStatus
    winner: Optional[Mark] = None

    @property
    def is_terminal(self) -> bool:
        return self.status is not GameStatus.IN_PROGRESS


_REASON_ERRORS = {
    ValidationReason.INVALID_BOARD: InvalidBoardError,
    ValidationReason.INVALID_INDEX: InvalidIndexError,
    ValidationReason.CELL_OCCUPIED: CellOccupiedError,
}


def create_empty_board() -> Board:
    """Return a new empty board."""
    return (EMPTY,) * BOARD_SIZE


def is_valid_board(board) -> bool:
    """
    True if board is an indexable container of exactly 9 cells.

    Lists, tuples and 1-d numpy arrays qualify; strings and mappings do not.
    """
    if isinstance(board, (str, bytes, Mapping)):
        return False
    if not (hasattr(board, "__len__") and hasattr(board, "__getitem__")):
        return False
    return len(board) == BOARD_SIZE


def is_valid_index(index) -> bool:
    # bool is an int subclass but never a board index
    if isinstance(index, bool) or not isinstance(index, numbers.Integral):
        return False
    return 0 <= index < BOARD_SIZE


def validate_move(board: Sequence[int], index: int) -> ValidationResult:
    """
    Check whether a move at index is legal on board.

    board may be any indexable 9-cell container (list, tuple, numpy array).

    Never raises: failures are reported through ValidationResult.reason.
    """
    if not is_valid_board(board):
        return ValidationResult(False, ValidationReason.INVALID_BOARD)
    if not is_valid_index(index):
        return ValidationResult(False, ValidationReason.INVALID_INDEX)
    if board[index] != EMPTY:
        return ValidationResult(False, ValidationReason.CELL_OCCUPIED)
    return ValidationResult(True)


def compute_winner(board: Sequence[int]) -> Optional[Mark]:
    """
    Return the mark owning a complete line, or None.

    Lines are scanned rows first, then columns, then diagonals; the first
    complete line decides.
    """
    for a, b, c in WIN_LINES:
        v = board[a]
        if v in _MARKS and v == board[b] == board[c]:
            return Mark(v)
    return None


def winners_set(board: Sequence[int]) -> set:
    """Return set of marks owning at least one complete line (both if illegal)."""
    wins = set()
    for a, b, c in WIN_LINES:
        v = board[a]
        if v in _MARKS and v == board[b] == board[c]:
            wins.add(Mark(v))
    return wins


def is_full(board: Sequence[int]) -> bool:
    return all(v != EMPTY for v in board)


def is_draw(board: Sequence[int]) -> bool:
    """True iff the board is full and nobody has a line."""
    return compute_winner(board) is None and is_full(board)


def outcome(board: Sequence[int]) -> Outcome:
    """Classify board as won, drawn or still in progress."""
    winner = compute_winner(board)
    if winner is not None:
        return Outcome(GameStatus.WON, winner)
    if is_full(board):
        return Outcome(GameStatus.DRAW)
    return Outcome(GameStatus.IN_PROGRESS)


def is_terminal(board: Sequence[int]) -> bool:
    return outcome(board).is_terminal


def legal_moves(board: Sequence[int]) -> List[int]:
    """Return list of legal move indices (empty squares)."""
    return [i for i, v in enumerate(board) if v == EMPTY]


def apply_move(board: Sequence[int], mark: Mark, index: int) -> Board:
    """
    Apply move and return new board.

    Raises:
        InvalidBoardError, InvalidIndexError, CellOccupiedError, InvalidMarkError
    """
    result = validate_move(board, index)
    if not result.valid:
        raise _REASON_ERRORS[result.reason](
            f"apply_move: {result.reason.value} (index={index!r})"
        )
    return place(board, coerce_mark(mark), index)


def place(board: Sequence[int], mark: Mark, index: int) -> Board:
    """
    Return a copy of board with mark at index. No rule checks.

    The input is never modified; search code relies on every child being a
    fresh tuple.
    """
    cells = list(board)
    cells[index] = mark.value
    return tuple(cells)


def side_to_move(board: Sequence[int]) -> Mark:
    """
    Infer side to move from board state (X plays first).

    Only the number of filled cells is used, so a board that did not come
    from strict X/O alternation still yields an answer.
    """
    filled = sum(1 for v in board if v != EMPTY)
    return Mark.X if filled % 2 == 0 else Mark.O


def is_legal_board(board: Sequence[int]) -> bool:
    """Check if board is reachable under the rules (X first, one winner at most)."""
    if not is_valid_board(board):
        return False
    if any(v not in (EMPTY, Mark.X, Mark.O) for v in board):
        return False

    x_cnt = sum(1 for v in board if v == Mark.X)
    o_cnt = sum(1 for v in board if v == Mark.O)

    # X goes first, so x_cnt == o_cnt or x_cnt == o_cnt + 1
    if not (x_cnt == o_cnt or x_cnt == o_cnt + 1):
        return False

    # Can't have both winners
    if len(winners_set(board)) >= 2:
        return False

    return True


def format_board(board: Sequence[int]) -> str:
    """Render board as three text rows."""
    symbols = {EMPTY: ".", Mark.X: "X", Mark.O: "O"}
    rows = []
    for r in range(3):
        rows.append(" ".join(symbols[board[r * 3 + c]] for c in range(3)))
    return "\n".join(rows)
