"""
AI move selection.

Two difficulties:
  - random:  uniform choice among empty cells
  - optimal: full-depth minimax (see minimax.py)
"""

import random
from enum import Enum
from typing import Optional, Sequence

import torch

from .errors import (
    GameAlreadyOverError,
    InvalidBoardError,
    InvalidDifficultyError,
    InvalidMarkError,
    NoLegalMovesError,
)
from .game import (
    Mark,
    coerce_mark,
    compute_winner,
    is_draw,
    is_legal_board,
    is_valid_board,
    legal_moves,
    side_to_move,
)
from .minimax import minimax, optimal_moves


class Difficulty(str, Enum):
    RANDOM = "random"
    OPTIMAL = "optimal"


def coerce_difficulty(difficulty) -> Difficulty:
    """Accept a Difficulty or its string value."""
    if isinstance(difficulty, Difficulty):
        return difficulty
    if isinstance(difficulty, str):
        try:
            return Difficulty(difficulty)
        except ValueError:
            pass
    raise InvalidDifficultyError(f"select_move: invalid difficulty {difficulty!r}")


def _check_inputs(board, ai_mark, difficulty, strict: bool = False):
    """Shared validation for select_move and move_policy."""
    if not is_valid_board(board):
        raise InvalidBoardError("select_move: board must be a sequence of 9 cells")
    mark = coerce_mark(ai_mark)
    level = coerce_difficulty(difficulty)

    if strict:
        if not is_legal_board(board):
            raise InvalidBoardError("select_move: board is not reachable from an empty board")
        if side_to_move(board) != mark:
            raise InvalidMarkError(f"select_move: it is not {mark}'s turn")

    if compute_winner(board) is not None or is_draw(board):
        raise GameAlreadyOverError("select_move: game is already over")

    available = legal_moves(board)
    if not available:
        raise NoLegalMovesError("select_move: no available moves")

    return mark, level, available


def select_move(
    board: Sequence[int],
    ai_mark,
    difficulty=Difficulty.RANDOM,
    rng: Optional[random.Random] = None,
    strict: bool = False,
) -> int:
    """
    Pick the AI's move.

    Args:
        board: 9-cell board (read only)
        ai_mark: Side the AI plays (Mark or "X"/"O")
        difficulty: Difficulty or "random"/"optimal"
        rng: Random source for the random difficulty (module random if None)
        strict: Also require a reachable board with ai_mark to move

    Returns:
        Index 0..8 of an empty cell

    Raises:
        InvalidBoardError, InvalidMarkError, InvalidDifficultyError,
        GameAlreadyOverError, NoLegalMovesError
    """
    mark, level, available = _check_inputs(board, ai_mark, difficulty, strict)

    if level is Difficulty.RANDOM:
        chooser = rng if rng is not None else random
        return chooser.choice(available)

    # Side to move comes from move parity, not from ai_mark
    current = side_to_move(board)
    _, move = minimax(tuple(board), mark, current)
    if move is None:
        return available[0]
    return move


def legal_move_mask(board: Sequence[int]) -> torch.BoolTensor:
    """Return [9] boolean mask of legal moves."""
    mask = torch.zeros(9, dtype=torch.bool)
    for i in legal_moves(board):
        mask[i] = True
    return mask


def move_policy(board: Sequence[int], ai_mark, difficulty=Difficulty.RANDOM) -> torch.Tensor:
    """
    Distribution over the 9 cells that select_move draws from.

    Returns:
        [9] float tensor: uniform over empty cells for random, uniform over
        the minimax-optimal moves for optimal.
    """
    mark, level, available = _check_inputs(board, ai_mark, difficulty)

    if level is Difficulty.RANDOM:
        support = available
    else:
        support = optimal_moves(tuple(board), mark)

    pi = torch.zeros(9, dtype=torch.float32)
    if support:
        pi[support] = 1.0 / len(support)
    return pi
