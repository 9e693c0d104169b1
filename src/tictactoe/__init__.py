"""
tictactoe - Tic-Tac-Toe rules and AI opponent.

Pure board rules (validation, win/draw detection) plus a move selector that
plays either uniformly at random or by exhaustive minimax.
"""

from .errors import (
    TicTacToeError,
    InvalidBoardError,
    InvalidIndexError,
    CellOccupiedError,
    InvalidMarkError,
    InvalidDifficultyError,
    GameAlreadyOverError,
    NoLegalMovesError,
)
from .game import (
    EMPTY,
    WIN_LINES,
    Mark,
    GameStatus,
    Outcome,
    ValidationReason,
    ValidationResult,
    coerce_mark,
    create_empty_board,
    validate_move,
    compute_winner,
    is_draw,
    outcome,
    is_terminal,
    legal_moves,
    apply_move,
    place,
    side_to_move,
    is_legal_board,
    format_board,
)
from .minimax import minimax, optimal_moves, iter_all_legal_nonterminal_states
from .ai import Difficulty, select_move, move_policy, legal_move_mask
from .session import GameMode, GameSession, MoveRecord, configure_audit_logging
from .eval import (
    ArenaConfig,
    eval_vs_random,
    eval_selector_vs_selector,
    eval_agreement_all_states,
    random_move_histogram,
    chi_square_uniform,
)

__version__ = "0.1.0"
__all__ = [
    "TicTacToeError",
    "InvalidBoardError",
    "InvalidIndexError",
    "CellOccupiedError",
    "InvalidMarkError",
    "InvalidDifficultyError",
    "GameAlreadyOverError",
    "NoLegalMovesError",
    "EMPTY",
    "WIN_LINES",
    "Mark",
    "GameStatus",
    "Outcome",
    "ValidationReason",
    "ValidationResult",
    "coerce_mark",
    "create_empty_board",
    "validate_move",
    "compute_winner",
    "is_draw",
    "outcome",
    "is_terminal",
    "legal_moves",
    "apply_move",
    "place",
    "side_to_move",
    "is_legal_board",
    "format_board",
    "minimax",
    "optimal_moves",
    "iter_all_legal_nonterminal_states",
    "Difficulty",
    "select_move",
    "move_policy",
    "legal_move_mask",
    "GameMode",
    "GameSession",
    "MoveRecord",
    "configure_audit_logging",
    "ArenaConfig",
    "eval_vs_random",
    "eval_selector_vs_selector",
    "eval_agreement_all_states",
    "random_move_histogram",
    "chi_square_uniform",
]
