"""
Exact minimax search for TicTacToe.

Scores are taken from the searching side's point of view:
  +10  searching side wins
  -10  opponent wins
    0  draw

No depth discount and no pruning: the 3x3 tree is small enough to search
exhaustively, and ties are broken towards the lowest index because the best
move only changes on a strict improvement.
"""

from typing import Iterator, List, Optional, Sequence, Tuple

from .game import (
    EMPTY,
    Board,
    Mark,
    compute_winner,
    is_full,
    is_terminal,
    legal_moves,
    place,
    side_to_move,
    winners_set,
)

WIN_SCORE = 10
LOSS_SCORE = -10
DRAW_SCORE = 0


def terminal_score(board: Sequence[int], ai_mark: Mark) -> Optional[int]:
    """Score a finished board for ai_mark, or None if play continues."""
    winner = compute_winner(board)
    if winner is not None:
        return WIN_SCORE if winner == ai_mark else LOSS_SCORE
    if is_full(board):
        return DRAW_SCORE
    return None


def minimax(board: Sequence[int], ai_mark: Mark, current_mark: Mark) -> Tuple[int, Optional[int]]:
    """
    Search the game tree below board.

    Args:
        board: Current board state (never modified; every child is a new tuple)
        ai_mark: Side the scores are computed for
        current_mark: Side to play at this node

    Returns:
        (score, move) where move is None at terminal nodes
    """
    score = terminal_score(board, ai_mark)
    if score is not None:
        return score, None

    avail = legal_moves(board)
    if not avail:
        return DRAW_SCORE, None

    maximizing = current_mark == ai_mark
    best_score = None
    best_move = None

    for action in avail:
        child = place(board, current_mark, action)
        child_score, _ = minimax(child, ai_mark, current_mark.other)

        if best_score is None:
            improved = True
        elif maximizing:
            improved = child_score > best_score
        else:
            improved = child_score < best_score

        if improved:
            best_score = child_score
            best_move = action

    return best_score, best_move


def optimal_moves(board: Sequence[int], ai_mark: Mark) -> List[int]:
    """
    Return every move that reaches the minimax score for ai_mark.

    The side to play is inferred from the board, as in minimax move selection.
    Moves are in ascending order, so the first entry is the move the optimal
    selector plays.
    """
    if terminal_score(board, ai_mark) is not None:
        return []

    current = side_to_move(board)
    scores = {}
    for action in legal_moves(board):
        child = place(board, current, action)
        scores[action], _ = minimax(child, ai_mark, current.other)
    if not scores:
        return []

    best_v = max(scores.values()) if current == ai_mark else min(scores.values())
    return [action for action, v in scores.items() if v == best_v]


def iter_all_legal_nonterminal_states() -> Iterator[Tuple[Board, Mark]]:
    """
    Iterate over all legal non-terminal board states.

    Yields:
        (board, player) tuples for exhaustive evaluation.
    """
    for n in range(3**9):
        # Decode base-3 representation
        x = n
        digits = [0] * 9
        for i in range(9):
            digits[i] = x % 3
            x //= 3

        x_cnt = sum(1 for d in digits if d == 1)
        o_cnt = sum(1 for d in digits if d == 2)

        # Legal turn order: X starts
        if not (x_cnt == o_cnt or x_cnt == o_cnt + 1):
            continue

        board = tuple(
            Mark.X.value if d == 1 else Mark.O.value if d == 2 else EMPTY
            for d in digits
        )

        # Skip illegal and finished states
        if len(winners_set(board)) >= 2:
            continue
        if is_terminal(board):
            continue

        yield board, side_to_move(board)
