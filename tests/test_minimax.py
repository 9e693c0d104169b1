"""Tests for the minimax search."""

from tictactoe import game
from tictactoe.game import EMPTY, Mark, create_empty_board, legal_moves, side_to_move
from tictactoe.minimax import (
    DRAW_SCORE,
    LOSS_SCORE,
    WIN_SCORE,
    iter_all_legal_nonterminal_states,
    minimax,
    optimal_moves,
    terminal_score,
)

X, O, _ = Mark.X, Mark.O, EMPTY


def test_terminal_score():
    assert terminal_score((X, X, X, O, O, _, _, _, _), X) == WIN_SCORE
    assert terminal_score((X, X, X, O, O, _, _, _, _), O) == LOSS_SCORE
    assert terminal_score((X, O, X, X, O, O, O, X, X), O) == DRAW_SCORE
    assert terminal_score((X, _, _, _, _, _, _, _, _), O) is None


def test_minimax_terminal_board_has_no_move():
    score, move = minimax((O, O, O, X, X, _, X, _, _), O, X)
    assert score == WIN_SCORE
    assert move is None


def test_minimax_takes_win():
    # O to move, row 0 completes at 2
    score, move = minimax((O, O, _, X, X, _, X, _, _), O, O)
    assert move == 2
    assert score == WIN_SCORE


def test_minimax_ties_go_to_lowest_index():
    # O wins at 2 (row) or 6 (column); 2 comes first
    board = (O, O, _, O, _, _, _, X, X)
    score, move = minimax(board, O, O)
    assert score == WIN_SCORE
    assert move == 2
    assert optimal_moves(board, O) == [2, 6]


def test_minimax_minimizes_for_opponent():
    # X to move and X is the opponent: X completes its row at 5 or forks at 2
    board = (O, O, _, X, X, _, _, _, _)
    score, move = minimax(board, O, X)
    assert score == LOSS_SCORE
    assert move == 2


def test_minimax_does_not_mutate_board():
    board = [X, _, _, _, O, _, _, _, _]
    snapshot = list(board)
    minimax(board, X, X)
    optimal_moves(board, X)
    assert board == snapshot


def test_optimal_moves_empty_on_finished_board():
    assert optimal_moves((X, X, X, O, O, _, _, _, _), O) == []
    assert optimal_moves((X, O, X, X, O, O, O, X, X), X) == []


def test_optimal_moves_first_entry_matches_minimax():
    board = (X, _, _, _, O, _, _, _, X)
    current = side_to_move(board)
    score, move = minimax(board, current, current)
    best = optimal_moves(board, current)
    assert best[0] == move
    # O answers the opposite corners with an edge and holds the draw
    assert score == DRAW_SCORE
    assert best == [1, 3, 5, 7]
    assert set(best) <= set(legal_moves(board))


def test_iter_all_legal_nonterminal_states():
    states = list(iter_all_legal_nonterminal_states())
    assert len(states) == 4520
    assert len({board for board, _ in states}) == 4520
    for board, player in states:
        assert player == side_to_move(board)
        assert legal_moves(board)


def test_minimax_from_empty_board_is_a_draw():
    # Every opening draws under perfect play, so the lowest index is kept
    score, move = minimax(create_empty_board(), X, X)
    assert score == DRAW_SCORE
    assert move == 0


def test_minimax_search_skips_move_validation(monkeypatch):
    # apply_move validates through the module global, so this trips it
    def fail(*args, **kwargs):
        raise AssertionError("validate_move called during search")

    monkeypatch.setattr(game, "validate_move", fail)
    assert minimax((O, O, _, X, X, _, X, _, _), O, O) == (WIN_SCORE, 2)
    assert optimal_moves((O, O, _, X, X, _, X, _, _), O) == [2]
