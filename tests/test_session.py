"""Tests for GameSession and audit logging."""

import logging
import random

import pytest

from tictactoe import session as session_module
from tictactoe.ai import Difficulty
from tictactoe.errors import GameAlreadyOverError, InvalidMarkError
from tictactoe.game import EMPTY, GameStatus, Mark, ValidationReason, create_empty_board
from tictactoe.session import (
    AUDIT_LOGGER_NAME,
    GameMode,
    GameSession,
    MoveRecord,
    configure_audit_logging,
)

X, O, _ = Mark.X, Mark.O, EMPTY


@pytest.fixture
def audit(caplog):
    caplog.set_level(logging.INFO, logger=AUDIT_LOGGER_NAME)
    # configure_audit_logging may have disabled propagation in another test
    logging.getLogger(AUDIT_LOGGER_NAME).propagate = True
    return caplog


def events(caplog):
    return [r.args[0] for r in caplog.records if r.name == AUDIT_LOGGER_NAME]


def pvp_session():
    return GameSession(mode=GameMode.PVP)


def test_new_session_is_empty():
    s = pvp_session()
    assert s.board == create_empty_board()
    assert s.history == []
    assert s.current_player == X
    assert s.outcome.status is GameStatus.IN_PROGRESS
    assert not s.game_over


def test_pvp_alternates_turns(audit):
    s = pvp_session()
    assert s.play(4).valid
    assert s.current_player == O
    assert s.play(0).valid
    assert s.board[4] == X
    assert s.board[0] == O
    assert s.history == [MoveRecord(X, 4), MoveRecord(O, 0)]
    assert events(audit).count("MOVE_APPLY") == 2


def test_rejected_move_leaves_state(audit):
    s = pvp_session()
    s.play(4)
    before = s.board

    result = s.play(4)
    assert not result.valid
    assert result.reason is ValidationReason.CELL_OCCUPIED
    assert s.board == before
    assert s.current_player == O

    result = s.play(12)
    assert result.reason is ValidationReason.INVALID_INDEX
    assert "MOVE_REJECT" in events(audit)


def test_win_is_terminal_until_restart(audit):
    s = pvp_session()
    for index in (0, 3, 1, 4, 2):
        assert s.play(index).valid
    assert s.outcome.status is GameStatus.WON
    assert s.outcome.winner == X
    assert s.game_over
    assert "GAME_WIN" in events(audit)

    result = s.play(8)
    assert not result.valid
    assert result.reason is None
    assert s.board[8] == EMPTY

    s.restart()
    assert s.board == create_empty_board()
    assert s.current_player == X
    assert not s.game_over
    assert "GAME_RESTART" in events(audit)


def test_draw_is_logged(audit):
    s = pvp_session()
    # X O X / X O O / O X X
    for index in (0, 1, 2, 4, 3, 5, 7, 6, 8):
        assert s.play(index).valid
    assert s.outcome.status is GameStatus.DRAW
    assert "GAME_DRAW" in events(audit)


def test_vs_ai_blocks_human_on_ai_turn():
    s = GameSession(mode=GameMode.VS_AI, ai_mark=X, difficulty=Difficulty.RANDOM,
                    rng=random.Random(0))
    assert s.is_ai_turn
    assert not s.play(0).valid
    assert s.board == create_empty_board()

    index = s.ai_turn()
    assert s.board[index] == X
    assert not s.is_ai_turn
    # Not the AI's turn any more
    assert s.ai_turn() is None


def test_seeded_rng_replays_random_ai():
    def play_out(seed):
        s = GameSession(mode=GameMode.VS_AI, ai_mark=X, difficulty="random",
                        rng=random.Random(seed))
        while not s.game_over:
            if s.is_ai_turn:
                s.ai_turn()
            else:
                s.play(s.board.index(EMPTY))
        return s.history

    assert play_out(7) == play_out(7)
    assert all(isinstance(r, MoveRecord) for r in play_out(7))


def test_vs_ai_optimal_game_never_lost_by_ai(audit):
    s = GameSession(mode=GameMode.VS_AI, ai_mark="O", difficulty="optimal")
    rng = random.Random(5)
    while not s.game_over:
        if s.is_ai_turn:
            s.ai_turn()
        else:
            free = [i for i, v in enumerate(s.board) if v == EMPTY]
            assert s.play(rng.choice(free)).valid
    assert s.outcome.winner != X
    assert "AI_MOVE" in events(audit)


def test_ai_turn_after_game_over_returns_none():
    s = GameSession(mode=GameMode.VS_AI, ai_mark=O, difficulty=Difficulty.OPTIMAL)
    s.board = (X, X, X, O, O, _, _, _, _)
    s.history = [MoveRecord(X, 0), MoveRecord(O, 3), MoveRecord(X, 1),
                 MoveRecord(O, 4), MoveRecord(X, 2)]
    assert s.game_over
    assert s.ai_turn() is None


def test_ai_error_is_logged_and_raised(audit, monkeypatch):
    def broken(*args, **kwargs):
        raise GameAlreadyOverError("select_move: game is already over")

    monkeypatch.setattr(session_module, "select_move", broken)
    s = GameSession(mode=GameMode.VS_AI, ai_mark=X, difficulty=Difficulty.OPTIMAL)
    with pytest.raises(GameAlreadyOverError):
        s.ai_turn()
    assert "MOVE_ERROR" in events(audit)
    assert s.history == []


def test_session_rejects_bad_configuration():
    with pytest.raises(InvalidMarkError):
        GameSession(ai_mark="Z")
    with pytest.raises(ValueError):
        GameSession(mode="online")


def test_configure_audit_logging_is_idempotent(tmp_path):
    log_file = tmp_path / "audit.log"
    logger = configure_audit_logging(logging.INFO, log_file=str(log_file))
    logger = configure_audit_logging(logging.INFO, log_file=str(log_file))
    assert len(logger.handlers) == 2

    s = GameSession(mode=GameMode.PVP, logger=logger)
    s.play(4)
    for h in logger.handlers:
        h.flush()
    text = log_file.read_text(encoding="utf-8")
    assert "[AUDIT] MOVE_APPLY" in text
    assert "INFO" in text

    configure_audit_logging(logging.WARNING)
    assert len(logging.getLogger(AUDIT_LOGGER_NAME).handlers) == 1

    logger = logging.getLogger(AUDIT_LOGGER_NAME)
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
    logger.propagate = True
