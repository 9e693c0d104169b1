"""
Exceptions raised by the move selector and by strict board helpers.

Each exception carries a stable ``code`` so callers (and audit logs) can
branch or report without matching on message text.
"""


class TicTacToeError(ValueError):
    """Base class for all tic-tac-toe integration errors."""

    code = "TicTacToeError"


class InvalidBoardError(TicTacToeError):
    code = "InvalidBoard"


class InvalidIndexError(TicTacToeError):
    code = "InvalidIndex"


class CellOccupiedError(TicTacToeError):
    code = "CellOccupied"


class InvalidMarkError(TicTacToeError):
    code = "InvalidMark"


class InvalidDifficultyError(TicTacToeError):
    code = "InvalidDifficulty"


class GameAlreadyOverError(TicTacToeError):
    code = "GameAlreadyOver"


class NoLegalMovesError(TicTacToeError):
    code = "NoLegalMoves"
