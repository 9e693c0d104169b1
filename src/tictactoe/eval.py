"""
Evaluation functions.

Plays the move selector against a random opponent and against itself, and
measures how evenly the random difficulty spreads its moves and how the
selector agrees with the minimax-optimal move set on all legal states.
"""

import json
import random
from dataclasses import asdict, dataclass
from functools import lru_cache
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
import torch
from tqdm.auto import tqdm, trange

from .ai import Difficulty, coerce_difficulty, legal_move_mask, move_policy, select_move
from .game import Mark, apply_move, create_empty_board, legal_moves, outcome
from .minimax import iter_all_legal_nonterminal_states

# (board, mark_to_play) -> index
Player = Callable[[Sequence[int], Mark], int]


@dataclass
class ArenaConfig:
    """Arena run configuration."""

    # Random seed
    seed: int = 0

    # Games per matchup
    games: int = 500

    # Selector under test and its opponent
    difficulty: str = Difficulty.OPTIMAL.value
    opponent: str = Difficulty.RANDOM.value

    # Paths
    save_dir: str = "runs"
    run_name: str = "arena"


def set_seed(seed: int):
    """Set random seeds for reproducibility."""
    random.seed(seed)
    np.random.seed(seed)
    torch.manual_seed(seed)


def selector_player(difficulty, rng: Optional[random.Random] = None) -> Player:
    """
    Wrap select_move as a Player.

    Optimal choices are deterministic, so they are memoised per position.
    """
    level = coerce_difficulty(difficulty)

    if level is Difficulty.OPTIMAL:
        @lru_cache(maxsize=None)
        def best(board: Tuple[int, ...], mark: Mark) -> int:
            return select_move(board, mark, level)

        def play(board: Sequence[int], mark: Mark) -> int:
            return best(tuple(board), mark)

        return play

    def play(board: Sequence[int], mark: Mark) -> int:
        return select_move(board, mark, level, rng=rng)

    return play


def random_player(rng: Optional[random.Random] = None) -> Player:
    chooser = rng if rng is not None else random

    def play(board: Sequence[int], mark: Mark) -> int:
        return chooser.choice(legal_moves(board))

    return play


def play_match(x_player: Player, o_player: Player) -> Tuple[Optional[Mark], List[int]]:
    """
    Play one full game from an empty board.

    Returns:
        (winner, moves) where winner is None for a draw
    """
    board = create_empty_board()
    mark = Mark.X
    moves = []

    while not outcome(board).is_terminal:
        player = x_player if mark == Mark.X else o_player
        action = player(board, mark)
        board = apply_move(board, mark, action)
        moves.append(action)
        mark = mark.other

    return outcome(board).winner, moves


def run_matches(
    ai: Player,
    opponent: Player,
    games: int,
    progress: bool = False,
    desc: str = "Games",
) -> List[Dict[str, object]]:
    """
    Play games with ai alternating sides (X on even games).

    Returns:
        One record per game: game, ai_mark, winner, result, moves
    """
    records = []
    iterator = trange(games, desc=desc, disable=not progress)
    for g in iterator:
        ai_mark = Mark.X if g % 2 == 0 else Mark.O
        if ai_mark == Mark.X:
            winner, moves = play_match(ai, opponent)
        else:
            winner, moves = play_match(opponent, ai)

        if winner is None:
            result = "draw"
        elif winner == ai_mark:
            result = "win"
        else:
            result = "loss"

        records.append({
            "game": g,
            "ai_mark": str(ai_mark),
            "winner": str(winner) if winner is not None else "",
            "result": result,
            "moves": " ".join(str(m) for m in moves),
        })
    return records


def summarize(records: List[Dict[str, object]]) -> Tuple[float, float, float]:
    """Return (win_rate, draw_rate, loss_rate)."""
    total = len(records)
    if total == 0:
        return 0.0, 0.0, 0.0
    wins = sum(1 for r in records if r["result"] == "win")
    draws = sum(1 for r in records if r["result"] == "draw")
    losses = sum(1 for r in records if r["result"] == "loss")
    return wins / total, draws / total, losses / total


def eval_vs_random(
    difficulty=Difficulty.OPTIMAL,
    games: int = 500,
    seed: int = 0,
    progress: bool = False,
) -> Tuple[float, float, float]:
    """
    Evaluate the selector vs a random opponent.

    Returns:
        (win_rate, draw_rate, loss_rate)
    """
    rng = random.Random(seed)
    records = run_matches(
        selector_player(difficulty, rng),
        random_player(rng),
        games,
        progress=progress,
        desc="vs Random",
    )
    return summarize(records)


def eval_selector_vs_selector(
    games: int = 10,
    progress: bool = False,
) -> Dict[str, float]:
    """
    Optimal selector against itself. Perfect play from both sides always draws.

    Fully deterministic: every game replays the same moves.

    Returns:
        Dict with 'games', 'x_w', 'draws', 'o_w'
    """
    ai = selector_player(Difficulty.OPTIMAL)
    x_w = draws = o_w = 0

    for _ in trange(games, desc="Self-play", disable=not progress):
        winner, _ = play_match(ai, ai)
        if winner is None:
            draws += 1
        elif winner == Mark.X:
            x_w += 1
        else:
            o_w += 1

    total = max(games, 1)
    return {
        "games": games,
        "x_w": x_w / total,
        "draws": draws / total,
        "o_w": o_w / total,
    }


@torch.inference_mode()
def eval_agreement_all_states(progress: bool = False) -> Dict[str, float]:
    """
    Check the selector against the minimax-optimal move set on every legal
    non-terminal state, with each state's side to move playing as the AI.

    This is exhaustive evaluation over the entire game tree.

    Returns:
        Dict with 'n_states', 'optimal_top1_acc' (optimal select_move inside
        the optimal set), 'random_opt_mass_mean' (random policy mass on the
        optimal set) and 'illegal_mass_max' (largest policy mass on an
        occupied cell, over both difficulties)
    """
    states = list(iter_all_legal_nonterminal_states())
    n = len(states)

    top1_opt = 0
    pi_opt_list = []
    pi_rand_list = []
    mask_list = []

    for board, mark in tqdm(states, desc="All states", disable=not progress):
        pi_opt = move_policy(board, mark, Difficulty.OPTIMAL)
        action = select_move(board, mark, Difficulty.OPTIMAL)
        top1_opt += int(pi_opt[action].item() > 0)

        pi_opt_list.append(pi_opt)
        pi_rand_list.append(move_policy(board, mark, Difficulty.RANDOM))
        mask_list.append(legal_move_mask(board))

    pi_opt = torch.stack(pi_opt_list, dim=0)
    pi_rand = torch.stack(pi_rand_list, dim=0)
    masks = torch.stack(mask_list, dim=0)

    best = (pi_opt > 0).float()
    opt_mass = (pi_rand * best).sum(dim=1)

    illegal = (~masks).float()
    illegal_mass = torch.maximum((pi_opt * illegal).sum(dim=1), (pi_rand * illegal).sum(dim=1))

    return {
        "n_states": n,
        "optimal_top1_acc": top1_opt / n,
        "random_opt_mass_mean": opt_mass.mean().item(),
        "illegal_mass_max": illegal_mass.max().item(),
    }


def random_move_histogram(
    board: Sequence[int],
    ai_mark,
    samples: int = 1000,
    seed: int = 0,
) -> np.ndarray:
    """Count how often the random selector picks each cell."""
    rng = random.Random(seed)
    counts = np.zeros(9, dtype=np.int64)
    for _ in range(samples):
        counts[select_move(board, ai_mark, Difficulty.RANDOM, rng=rng)] += 1
    return counts


def chi_square_uniform(counts: np.ndarray, legal: Sequence[int]) -> float:
    """Pearson chi-square statistic of counts over legal cells against uniform."""
    observed = np.asarray(counts, dtype=np.float64)[list(legal)]
    expected = observed.sum() / len(legal)
    return float(((observed - expected) ** 2 / expected).sum())


def save_run(config: ArenaConfig, records: List[Dict[str, object]]) -> Path:
    """Write config.json and games.csv into save_dir/run_name."""
    run_dir = Path(config.save_dir) / config.run_name
    run_dir.mkdir(parents=True, exist_ok=True)

    with open(run_dir / "config.json", "w") as f:
        json.dump(asdict(config), f, indent=2)

    pd.DataFrame(records).to_csv(run_dir / "games.csv", index=False)
    return run_dir
