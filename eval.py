#!/usr/bin/env python3
"""
Evaluate the TicTacToe AI, or play against it.

Usage:
    python eval.py --games 500
    python eval.py --difficulty random --save-dir runs --run-name random_vs_random
    python eval.py --play --mark X --difficulty optimal
    python eval.py --play --pvp
    python eval.py --games 100 --all-states
"""

import sys
import random
import argparse
import logging
from pathlib import Path

# Add src to path
sys.path = [str(Path(__file__).parent / "src")] + sys.path

from tictactoe import (
    ArenaConfig,
    Difficulty,
    GameMode,
    GameSession,
    GameStatus,
    Mark,
    configure_audit_logging,
    eval_agreement_all_states,
    eval_selector_vs_selector,
)
from tictactoe.eval import (
    random_player,
    run_matches,
    save_run,
    selector_player,
    set_seed,
    summarize,
)


def play_interactive(session: GameSession):
    """Play a game in the terminal."""
    print("\n=== Interactive Game ===")
    if session.mode is GameMode.VS_AI:
        print(f"You are {session.ai_mark.other}, the AI plays {session.ai_mark} ({session.difficulty.value})")
    else:
        print("Two players, X moves first")
    print("Enter moves as numbers 0-8:")
    print(" 0 | 1 | 2 ")
    print("---+---+---")
    print(" 3 | 4 | 5 ")
    print("---+---+---")
    print(" 6 | 7 | 8 ")
    print()

    while True:
        result = session.outcome
        if result.is_terminal:
            print(session.render())
            if result.status is GameStatus.DRAW:
                print("\nDraw!")
            elif session.mode is GameMode.VS_AI and result.winner == session.ai_mark:
                print("\nAI wins!")
            else:
                print(f"\n{result.winner} wins!")
            break

        print(session.render())
        print()

        if session.is_ai_turn:
            action = session.ai_turn()
            print(f"AI plays: {action}")
            print()
            continue

        try:
            raw = input(f"{session.current_player} to move: ")
        except (EOFError, KeyboardInterrupt):
            print("\nGame aborted")
            return

        try:
            action = int(raw)
        except ValueError:
            print("Invalid move, try again")
            continue

        check = session.play(action)
        if not check.valid:
            reason = check.reason.value if check.reason else "not allowed"
            print(f"Invalid move ({reason}), try again")
        print()


def main():
    parser = argparse.ArgumentParser(description="Evaluate TicTacToe AI")
    parser.add_argument("--games", type=int, default=500, help="Number of eval games")
    parser.add_argument("--difficulty", type=str, default="optimal",
                        choices=[d.value for d in Difficulty], help="AI difficulty")
    parser.add_argument("--opponent", type=str, default="random",
                        choices=[d.value for d in Difficulty], help="Opponent difficulty in the arena")
    parser.add_argument("--seed", type=int, default=0, help="Random seed")
    parser.add_argument("--save-dir", type=str, default=None, help="Save config.json and games.csv here")
    parser.add_argument("--run-name", type=str, default="arena", help="Run name for saving")
    parser.add_argument("--all-states", action="store_true", help="Check the selector on every legal state")
    parser.add_argument("--play", action="store_true", help="Play interactive game")
    parser.add_argument("--mark", type=str, default="X", choices=["X", "O"], help="Your mark when playing")
    parser.add_argument("--pvp", action="store_true", help="Two human players")
    parser.add_argument("--ai-delay", type=float, default=0.4, help="Seconds the AI 'thinks'")
    parser.add_argument("--audit-log", type=str, default=None, help="Also write audit log to this file")
    parser.add_argument("--verbose", action="store_true", help="Show audit log on the console")

    args = parser.parse_args()

    set_seed(args.seed)

    # Interactive play
    if args.play:
        level = logging.INFO if args.verbose or args.audit_log else logging.WARNING
        configure_audit_logging(level, log_file=args.audit_log)
        session = GameSession(
            mode=GameMode.PVP if args.pvp else GameMode.VS_AI,
            ai_mark=Mark[args.mark].other,
            difficulty=Difficulty(args.difficulty),
            ai_delay=args.ai_delay,
        )
        play_interactive(session)
        return

    config = ArenaConfig(
        seed=args.seed,
        games=args.games,
        difficulty=args.difficulty,
        opponent=args.opponent,
        save_dir=args.save_dir or "runs",
        run_name=args.run_name,
    )

    # Evaluation
    print("\n=== Evaluation ===")
    rng = random.Random(config.seed)
    ai = selector_player(config.difficulty, rng)
    if config.opponent == Difficulty.RANDOM.value:
        opponent = random_player(rng)
    else:
        opponent = selector_player(config.opponent, rng)

    print(f"\n{config.difficulty} vs {config.opponent} ({config.games} games)...")
    records = run_matches(ai, opponent, config.games, progress=True, desc="Arena")
    w, d, l = summarize(records)
    print(f"  Wins:   {w:.2%}")
    print(f"  Draws:  {d:.2%}")
    print(f"  Losses: {l:.2%}")

    if config.difficulty == Difficulty.OPTIMAL.value:
        print("\nOptimal vs Optimal...")
        sp = eval_selector_vs_selector(games=10)
        print(f"  X wins: {sp['x_w']:.2%}")
        print(f"  Draws:  {sp['draws']:.2%}")
        print(f"  O wins: {sp['o_w']:.2%}")

    if args.all_states:
        print("\nAll legal states...")
        ag = eval_agreement_all_states(progress=True)
        print(f"  States:               {ag['n_states']}")
        print(f"  Optimal top-1 acc:    {ag['optimal_top1_acc']:.2%}")
        print(f"  Random mass on opt:   {ag['random_opt_mass_mean']:.2%}")
        print(f"  Max illegal mass:     {ag['illegal_mass_max']:.4f}")

    if args.save_dir:
        run_dir = save_run(config, records)
        print(f"\n✓ Config and games saved to {run_dir}")


if __name__ == "__main__":
    main()
