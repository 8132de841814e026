import argparse
import logging
import random

from bots import CornerEdgeBot, RandomBot, play_matches


def main(argv=None):
    p = argparse.ArgumentParser(description="Evaluate the corner/edge bot against the random bot on Reversi")
    p.add_argument("--games", type=int, default=20, help="Number of games to play (will alternate colors)")
    p.add_argument("--seed", type=int, default=None, help="Seed for both bots (default: unseeded)")
    p.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, WARNING, ...)")
    args = p.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    if args.games <= 0:
        p.error("--games must be positive")

    rng = random.Random(args.seed)
    heuristic = CornerEdgeBot(rng=rng)
    random_bot = RandomBot(rng=rng)

    results = play_matches(heuristic, random_bot, games=args.games)

    total = args.games
    h_wins = results["bot_a_as_black"] + results["bot_a_as_white"]
    r_wins = results["bot_b_as_black"] + results["bot_b_as_white"]
    ties = results["ties"]

    print(f"Games: {total}")
    print(f"Corner/edge wins: {h_wins}")
    print(f"Random wins: {r_wins}")
    print(f"Ties: {ties}")
    print("Breakdown:", results)
    return results


if __name__ == "__main__":
    main()
