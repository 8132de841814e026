import logging
import random
from typing import Optional, Sequence, Tuple

from reversi import BOARD_SIZE, GameState, Position, Side, new_game

logger = logging.getLogger(__name__)

Move = Optional[Position]

CORNERS = {(0, 0), (0, BOARD_SIZE - 1), (BOARD_SIZE - 1, 0), (BOARD_SIZE - 1, BOARD_SIZE - 1)}


def is_corner(pos: Position) -> bool:
    return tuple(pos) in CORNERS


def is_edge(pos: Position) -> bool:
    row, col = pos
    last = BOARD_SIZE - 1
    return row in (0, last) or col in (0, last)


class RandomBot:
    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng if rng is not None else random.Random()

    def choose(self, moves: Sequence[Position]) -> Position:
        if not moves:
            raise ValueError("choose() needs at least one legal move")
        return self.rng.choice(list(moves))

    def select_move(self, state: GameState, side: Side) -> Move:
        if state.game_over or state.current_side != side:
            return None
        return self.choose(state.legal_moves)


class CornerEdgeBot(RandomBot):
    """
    One-ply opponent used by the terminal game:
    - Take a corner whenever one is available.
    - Otherwise take an edge square.
    - Otherwise any legal move.
    Ties inside a tier are broken uniformly at random.
    """

    def choose(self, moves: Sequence[Position]) -> Position:
        if not moves:
            raise ValueError("choose() needs at least one legal move")

        corner_moves = [m for m in moves if is_corner(m)]
        if corner_moves:
            return self.rng.choice(corner_moves)

        edge_moves = [m for m in moves if is_edge(m)]
        if edge_moves:
            return self.rng.choice(edge_moves)

        return self.rng.choice(list(moves))


def play_game(bot_black, bot_white, verbose: bool = False) -> Tuple[Optional[Side], GameState]:
    state = new_game()

    while not state.game_over:
        side = state.current_side
        bot = bot_black if side == Side.BLACK else bot_white
        move = bot.select_move(state, side)
        result = state.apply(move, side)
        if not result.accepted:
            # Bots only pick from state.legal_moves, so this means a broken bot.
            raise RuntimeError(f"{type(bot).__name__} played {move} for {side.name}: {result.status.value}")

    if verbose:
        counts = state.disc_counts()
        print(f"Final: B {counts.black} vs W {counts.white} -> {state.winner}")
    return state.winner, state


def play_matches(bot_a, bot_b, games: int = 20) -> dict:
    results = {"bot_a_as_black": 0, "bot_a_as_white": 0, "bot_b_as_black": 0, "bot_b_as_white": 0, "ties": 0}
    for i in range(games):
        if i % 2 == 0:
            w, _ = play_game(bot_a, bot_b)
            if w == Side.BLACK:
                results["bot_a_as_black"] += 1
            elif w == Side.WHITE:
                results["bot_b_as_white"] += 1
            else:
                results["ties"] += 1
        else:
            w, _ = play_game(bot_b, bot_a)
            if w == Side.BLACK:
                results["bot_b_as_black"] += 1
            elif w == Side.WHITE:
                results["bot_a_as_white"] += 1
            else:
                results["ties"] += 1
        logger.debug("Game %d/%d winner %s", i + 1, games, w.name if w else "tie")
    return results
