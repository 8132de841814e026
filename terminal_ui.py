import os
import sys
import time
import random
import argparse
import logging
from typing import List, Optional

from bots import CornerEdgeBot, play_game
from reversi import (
    BOARD_SIZE,
    ApplyResult,
    Cell,
    GameState,
    MoveRecord,
    Position,
    Side,
    Status,
    to_notation,
)

logger = logging.getLogger(__name__)

COMPUTER_MOVE_DELAY = 0.6

DISC_CHARS = {Cell.EMPTY: " ", Cell.BLACK: "○", Cell.WHITE: "●"}


def side_label(side: Side, human: Optional[Side] = None) -> str:
    if human is None:
        return side.name
    return f"{side.name} (you)" if side == human else f"{side.name} (computer)"


def format_record(record: MoveRecord) -> str:
    return f"#{record.number} {record.side.name} {record.notation} (flipped {len(record.captured)})"


def describe_result(result: ApplyResult, mover: Side, pos: Position, state: GameState, human: Optional[Side] = None) -> str:
    """Status line shown after a placement attempt."""
    if result.status == Status.GAME_ALREADY_OVER:
        return "The game is over. Press r to start a new one."
    if result.status == Status.ILLEGAL_MOVE:
        if mover != state.current_side:
            return f"It is {side_label(state.current_side, human)}'s turn."
        return "You can't place a disc there. Pick a highlighted square."
    if result.status == Status.PASSED:
        return (
            f"{side_label(result.passed, human)} has no legal move and passes. "
            f"{side_label(result.side, human)} moves again."
        )
    if result.status == Status.FINISHED:
        return final_message(state)
    return (
        f"{side_label(mover, human)} played {to_notation(pos)}. "
        f"{side_label(result.side, human)} to move."
    )


def final_message(state: GameState) -> str:
    counts = state.disc_counts()
    score = f"BLACK {counts.black} - WHITE {counts.white}"
    if state.winner is None:
        return f"Game over: {score}. It's a tie!"
    return f"Game over: {score}. Winner: {state.winner.name}!"


def render_board(state: GameState, cursor: Optional[Position] = None) -> str:
    """Draw the board; legal moves show as ``·``, the last move is starred."""
    legal = set(state.legal_moves)
    last = state.last_move.pos if state.last_move else None
    letters = "   ".join(chr(ord("A") + c) for c in range(BOARD_SIZE))
    lines = [f"    {letters}", "  ┌" + "┬".join(["───"] * BOARD_SIZE) + "┐"]

    for row in range(BOARD_SIZE):
        cells = []
        for col in range(BOARD_SIZE):
            pos = (row, col)
            char = DISC_CHARS[state.cell_at(pos)]
            if char == " " and pos in legal:
                char = "·"
            if pos == cursor:
                cells.append(f"[{char}]")
            elif pos == last:
                cells.append(f"*{char} ")
            else:
                cells.append(f" {char} ")
        lines.append(f"{row + 1} │" + "│".join(cells) + "│")
        if row < BOARD_SIZE - 1:
            lines.append("  ├" + "┼".join(["───"] * BOARD_SIZE) + "┤")
        else:
            lines.append("  └" + "┴".join(["───"] * BOARD_SIZE) + "┘")

    return "\n".join(lines)


def read_key() -> str:
    import termios
    import tty

    fd = sys.stdin.fileno()
    old_settings = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        key = sys.stdin.read(1)
        if key == "\x1b":  # ESC sequence
            key += sys.stdin.read(2)
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)
    return key


def flush_input() -> bool:
    """Drop keys typed while input was blocked; returns False when stdin is not a terminal."""
    if not sys.stdin.isatty():
        return False
    import termios

    termios.tcflush(sys.stdin.fileno(), termios.TCIFLUSH)
    return True


KEY_MOVES = {
    "\x1b[A": (-1, 0),  # Up arrow
    "\x1b[B": (1, 0),  # Down arrow
    "\x1b[D": (0, -1),  # Left arrow
    "\x1b[C": (0, 1),  # Right arrow
    "w": (-1, 0),
    "s": (1, 0),
    "a": (0, -1),
    "d": (0, 1),
}


class ReversiTerminal:
    def __init__(self, human: Optional[Side] = Side.BLACK, bot=None, delay: float = COMPUTER_MOVE_DELAY):
        self.human = human
        self.bot = bot if bot is not None else CornerEdgeBot()
        self.delay = delay
        self.state = GameState()
        self.cursor = (2, 3)
        self.log: List[str] = []
        self.message = ""
        self.restart()

    def restart(self):
        self.state.restart()
        self.cursor = (2, 3)
        self.log = ["Game started: BLACK to move."]
        if self.human is None:
            self.message = "Computer versus computer."
        else:
            self.message = f"You play {side_label(self.human, self.human)}. Place a disc on a highlighted square."

    def is_human_turn(self) -> bool:
        return not self.state.game_over and self.state.current_side == self.human

    def submit(self, pos: Position, side: Side) -> ApplyResult:
        result = self.state.apply(pos, side)
        self.message = describe_result(result, side, pos, self.state, self.human)
        if result.accepted:
            self.log.append(format_record(self.state.history[-1]))
            if result.status in (Status.PASSED, Status.FINISHED):
                self.log.append(self.message)
        return result

    def computer_turn(self) -> Optional[ApplyResult]:
        if self.state.game_over or self.state.current_side == self.human:
            return None
        # Pacing only; human input is not read while the computer "thinks".
        if self.delay > 0:
            time.sleep(self.delay)
        if self.human is not None:
            flush_input()
        side = self.state.current_side
        move = self.bot.select_move(self.state, side)
        logger.debug("Computer (%s) picks %s from %d moves", side.name, to_notation(move), len(self.state.legal_moves))
        return self.submit(move, side)

    def move_cursor(self, dr: int, dc: int):
        row, col = self.cursor
        self.cursor = (
            min(BOARD_SIZE - 1, max(0, row + dr)),
            min(BOARD_SIZE - 1, max(0, col + dc)),
        )

    def display_board(self):
        os.system("export TERM=linux; clear")
        print("Reversi")
        print("\nUse WASD or arrow keys to move")
        print("Press enter to place a disc, r to restart, q to quit\n")

        counts = self.state.disc_counts()
        if not self.state.game_over:
            print(f"Current Player: {side_label(self.state.current_side, self.human)}")
        print(f"BLACK ○ {counts.black}   WHITE ● {counts.white}")
        print()
        cursor = self.cursor if self.is_human_turn() else None
        print(render_board(self.state, cursor))
        print(f"\n{self.message}\n")
        for line in self.log[-8:]:
            print(f"  {line}")

    def handle_player_input(self) -> bool:
        """Returns False when the player asked to quit."""
        while True:
            key = read_key()
            step = KEY_MOVES.get(key) or KEY_MOVES.get(key.lower())
            if step:
                self.move_cursor(*step)
                self.display_board()
            elif key in ("\r", "\n"):
                result = self.submit(self.cursor, self.human)
                self.display_board()
                if result.accepted:
                    return True
            elif key.lower() == "r":
                self.restart()
                self.display_board()
                return True
            elif key.lower() == "q" or key == "\x03":
                return not self.confirm_quit()

    def confirm_quit(self) -> bool:
        print("\nAre you sure you want to quit? [y/n]: ", end="", flush=True)
        key = read_key()
        print(key)
        if key.lower() == "y":
            return True
        self.display_board()
        return False

    def play_game(self) -> bool:
        """Run one game to the end; returns False if the player quit."""
        while not self.state.game_over:
            self.display_board()
            if self.is_human_turn():
                if not self.handle_player_input():
                    return False
            else:
                self.computer_turn()

        self.display_board()
        return True


def run_simulations(num_games, rng=None):
    rng = rng if rng is not None else random.Random()
    bot = CornerEdgeBot(rng=rng)
    black_wins = 0
    white_wins = 0
    ties = 0

    print(f"Running {num_games} simulations...")

    for i in range(num_games):
        if (i + 1) % max(1, num_games // 10) == 0:
            print(f"Completed {i + 1}/{num_games} games...")

        winner, _ = play_game(bot, bot)

        if winner == Side.BLACK:
            black_wins += 1
        elif winner == Side.WHITE:
            white_wins += 1
        else:
            ties += 1

    print(f"\nSimulation Results ({num_games} games):")
    print(f"Black wins: {black_wins} ({black_wins/num_games*100:.1f}%)")
    print(f"White wins: {white_wins} ({white_wins/num_games*100:.1f}%)")
    print(f"Ties: {ties} ({ties/num_games*100:.1f}%)")

    return {
        "black_wins": black_wins,
        "white_wins": white_wins,
        "ties": ties,
        "total_games": num_games,
    }


HUMAN_CHOICES = {"black": Side.BLACK, "white": Side.WHITE, "none": None}


def main(argv=None):
    parser = argparse.ArgumentParser(description="Reversi - Terminal Edition")
    parser.add_argument(
        "--human",
        choices=sorted(HUMAN_CHOICES),
        default="black",
        help="Side played by the human; 'none' watches computer versus computer (default: black)",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=COMPUTER_MOVE_DELAY,
        help=f"Seconds the computer waits before moving (default: {COMPUTER_MOVE_DELAY})",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for the computer opponent")
    parser.add_argument(
        "--simulate",
        action="store_true",
        help="Run in simulation mode (computer vs computer, no UI)",
    )
    parser.add_argument(
        "--games",
        type=int,
        default=1000,
        help="Number of games to simulate (default: 1000, only used with --simulate)",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, WARNING, ...)")
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    rng = random.Random(args.seed)

    if args.simulate:
        if args.games <= 0:
            print("Number of games must be positive")
            sys.exit(1)
        run_simulations(args.games, rng=rng)
        return

    if args.delay < 0:
        parser.error("--delay must not be negative")

    game = ReversiTerminal(human=HUMAN_CHOICES[args.human], bot=CornerEdgeBot(rng=rng), delay=args.delay)

    try:
        while game.play_game():
            print("\nPlay again? (y/n): ", end="", flush=True)
            key = read_key()
            print(key)
            if key.lower() != "y":
                break
            game.restart()
    except KeyboardInterrupt:
        pass
    print("\nThanks for playing!")


if __name__ == "__main__":
    main()
