import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, List, NamedTuple, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

BOARD_SIZE = 8

DIRECTIONS = [
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
]

Position = Tuple[int, int]


class Cell(Enum):
    EMPTY = 0
    BLACK = 1
    WHITE = 2


class Side(Enum):
    BLACK = 1
    WHITE = 2

    def opposite(self) -> "Side":
        return Side.WHITE if self == Side.BLACK else Side.BLACK

    @property
    def cell(self) -> Cell:
        return Cell(self.value)


class Status(Enum):
    CONTINUED = "continued"
    PASSED = "passed"
    FINISHED = "finished"
    ILLEGAL_MOVE = "illegal_move"
    GAME_ALREADY_OVER = "game_already_over"


class IllegalMove(ValueError):
    """Raised by replay() when a placement in the sequence is rejected."""


class DiscCounts(NamedTuple):
    black: int
    white: int


@dataclass(frozen=True)
class LastMove:
    side: Side
    pos: Position
    captured: FrozenSet[Position]


@dataclass(frozen=True)
class MoveRecord:
    number: int
    side: Side
    pos: Position
    captured: FrozenSet[Position]

    @property
    def notation(self) -> str:
        return to_notation(self.pos)


@dataclass(frozen=True)
class ApplyResult:
    status: Status
    side: Optional[Side] = None
    passed: Optional[Side] = None
    winner: Optional[Side] = None
    captured: FrozenSet[Position] = frozenset()

    @property
    def accepted(self) -> bool:
        return self.status in (Status.CONTINUED, Status.PASSED, Status.FINISHED)


_CELL_CHARS = {Cell.EMPTY: ".", Cell.BLACK: "B", Cell.WHITE: "W"}
_CHAR_CELLS = {char: cell for cell, char in _CELL_CHARS.items()}


def to_notation(pos: Position) -> str:
    row, col = pos
    return f"{chr(ord('A') + col)}{row + 1}"


def from_notation(text: str) -> Position:
    text = text.strip().upper()
    if len(text) != 2 or not text[1].isdigit():
        raise ValueError(f"Bad square notation: {text!r}")
    pos = (int(text[1]) - 1, ord(text[0]) - ord("A"))
    if not Board.in_bounds(pos):
        raise ValueError(f"Square off the board: {text!r}")
    return pos


class Board:
    def __init__(self):
        self.cells = [[Cell.EMPTY for _ in range(BOARD_SIZE)] for _ in range(BOARD_SIZE)]

    @classmethod
    def initial(cls) -> "Board":
        board = cls()
        mid = BOARD_SIZE // 2
        board.set((mid - 1, mid - 1), Cell.WHITE)
        board.set((mid - 1, mid), Cell.BLACK)
        board.set((mid, mid - 1), Cell.BLACK)
        board.set((mid, mid), Cell.WHITE)
        return board

    @classmethod
    def from_rows(cls, rows: Sequence[str]) -> "Board":
        """Build a board from eight strings of ``B``, ``W`` and ``.``."""
        if len(rows) != BOARD_SIZE or any(len(row) != BOARD_SIZE for row in rows):
            raise ValueError(f"Expected {BOARD_SIZE} rows of {BOARD_SIZE} cells")
        board = cls()
        for r, row in enumerate(rows):
            for c, char in enumerate(row):
                if char not in _CHAR_CELLS:
                    raise ValueError(f"Unknown cell {char!r} at {to_notation((r, c))}")
                board.cells[r][c] = _CHAR_CELLS[char]
        return board

    @staticmethod
    def in_bounds(pos: Position) -> bool:
        row, col = pos
        return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE

    def get(self, pos: Position) -> Cell:
        row, col = pos
        return self.cells[row][col]

    def set(self, pos: Position, cell: Cell) -> None:
        row, col = pos
        self.cells[row][col] = cell

    def count(self, cell: Cell) -> int:
        return sum(row.count(cell) for row in self.cells)

    def copy(self) -> "Board":
        board = Board()
        board.cells = [[cell for cell in row] for row in self.cells]
        return board

    def to_rows(self) -> List[str]:
        return ["".join(_CELL_CHARS[cell] for cell in row) for row in self.cells]

    def __eq__(self, other):
        if not isinstance(other, Board):
            return NotImplemented
        return self.cells == other.cells

    def __repr__(self):
        return f"Board({self.to_rows()!r})"


def _collect_in_direction(board: Board, pos: Position, dr: int, dc: int, side: Side) -> List[Position]:
    opponent = side.opposite().cell
    captured = []
    r, c = pos[0] + dr, pos[1] + dc

    while Board.in_bounds((r, c)) and board.get((r, c)) == opponent:
        captured.append((r, c))
        r += dr
        c += dc

    # The run only counts when an own disc closes it off.
    if not Board.in_bounds((r, c)) or board.get((r, c)) != side.cell:
        return []
    return captured


def flippable_from(board: Board, pos: Position, side: Side) -> FrozenSet[Position]:
    if board.get(pos) != Cell.EMPTY:
        return frozenset()

    tiles = set()
    for dr, dc in DIRECTIONS:
        tiles.update(_collect_in_direction(board, pos, dr, dc, side))
    return frozenset(tiles)


def legal_moves(board: Board, side: Side) -> List[Position]:
    moves = []
    for row in range(BOARD_SIZE):
        for col in range(BOARD_SIZE):
            if board.cells[row][col] != Cell.EMPTY:
                continue
            if flippable_from(board, (row, col), side):
                moves.append((row, col))
    return moves


def _winner_by_count(board: Board) -> Optional[Side]:
    black_count = board.count(Cell.BLACK)
    white_count = board.count(Cell.WHITE)
    if black_count > white_count:
        return Side.BLACK
    elif white_count > black_count:
        return Side.WHITE
    return None


@dataclass
class GameState:
    """One in-memory game session.

    The state is only ever changed by :meth:`apply` and :meth:`restart`, so
    ``legal_moves`` is non-empty exactly while the game is in progress.
    """

    board: Board = field(default_factory=Board.initial)
    current_side: Side = Side.BLACK
    game_over: bool = False
    winner: Optional[Side] = None
    legal_moves: List[Position] = field(default_factory=list)
    move_number: int = 0
    last_move: Optional[LastMove] = None
    history: List[MoveRecord] = field(default_factory=list)

    def __post_init__(self):
        if not self.game_over and not self.legal_moves:
            self._resolve_turn(self.current_side)

    @classmethod
    def from_board(cls, board: Board, side: Side = Side.BLACK) -> "GameState":
        """Start from an arbitrary position with ``side`` to move.

        If ``side`` cannot move the turn passes, and if neither side can
        move the state comes back already finished.
        """
        return cls(board=board.copy(), current_side=side)

    def restart(self) -> None:
        self.board = Board.initial()
        self.current_side = Side.BLACK
        self.game_over = False
        self.winner = None
        self.move_number = 0
        self.last_move = None
        self.history = []
        self.legal_moves = legal_moves(self.board, self.current_side)
        logger.info("New game started")

    def cell_at(self, pos: Position) -> Cell:
        return self.board.get(pos)

    def disc_counts(self) -> DiscCounts:
        return DiscCounts(self.board.count(Cell.BLACK), self.board.count(Cell.WHITE))

    def _resolve_turn(self, side: Side) -> Status:
        """Hand the turn to ``side`` if it can move, else to its opponent, else end."""
        moves = legal_moves(self.board, side)
        if moves:
            self.current_side = side
            self.legal_moves = moves
            return Status.CONTINUED

        other_moves = legal_moves(self.board, side.opposite())
        if other_moves:
            logger.info("%s has no legal move and passes", side.name)
            self.current_side = side.opposite()
            self.legal_moves = other_moves
            return Status.PASSED

        self.game_over = True
        self.legal_moves = []
        self.winner = _winner_by_count(self.board)
        counts = self.disc_counts()
        logger.info(
            "Game over: BLACK %d - WHITE %d, winner %s",
            counts.black,
            counts.white,
            self.winner.name if self.winner else "none (draw)",
        )
        return Status.FINISHED

    def apply(self, pos: Position, side: Side) -> ApplyResult:
        if self.game_over:
            return ApplyResult(Status.GAME_ALREADY_OVER, winner=self.winner)

        if side != self.current_side or tuple(pos) not in self.legal_moves:
            logger.debug("Rejected %s at %s", side.name, pos)
            return ApplyResult(Status.ILLEGAL_MOVE, side=self.current_side)

        pos = tuple(pos)
        captured = flippable_from(self.board, pos, side)
        self.board.set(pos, side.cell)
        for tile in captured:
            self.board.set(tile, side.cell)

        self.move_number += 1
        self.last_move = LastMove(side, pos, captured)
        self.history.append(MoveRecord(self.move_number, side, pos, captured))
        logger.debug(
            "#%d %s %s flipped %d", self.move_number, side.name, to_notation(pos), len(captured)
        )

        status = self._resolve_turn(side.opposite())
        if status == Status.FINISHED:
            return ApplyResult(status, winner=self.winner, captured=captured)
        if status == Status.PASSED:
            return ApplyResult(status, side=side, passed=side.opposite(), captured=captured)
        return ApplyResult(status, side=self.current_side, captured=captured)


def new_game() -> GameState:
    return GameState()


def apply(state: GameState, pos: Position, side: Side) -> ApplyResult:
    return state.apply(pos, side)


def replay(positions: Iterable[Position], start: Optional[GameState] = None) -> GameState:
    """Play ``positions`` in order, each by whichever side is to move."""
    state = new_game() if start is None else GameState.from_board(start.board, start.current_side)
    for pos in positions:
        result = state.apply(pos, state.current_side)
        if not result.accepted:
            raise IllegalMove(f"Move {state.move_number + 1} at {pos} rejected: {result.status.value}")
    return state
