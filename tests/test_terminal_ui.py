import random

from bots import CornerEdgeBot
from reversi import Board, GameState, Side, Status, new_game
from terminal_ui import (
    ReversiTerminal,
    describe_result,
    final_message,
    flush_input,
    format_record,
    main,
    render_board,
    side_label,
)


def test_side_label_is_role_aware():
    assert side_label(Side.BLACK) == "BLACK"
    assert side_label(Side.BLACK, Side.BLACK) == "BLACK (you)"
    assert side_label(Side.WHITE, Side.BLACK) == "WHITE (computer)"


def test_render_board_marks_legal_moves_and_last_move():
    game = new_game()
    text = render_board(game)
    lines = text.splitlines()
    assert lines[0].split() == list("ABCDEFGH")
    # Row 3 holds D3, which is legal for BLACK.
    assert lines[2 + 2 * 2].startswith("3 │")
    assert " · " in lines[2 + 2 * 2]
    assert text.count("·") == 4

    game.apply((2, 3), Side.BLACK)
    text = render_board(game, cursor=(0, 0))
    assert "*○ " in text
    assert text.splitlines()[2].startswith("1 │[ ]")


def test_format_record():
    game = new_game()
    game.apply((2, 3), Side.BLACK)
    assert format_record(game.history[0]) == "#1 BLACK D3 (flipped 1)"


def test_describe_results():
    game = new_game()
    result = game.apply((0, 0), Side.BLACK)
    assert "can't place" in describe_result(result, Side.BLACK, (0, 0), game, Side.BLACK)

    result = game.apply((2, 4), Side.WHITE)
    assert describe_result(result, Side.WHITE, (2, 4), game, Side.BLACK) == "It is BLACK (you)'s turn."

    result = game.apply((2, 3), Side.BLACK)
    assert describe_result(result, Side.BLACK, (2, 3), game, Side.BLACK) == (
        "BLACK (you) played D3. WHITE (computer) to move."
    )


def test_final_message():
    game = GameState.from_board(Board.from_rows(["BBBBBBBB", "WWWWWWWW"] * 4))
    assert final_message(game) == "Game over: BLACK 32 - WHITE 32. It's a tie!"


def test_terminal_session_with_computer_turn():
    ui = ReversiTerminal(human=Side.BLACK, bot=CornerEdgeBot(rng=random.Random(9)), delay=0)
    assert ui.is_human_turn()
    assert ui.computer_turn() is None

    result = ui.submit((3, 3), Side.BLACK)
    assert result.status == Status.ILLEGAL_MOVE
    assert len(ui.log) == 1

    ui.submit((2, 3), Side.BLACK)
    assert not ui.is_human_turn()
    result = ui.computer_turn()
    assert result.accepted
    assert ui.log[1] == "#1 BLACK D3 (flipped 1)"
    assert ui.log[2].startswith("#2 WHITE ")
    assert ui.is_human_turn()

    ui.restart()
    assert ui.state.move_number == 0
    assert ui.log == ["Game started: BLACK to move."]


def test_computer_versus_computer_runs_to_the_end():
    ui = ReversiTerminal(human=None, bot=CornerEdgeBot(rng=random.Random(11)), delay=0)
    while not ui.state.game_over:
        assert ui.computer_turn().accepted
    assert ui.log[-1].startswith("Game over:")


def test_simulate_cli(capsys):
    main(["--simulate", "--games", "4", "--seed", "2"])
    out = capsys.readouterr().out
    assert "Simulation Results (4 games)" in out


PASS_ROWS = ["BW......"] + ["........"] * 6 + ["BW......"]


def test_pass_message_and_log_entry_are_role_aware():
    ui = ReversiTerminal(human=Side.BLACK, bot=CornerEdgeBot(rng=random.Random(0)), delay=0)
    ui.state = GameState.from_board(Board.from_rows(PASS_ROWS), Side.BLACK)

    result = ui.submit((0, 2), Side.BLACK)

    assert result.status == Status.PASSED
    expected = "WHITE (computer) has no legal move and passes. BLACK (you) moves again."
    assert ui.message == expected
    assert ui.log[-2] == "#1 BLACK C1 (flipped 1)"
    assert ui.log[-1] == expected
    assert ui.is_human_turn()


def test_move_after_game_over_is_reported():
    ui = ReversiTerminal(human=Side.BLACK, delay=0)
    ui.state = GameState.from_board(Board.from_rows(["BBBBBBBB"] * 8))
    log_before = list(ui.log)

    result = ui.submit((0, 0), Side.BLACK)

    assert result.status == Status.GAME_ALREADY_OVER
    assert ui.message == "The game is over. Press r to start a new one."
    assert ui.log == log_before


def test_flush_input_skips_non_terminal_stdin(monkeypatch):
    import io

    monkeypatch.setattr("sys.stdin", io.StringIO("\r"))
    assert flush_input() is False


def test_computer_turn_discards_keys_typed_while_waiting(monkeypatch):
    calls = []
    monkeypatch.setattr("terminal_ui.flush_input", lambda: calls.append("flush"))
    ui = ReversiTerminal(human=Side.BLACK, bot=CornerEdgeBot(rng=random.Random(4)), delay=0)
    ui.submit((2, 3), Side.BLACK)

    assert ui.computer_turn().accepted
    assert calls == ["flush"]
