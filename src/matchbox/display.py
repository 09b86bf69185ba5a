"""Console formatting for boards and results."""
from .board import Board
from .game import Game, GameState

_RULE = "+---+---+---+"


def format_board(board: Board) -> str:
    marks = [str(m) for m in board.render()]
    lines = [_RULE]
    for r in range(3):
        lines.append("| " + " | ".join(marks[3 * r:3 * r + 3]) + " |")
        lines.append(_RULE)
    return "\n".join(lines)


def format_result(game: Game) -> str:
    if game.state is GameState.WON:
        return f"Player {game.winner()} wins!"
    if game.state is GameState.DRAWN:
        return "Draw!"
    if game.state is GameState.EXHAUSTED:
        return "No moves left!"
    return "In progress"
