"""Line protocol text sent from the coordinator to participants.

The wire format is newline-delimited UTF-8. Clients reply with a single
token per line; everything the server says is informational text, so all
of it is built here to keep the wording in one place.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rpsarena.game.moves import Move

AFFIRMATIVE_TOKEN = "y"


def welcome() -> str:
    return "Welcome to the Rock Paper Scissors Arena!\nEnter your name:"


def greeting(name: str) -> str:
    return f"Hello, {name}!"


def pool_notice() -> str:
    return "\n=== You are in the lobby. Waiting for another player... ==="


def match_start(first: str, second: str) -> str:
    return f"\n=== Match start: {first} vs {second} ==="


def round_header(round_number: int) -> str:
    return f"\n-- ROUND {round_number} --"


def move_prompt(name: str) -> str:
    return f"{name}, enter your move [rock/paper/scissors]:"


def invalid_move() -> str:
    return "Invalid move. Please enter rock/paper/scissors (or r/p/s)."


def round_tie(first_move: "Move", second_move: "Move") -> str:
    return f"Tie! ({first_move} vs {second_move})"


def round_won(winner: str, winning_move: "Move", losing_move: "Move") -> str:
    return f"{winner} wins this round! ({winning_move} beats {losing_move})"


def score_line(first: str, first_wins: int, second_wins: int, second: str) -> str:
    return f"Score: {first} {first_wins} - {second_wins} {second}"


def match_winner(name: str) -> str:
    return f"\n>>> {name} WINS THE MATCH! <<<"


def rematch_prompt() -> str:
    return "Play again? (y/n):"


def new_match() -> str:
    return "\nStarting a new match!"


def farewell() -> str:
    return "Goodbye! Back to the lobby."


def opponent_declined(name: str) -> str:
    return f"{name} does not want a rematch."


def closing_notice() -> str:
    return "Match over. Both players return to the lobby."


def opponent_disconnected(name: str) -> str:
    return f"{name} disconnected. The match is cancelled."


def is_affirmative(answer: str) -> bool:
    """Check if a yes/no reply means yes."""
    return answer.strip().lower().startswith(AFFIRMATIVE_TOKEN)
