"""Move definitions and round resolution."""

from enum import Enum


class Move(Enum):
    """The three choices a participant can play each round."""

    ROCK = "rock"
    PAPER = "paper"
    SCISSORS = "scissors"

    def __str__(self) -> str:
        return self.value.upper()

    def beats(self, other: "Move") -> bool:
        """Return True if this move defeats the other one."""
        return _BEATS[self] is other


class RoundOutcome(Enum):
    """Result of a single round, seen from the first participant."""

    FIRST = "first"
    SECOND = "second"
    TIE = "tie"


# Each move defeats exactly one other move
_BEATS: dict[Move, Move] = {
    Move.ROCK: Move.SCISSORS,
    Move.PAPER: Move.ROCK,
    Move.SCISSORS: Move.PAPER,
}

# Accepted tokens: single-letter shorthand and the full word
_TOKENS: dict[str, Move] = {}
for _move in Move:
    _TOKENS[_move.value] = _move
    _TOKENS[_move.value[0]] = _move


def parse_move(text: str) -> Move | None:
    """Parse a participant's reply into a Move.

    Args:
        text: Raw reply line

    Returns:
        The matching Move, or None if the reply is not a recognised token
    """
    return _TOKENS.get(text.strip().lower())


def resolve_round(first: Move, second: Move) -> RoundOutcome:
    """Decide a round between two moves."""
    if first is second:
        return RoundOutcome.TIE
    if first.beats(second):
        return RoundOutcome.FIRST
    return RoundOutcome.SECOND
