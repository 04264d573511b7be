"""Best-of-N scoring and session phases."""

from dataclasses import dataclass
from enum import Enum

from rpsarena.game.moves import RoundOutcome

DEFAULT_WINS_NEEDED = 2


class SessionPhase(Enum):
    """Lifecycle phase of a session."""

    ANNOUNCE = "announce"  # Match start is being broadcast
    ROUND_IN_PROGRESS = "round_in_progress"  # Collecting moves
    MATCH_DECIDED = "match_decided"  # One side reached the winning score
    REMATCH_PROMPT = "rematch_prompt"  # Asking both players to play again
    REMATCH_ANNOUNCE = "rematch_announce"  # Both agreed, new match about to start
    TERMINATED = "terminated"  # Session is over


@dataclass
class MatchScore:
    """Running score of one best-of-N match.

    Attributes:
        wins_needed: Round wins required to take the match
        first: Round wins of the first participant
        second: Round wins of the second participant
        round_number: Number of the round about to be played (starts at 1)
    """

    wins_needed: int = DEFAULT_WINS_NEEDED
    first: int = 0
    second: int = 0
    round_number: int = 1

    def record(self, outcome: RoundOutcome) -> None:
        """Apply a round outcome. The round number advances even on ties."""
        if outcome is RoundOutcome.FIRST:
            self.first += 1
        elif outcome is RoundOutcome.SECOND:
            self.second += 1
        self.round_number += 1

    @property
    def is_decided(self) -> bool:
        """Check if either side has reached the winning score."""
        return self.first >= self.wins_needed or self.second >= self.wins_needed

    @property
    def winner(self) -> RoundOutcome | None:
        """Get the match winner, or None while the match is still running."""
        if self.first >= self.wins_needed:
            return RoundOutcome.FIRST
        if self.second >= self.wins_needed:
            return RoundOutcome.SECOND
        return None

    @property
    def rounds_played(self) -> int:
        return self.round_number - 1

    def reset(self) -> None:
        """Start over for a rematch."""
        self.first = 0
        self.second = 0
        self.round_number = 1
