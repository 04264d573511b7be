"""Game rules for Rock Paper Scissors Arena.

This module provides the move rules, the best-of-N scoring and the session
state machine that drives a match between two connected participants.
"""

from rpsarena.game.match import MatchScore, SessionPhase
from rpsarena.game.moves import Move, RoundOutcome, parse_move, resolve_round
from rpsarena.game.session import Session

__all__ = [
    "MatchScore",
    "Move",
    "RoundOutcome",
    "Session",
    "SessionPhase",
    "parse_move",
    "resolve_round",
]
