"""Waiting pool and matchmaking."""

from rpsarena.lobby.matchmaker import Matchmaker
from rpsarena.lobby.pool import WaitingPool

__all__ = ["Matchmaker", "WaitingPool"]
