"""
Models package for Tourna system.

This package contains all data models and dataclasses used throughout the system.
"""

from .tournament import Tournament, TournamentStatus, is_forward_transition
from .player import Player
from .match import Match, MatchStatus, Round

__all__ = [
    'Tournament', 'TournamentStatus', 'is_forward_transition',
    'Player', 'Match', 'MatchStatus', 'Round',
]
