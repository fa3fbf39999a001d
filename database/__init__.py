"""
Database package for Tourna system.
"""

from .database_manager import DatabaseManager
from .tournament_manager import TournamentManager
from .player_manager import PlayerManager
from .match_manager import MatchManager

__all__ = ['DatabaseManager', 'TournamentManager', 'PlayerManager', 'MatchManager']
