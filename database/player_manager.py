"""
Player management for the Tourna database system.
"""

import logging
from typing import List, Optional

from models.player import Player
from models.tournament import TournamentStatus
from .errors import ConflictError, ConstraintViolationError, RegistrationClosedError

logger = logging.getLogger(__name__)


class PlayerManager:
    """Manages player registration, seeding and elimination within tournaments."""

    def __init__(self, database_manager):
        self.db_manager = database_manager

    def register(self, tournament_id: str, discord_user_id: str,
                 discord_username: str, invite_link: str) -> Player:
        """
        Register a player into a tournament.

        The unique (tournament, user) constraint decides duplicates, so two
        racing registrations cannot both succeed. Raises ConflictError for a
        duplicate, RegistrationClosedError if the tournament is no longer
        open, and ConstraintViolationError if the tournament does not exist.
        """
        with self.db_manager.transaction():
            tournament = self.db_manager.get_tournament(tournament_id)
            if tournament is None:
                logger.warning(f"Registration for unknown tournament {tournament_id}")
                raise ConstraintViolationError(f"Tournament {tournament_id} does not exist")
            if tournament.status != TournamentStatus.OPEN.value:
                logger.warning(
                    f"Registration for {discord_username} rejected: tournament {tournament_id} is {tournament.status}"
                )
                raise RegistrationClosedError(
                    f"Tournament {tournament_id} is {tournament.status}, registration is closed"
                )
            try:
                player = self.db_manager.register_player(
                    tournament_id, discord_user_id, discord_username, invite_link
                )
            except ConflictError:
                logger.info(f"Player {discord_username} is already registered in {tournament_id}")
                raise

        logger.info(f"Registered player {discord_username} ({discord_user_id}) in {tournament_id}")
        return player

    def is_registered(self, tournament_id: str, discord_user_id: str) -> bool:
        return self.db_manager.is_player_registered(tournament_id, discord_user_id)

    def assign_seed(self, tournament_id: str, discord_user_id: str, seed_number: int) -> bool:
        """Overwrite a player's seed. Returns False if the player is not registered."""
        if isinstance(seed_number, bool) or not isinstance(seed_number, int) or seed_number < 1:
            raise ValueError(f"Seed number must be a positive integer, got {seed_number!r}")

        updated = self.db_manager.set_seed(tournament_id, discord_user_id, seed_number)
        if updated:
            logger.info(f"Seeded player {discord_user_id} at {seed_number} in {tournament_id}")
        else:
            logger.debug(f"No player {discord_user_id} in {tournament_id} to seed")
        return updated

    def eliminate(self, tournament_id: str, discord_user_id: str) -> bool:
        """Mark a player eliminated. Idempotent; there is no way to undo it."""
        updated = self.db_manager.eliminate_player(tournament_id, discord_user_id)
        if updated:
            logger.info(f"Player {discord_user_id} eliminated from {tournament_id}")
        else:
            logger.debug(f"No player {discord_user_id} in {tournament_id} to eliminate")
        return updated

    def lookup(self, tournament_id: str, discord_user_id: str) -> Optional[Player]:
        return self.db_manager.get_player(tournament_id, discord_user_id)

    def list_for_tournament(self, tournament_id: str) -> List[Player]:
        """Get all players of a tournament, unseeded first, then by seed."""
        return self.db_manager.list_players(tournament_id)

    def list_active(self, tournament_id: str) -> List[Player]:
        """Get the players of a tournament that have not been eliminated."""
        return [player for player in self.list_for_tournament(tournament_id) if not player.is_eliminated]
