"""
Tournament lifecycle management for the Tourna database system.
"""

import logging
from typing import List, Optional

from models.tournament import Tournament, TournamentStatus, is_forward_transition
from .errors import InvalidStatusError, InvalidTransitionError

logger = logging.getLogger(__name__)


class TournamentManager:
    """Manages tournament creation and status transitions."""

    def __init__(self, database_manager):
        self.db_manager = database_manager

    def create_tournament(self, tournament_id: str, name: str) -> Tournament:
        """Open a new tournament. Raises ConflictError if the id is taken."""
        tournament = self.db_manager.create_tournament(tournament_id, name)
        logger.info(f"Created tournament {tournament_id} ('{name}')")
        return tournament

    def get_tournament(self, tournament_id: str) -> Optional[Tournament]:
        return self.db_manager.get_tournament(tournament_id)

    def list_tournaments(self) -> List[Tournament]:
        return self.db_manager.list_tournaments()

    def update_status(self, tournament_id: str, status, force: bool = False) -> bool:
        """
        Move a tournament to a new status.

        The status must be one of open, in_progress or completed. Moving
        backwards in the lifecycle raises InvalidTransitionError unless
        force is set. Returns False if no such tournament exists.
        """
        try:
            target = TournamentStatus.parse(status)
        except ValueError:
            logger.warning(f"Rejected unknown status '{status}' for tournament {tournament_id}")
            raise InvalidStatusError(f"Unknown tournament status: {status!r}")

        with self.db_manager.transaction():
            tournament = self.db_manager.get_tournament(tournament_id)
            if tournament is None:
                logger.debug(f"Status update for unknown tournament {tournament_id}")
                return False

            current = tournament.lifecycle_status
            if current is not None and not force and not is_forward_transition(current, target):
                logger.warning(
                    f"Rejected status change {current.value} -> {target.value} for tournament {tournament_id}"
                )
                raise InvalidTransitionError(
                    f"Cannot move tournament {tournament_id} from {current.value} to {target.value}"
                )

            updated = self.db_manager.update_tournament_status(tournament_id, target)
        if updated:
            logger.info(f"Tournament {tournament_id} status set to {target.value}")
        return updated

    def start_tournament(self, tournament_id: str) -> bool:
        return self.update_status(tournament_id, TournamentStatus.IN_PROGRESS)

    def complete_tournament(self, tournament_id: str) -> bool:
        return self.update_status(tournament_id, TournamentStatus.COMPLETED)
