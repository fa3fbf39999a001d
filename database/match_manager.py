"""
Match and round management for the Tourna database system.

A match starts pending and is completed exactly once by committing a
winner. Rounds are appended while the match is pending and form the audit
trail of how the match was played.
"""

import logging
from collections import Counter
from typing import Dict, List, Optional

from models.match import Match, Round
from .errors import (
    AlreadyCompletedError,
    ConflictError,
    ConstraintViolationError,
    InvalidWinnerError,
    MatchCompletedError,
    NotFoundError,
)

logger = logging.getLogger(__name__)


class MatchManager:
    """Manages match creation, round recording and winner commits."""

    def __init__(self, database_manager):
        self.db_manager = database_manager

    def create_match(self, tournament_id: str, match_number: int,
                     player1_id: str, player2_id: str) -> Match:
        """Create a pending match between two distinct players registered in the tournament."""
        if player1_id == player2_id:
            raise ConstraintViolationError(f"A match needs two different players, got {player1_id} twice")

        with self.db_manager.transaction():
            for player_id in (player1_id, player2_id):
                if not self.db_manager.is_player_registered(tournament_id, player_id):
                    logger.warning(f"Match {match_number} rejected: {player_id} is not in {tournament_id}")
                    raise ConstraintViolationError(
                        f"Player {player_id} is not registered in tournament {tournament_id}"
                    )
            match_id = self.db_manager.create_match(tournament_id, match_number, player1_id, player2_id)
            match = self.db_manager.get_match(match_id)

        logger.info(f"Created match {match_number} (id {match_id}) in {tournament_id}: {player1_id} vs {player2_id}")
        return match

    def get_match(self, match_id: int) -> Optional[Match]:
        return self.db_manager.get_match(match_id)

    def list_matches(self, tournament_id: str) -> List[Match]:
        return self.db_manager.list_matches(tournament_id)

    def list_rounds(self, match_id: int) -> List[Round]:
        return self.db_manager.list_rounds(match_id)

    def _require_match(self, match_id: int) -> Match:
        match = self.db_manager.get_match(match_id)
        if match is None:
            raise NotFoundError(f"Match {match_id} does not exist")
        return match

    def record_round(self, match_id: int, round_number: int, winner_id: str) -> Round:
        """
        Append a round result to a pending match.

        The winner must be one of the match's players and the round number
        must not have been recorded for this match yet.
        """
        with self.db_manager.transaction():
            match = self._require_match(match_id)
            if match.is_completed:
                logger.warning(f"Round {round_number} rejected: match {match_id} is already completed")
                raise MatchCompletedError(f"Match {match_id} is completed, no more rounds can be recorded")
            if not match.has_player(winner_id):
                logger.warning(f"Round {round_number} rejected: {winner_id} is not playing in match {match_id}")
                raise InvalidWinnerError(f"{winner_id} is not a player in match {match_id}")
            if any(r.round_number == round_number for r in self.db_manager.list_rounds(match_id)):
                logger.warning(f"Round {round_number} of match {match_id} was already recorded")
                raise ConflictError(f"Round {round_number} of match {match_id} is already recorded")
            recorded = self.db_manager.record_round(match_id, round_number, winner_id)

        logger.info(f"Recorded round {round_number} of match {match_id}: won by {winner_id}")
        return recorded

    def set_winner(self, match_id: int, winner_id: str) -> Match:
        """Commit the winner of a pending match. A completed match cannot be changed."""
        with self.db_manager.transaction():
            match = self._check_winner(match_id, winner_id)
            self.db_manager.set_match_winner(match_id, winner_id)
            match = self.db_manager.get_match(match_id)

        logger.info(f"Match {match_id} completed, winner {winner_id}")
        return match

    def complete_match(self, match_id: int, winner_id: str, eliminate_loser: bool = True) -> Match:
        """Commit the winner and, in the same transaction, eliminate the loser."""
        with self.db_manager.transaction():
            match = self._check_winner(match_id, winner_id)
            self.db_manager.set_match_winner(match_id, winner_id)
            loser_id = match.opponent_of(winner_id)
            if eliminate_loser and not self.db_manager.eliminate_player(match.tournament_id, loser_id):
                logger.warning(f"Match {match_id} not completed: loser {loser_id} is not in {match.tournament_id}")
                raise ConstraintViolationError(
                    f"Player {loser_id} is not registered in tournament {match.tournament_id}"
                )
            match = self.db_manager.get_match(match_id)

        if eliminate_loser:
            logger.info(f"Match {match_id} completed, winner {winner_id}, {loser_id} eliminated")
        else:
            logger.info(f"Match {match_id} completed, winner {winner_id}")
        return match

    def _check_winner(self, match_id: int, winner_id: str) -> Match:
        match = self._require_match(match_id)
        if match.is_completed:
            logger.warning(f"Match {match_id} already completed with winner {match.winner_id}")
            raise AlreadyCompletedError(f"Match {match_id} already has winner {match.winner_id}")
        if not match.has_player(winner_id):
            logger.warning(f"Rejected winner {winner_id} for match {match_id}")
            raise InvalidWinnerError(f"{winner_id} is not a player in match {match_id}")
        return match

    def round_tally(self, match_id: int) -> Optional[Dict[str, int]]:
        """Count round wins per player. Both players are always present, None for a missing match."""
        match = self.db_manager.get_match(match_id)
        if match is None:
            return None
        wins = Counter(r.winner_id for r in self.db_manager.list_rounds(match_id))
        return {player_id: wins.get(player_id, 0) for player_id in match.players}

    def winner_from_rounds(self, match_id: int) -> Optional[str]:
        """The player with strictly more recorded round wins, or None on a tie or a missing match."""
        tally = self.round_tally(match_id)
        if not tally:
            return None
        ranked = sorted(tally.items(), key=lambda item: item[1], reverse=True)
        if ranked[0][1] == 0:
            return None
        if len(ranked) > 1 and ranked[0][1] == ranked[1][1]:
            return None
        return ranked[0][0]
