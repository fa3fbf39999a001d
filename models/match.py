"""
Match and round data models for the Tourna system.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from .tournament import parse_timestamp


class MatchStatus(str, Enum):
    """Match lifecycle states. A match only ever moves from pending to completed."""
    PENDING = "pending"
    COMPLETED = "completed"


@dataclass
class Match:
    """Database record for a match between two players."""
    id: int
    tournament_id: str
    match_number: int
    player1_id: str
    player2_id: str
    winner_id: Optional[str] = None
    status: str = MatchStatus.PENDING.value
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row) -> "Match":
        return cls(
            id=row["id"],
            tournament_id=row["tournament_id"],
            match_number=row["match_number"],
            player1_id=row["player1_id"],
            player2_id=row["player2_id"],
            # Empty strings from older rows mean "no winner"
            winner_id=row["winner_id"] or None,
            status=row["match_status"],
            created_at=parse_timestamp(row["created_at"]),
        )

    @property
    def players(self) -> Tuple[str, str]:
        return self.player1_id, self.player2_id

    @property
    def is_completed(self) -> bool:
        return self.status == MatchStatus.COMPLETED.value

    def has_player(self, player_id: str) -> bool:
        return player_id in self.players

    def opponent_of(self, player_id: str) -> Optional[str]:
        """Return the other player of the match, or None if player_id is not in it."""
        if player_id == self.player1_id:
            return self.player2_id
        if player_id == self.player2_id:
            return self.player1_id
        return None

    @property
    def loser_id(self) -> Optional[str]:
        if self.winner_id is None:
            return None
        return self.opponent_of(self.winner_id)


@dataclass
class Round:
    """Database record for one recorded round of a match."""
    match_id: int
    round_number: int
    winner_id: str
    id: Optional[int] = None
    recorded_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row) -> "Round":
        return cls(
            id=row["id"],
            match_id=row["match_id"],
            round_number=row["round_number"],
            winner_id=row["winner_id"],
            recorded_at=parse_timestamp(row["recorded_at"]),
        )
