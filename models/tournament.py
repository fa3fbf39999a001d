"""
Tournament data models for the Tourna system.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class TournamentStatus(str, Enum):
    """Tournament lifecycle states."""
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, value) -> "TournamentStatus":
        """Return the status for a string value, raising ValueError if unknown."""
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())


# Position of each status in the lifecycle. Moving to a lower rank is a regression.
_STATUS_RANK = {
    TournamentStatus.OPEN: 0,
    TournamentStatus.IN_PROGRESS: 1,
    TournamentStatus.COMPLETED: 2,
}


def is_forward_transition(current: TournamentStatus, target: TournamentStatus) -> bool:
    """Check whether moving from current to target keeps or advances the lifecycle."""
    return _STATUS_RANK[target] >= _STATUS_RANK[current]


def parse_timestamp(value) -> Optional[datetime]:
    """Parse a stored timestamp column into a datetime."""
    if value is None or isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        return None


@dataclass
class Tournament:
    """Database record for a tournament."""
    tournament_id: str
    name: str
    status: str = TournamentStatus.OPEN.value
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row) -> "Tournament":
        return cls(
            tournament_id=row["tournament_id"],
            name=row["tournament_name"],
            status=row["status"],
            created_at=parse_timestamp(row["created_at"]),
        )

    @property
    def lifecycle_status(self) -> Optional[TournamentStatus]:
        """The status as an enum, or None if the stored value is unknown."""
        try:
            return TournamentStatus.parse(self.status)
        except ValueError:
            return None
