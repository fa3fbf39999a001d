"""
Player data models for the Tourna system.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .tournament import parse_timestamp


@dataclass
class Player:
    """Database record for a player registered in a tournament."""
    tournament_id: str
    discord_user_id: str
    discord_username: str
    invite_link: str
    seed_number: Optional[int] = None
    is_eliminated: bool = False
    registered_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row) -> "Player":
        return cls(
            tournament_id=row["tournament_id"],
            discord_user_id=row["discord_user_id"],
            discord_username=row["discord_username"],
            invite_link=row["invite_link"],
            seed_number=row["seed_number"],
            is_eliminated=bool(row["is_eliminated"]),
            registered_at=parse_timestamp(row["registered_at"]),
        )

    @property
    def is_seeded(self) -> bool:
        return self.seed_number is not None
