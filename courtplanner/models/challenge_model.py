from datetime import date, datetime
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field, validator

from courtplanner.models.reservation_model import MatchResult


class ChallengeStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    COMPLETED = "completed"


TERMINAL_STATUSES = {ChallengeStatus.DECLINED.value, ChallengeStatus.COMPLETED.value}


class Challenge(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    from_player: str
    to_player: str
    date: date
    slot: str
    status: ChallengeStatus = ChallengeStatus.PENDING
    created_at: datetime = Field(default_factory=datetime.utcnow)
    result: Optional[MatchResult] = None

    class Config:
        from_attributes = True
        use_enum_values = True

    @validator('to_player')
    def not_self(cls, v, values):
        if v == values.get('from_player'):
            raise ValueError("A player cannot challenge themselves")
        return v

    @property
    def participants(self):
        return (self.from_player, self.to_player)

    def involves(self, player_name: Optional[str]) -> bool:
        return player_name is not None and player_name in self.participants

    def opponent_of(self, player_name: str) -> str:
        return self.to_player if player_name == self.from_player else self.from_player

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES
