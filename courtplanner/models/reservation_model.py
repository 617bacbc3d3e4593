from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, root_validator, validator


class MatchType(str, Enum):
    SINGLE = "single"
    DOUBLE = "double"


class ReservationOrigin(str, Enum):
    CHALLENGE = "challenge"
    TRAINING = "training"


PLAYERS_PER_MATCH = {
    MatchType.SINGLE.value: 2,
    MatchType.DOUBLE.value: 4,
}


class MatchResult(BaseModel):
    winner: str
    loser: str


class Reservation(BaseModel):
    """
    One booked court for one hour.

    Singles: players[0] plays players[1].
    Doubles: players[0] and players[1] team up against players[2] and players[3].
    """
    date: date
    time_slot: str
    court: int = Field(ge=1)
    match_type: MatchType = MatchType.SINGLE
    players: List[str]
    origin: ReservationOrigin = ReservationOrigin.TRAINING
    challenge_id: Optional[str] = None
    result: Optional[MatchResult] = None

    class Config:
        from_attributes = True
        use_enum_values = True

    @root_validator(pre=True)
    def default_origin(cls, values):
        # Older data has no origin; a challenge link means it came from a challenge
        if isinstance(values, dict) and values.get('origin') is None:
            values = dict(values)
            values['origin'] = (
                ReservationOrigin.CHALLENGE if values.get('challenge_id') else ReservationOrigin.TRAINING
            )
        return values

    @validator('players')
    def player_count_matches_type(cls, v, values):
        match_type = values.get('match_type')
        expected = PLAYERS_PER_MATCH.get(match_type)
        if expected is not None and len(v) != expected:
            raise ValueError(f"A {match_type} match needs exactly {expected} players, got {len(v)}")
        if len(set(v)) != len(v):
            raise ValueError("A player cannot appear twice in the same match")
        return v

    @validator('result')
    def result_belongs_to_singles(cls, v, values):
        if v is None:
            return v
        if values.get('match_type') != MatchType.SINGLE.value:
            raise ValueError("Results are only recorded for singles")
        players = values.get('players') or []
        if v.winner not in players or v.loser not in players or v.winner == v.loser:
            raise ValueError("Winner and loser must be the two players of the match")
        return v
