from datetime import date, datetime
from typing import Annotated, Literal, Union
from uuid import uuid4

from pydantic import BaseModel, Field


class ChallengeReceived(BaseModel):
    kind: Literal["challenge-received"] = "challenge-received"
    challenge_id: str
    from_player: str
    date: date
    slot: str


class ChallengeSentAck(BaseModel):
    kind: Literal["challenge-sent-ack"] = "challenge-sent-ack"
    challenge_id: str
    to_player: str
    date: date
    slot: str


class ChallengeAccepted(BaseModel):
    kind: Literal["challenge-accepted"] = "challenge-accepted"
    challenge_id: str
    by_player: str
    date: date
    slot: str
    court: int


class ChallengeDeclined(BaseModel):
    kind: Literal["challenge-declined"] = "challenge-declined"
    challenge_id: str
    by_player: str
    date: date
    slot: str


class MatchReminder(BaseModel):
    kind: Literal["match-reminder"] = "match-reminder"
    date: date
    slot: str
    court: int


class MatchResultPosted(BaseModel):
    kind: Literal["match-result"] = "match-result"
    winner: str
    loser: str
    date: date
    slot: str


NotificationEvent = Annotated[
    Union[
        ChallengeReceived,
        ChallengeSentAck,
        ChallengeAccepted,
        ChallengeDeclined,
        MatchReminder,
        MatchResultPosted,
    ],
    Field(discriminator="kind"),
]


class Notification(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    recipient: str
    event: NotificationEvent
    read: bool = False
    created_at: datetime = Field(default_factory=datetime.utcnow)
