# Import all models here so callers can use courtplanner.models.<Name>
from .roster_model import Player, Roster, TimeSlot
from .reservation_model import MatchResult, MatchType, Reservation, ReservationOrigin
from .challenge_model import Challenge, ChallengeStatus
from .notification_model import (
    ChallengeAccepted,
    ChallengeDeclined,
    ChallengeReceived,
    ChallengeSentAck,
    MatchReminder,
    MatchResultPosted,
    Notification,
    NotificationEvent,
)
from .user_model import Actor, UserAccount
from .ladder_model import LadderEntry
