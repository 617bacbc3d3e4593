from datetime import date
from typing import List, Optional

from courtplanner.core.logger import setup_logger
from courtplanner.models.challenge_model import Challenge, ChallengeStatus
from courtplanner.models.notification_model import (
    ChallengeAccepted,
    ChallengeDeclined,
    ChallengeReceived,
    ChallengeSentAck,
    MatchResultPosted,
)
from courtplanner.models.reservation_model import MatchResult, MatchType, Reservation, ReservationOrigin
from courtplanner.models.roster_model import Roster
from courtplanner.models.user_model import Actor
from courtplanner.services.availability_service import AvailabilityIndex
from courtplanner.services.errors import (
    AuthorizationError,
    CapacityExhausted,
    NotFoundError,
    StateError,
    ValidationError,
)
from courtplanner.services.notification_service import Notifier, deliver
from courtplanner.services.permissions import require_player
from courtplanner.services.reservation_service import ReservationBook

logger = setup_logger(__name__)


class ChallengeService:
    """
    Player-to-player challenges.

    pending -> accepted | declined, accepted -> completed. Accepting books a
    singles court under the same availability and double-booking rules the
    planner follows. A pending challenge never expires on its own.
    """

    def __init__(self, roster: Roster, book: ReservationBook, availability: AvailabilityIndex,
                 notifier: Optional[Notifier] = None, challenges: Optional[List[Challenge]] = None):
        self.roster = roster
        self.book = book
        self.availability = availability
        self.notifier = notifier
        self.challenges: List[Challenge] = challenges or []

    def get(self, challenge_id: str) -> Challenge:
        challenge = next((c for c in self.challenges if c.id == challenge_id), None)
        if challenge is None:
            raise NotFoundError(f"Challenge {challenge_id} not found")
        return challenge

    def for_player(self, player_name: str) -> List[Challenge]:
        return [c for c in self.challenges if c.involves(player_name)]

    def incoming(self, player_name: str) -> List[Challenge]:
        return [c for c in self.challenges if c.to_player == player_name and c.status == ChallengeStatus.PENDING]

    def create(self, actor: Actor, to_player: str, day: date, slot: str) -> Challenge:
        me = require_player(actor)
        if to_player == me:
            raise ValidationError("You cannot challenge yourself.")
        if to_player not in self.roster:
            raise ValidationError(f"Unknown player: {to_player}")
        self.book.validate_cell(day, slot)

        challenge = Challenge(from_player=me, to_player=to_player, date=day, slot=slot)
        self.challenges.insert(0, challenge)
        logger.info(f"{me} challenged {to_player} for {day} {slot}")

        deliver(self.notifier, to_player, ChallengeReceived(
            challenge_id=challenge.id, from_player=me, date=day, slot=slot,
        ))
        deliver(self.notifier, me, ChallengeSentAck(
            challenge_id=challenge.id, to_player=to_player, date=day, slot=slot,
        ))
        return challenge

    def _require_recipient(self, actor: Actor, challenge: Challenge) -> None:
        require_player(actor)
        if not (actor.is_admin or actor.player_name == challenge.to_player):
            raise AuthorizationError("Only the challenged player can answer this challenge.")

    def _require_pending(self, challenge: Challenge) -> None:
        if challenge.status != ChallengeStatus.PENDING:
            raise StateError(f"Challenge is {ChallengeStatus(challenge.status).value}, not pending.")

    def accept(self, actor: Actor, challenge_id: str) -> Reservation:
        challenge = self.get(challenge_id)
        self._require_recipient(actor, challenge)
        self._require_pending(challenge)

        players = [challenge.from_player, challenge.to_player]
        self.book.check_players_free(players, challenge.date, challenge.slot, self.availability)
        court = self.book.free_court(challenge.date, challenge.slot)
        if court is None:
            raise CapacityExhausted(f"No free court left on {challenge.date} {challenge.slot}.")

        reservation = self.book.add(Reservation(
            date=challenge.date,
            time_slot=challenge.slot,
            court=court,
            match_type=MatchType.SINGLE,
            players=players,
            origin=ReservationOrigin.CHALLENGE,
            challenge_id=challenge.id,
        ))
        challenge.status = ChallengeStatus.ACCEPTED.value
        logger.info(f"Challenge {challenge.id} accepted, court {court} on {challenge.date} {challenge.slot}")

        for recipient in players:
            deliver(self.notifier, recipient, ChallengeAccepted(
                challenge_id=challenge.id,
                by_player=challenge.to_player,
                date=challenge.date,
                slot=challenge.slot,
                court=court,
            ))
        return reservation

    def decline(self, actor: Actor, challenge_id: str) -> Challenge:
        challenge = self.get(challenge_id)
        self._require_recipient(actor, challenge)
        self._require_pending(challenge)

        challenge.status = ChallengeStatus.DECLINED.value
        logger.info(f"Challenge {challenge.id} declined")
        deliver(self.notifier, challenge.from_player, ChallengeDeclined(
            challenge_id=challenge.id,
            by_player=challenge.to_player,
            date=challenge.date,
            slot=challenge.slot,
        ))
        return challenge

    def record_result(self, actor: Actor, challenge_id: str, winner: str) -> Challenge:
        challenge = self.get(challenge_id)
        me = require_player(actor)
        if not (challenge.involves(me) or actor.is_admin):
            raise AuthorizationError("You can only report results for your own matches.")
        if challenge.status != ChallengeStatus.ACCEPTED:
            raise StateError("A winner can only be recorded for an accepted challenge.")
        if winner not in challenge.participants:
            raise ValidationError(f"{winner} did not play in this challenge.")

        result = MatchResult(winner=winner, loser=challenge.opponent_of(winner))
        reservation = self.book.by_challenge(challenge.id)
        if (
            reservation is not None
            and reservation.match_type == MatchType.SINGLE
            and set(reservation.players) == set(challenge.participants)
        ):
            reservation.result = result
        else:
            logger.warning(f"Challenge {challenge.id} has no matching reservation left, result kept on the challenge only")
        challenge.result = result
        challenge.status = ChallengeStatus.COMPLETED.value
        logger.info(f"Challenge {challenge.id} completed, {result.winner} beat {result.loser}")

        for recipient in challenge.participants:
            deliver(self.notifier, recipient, MatchResultPosted(
                winner=result.winner,
                loser=result.loser,
                date=challenge.date,
                slot=challenge.slot,
            ))
        return challenge
