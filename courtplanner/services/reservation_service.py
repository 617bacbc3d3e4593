from datetime import date
from typing import List, Optional, Sequence, Set

from courtplanner.core.logger import setup_logger
from courtplanner.models.reservation_model import (
    PLAYERS_PER_MATCH,
    MatchType,
    Reservation,
    ReservationOrigin,
)
from courtplanner.models.roster_model import Roster
from courtplanner.models.user_model import Actor
from courtplanner.services.availability_service import AvailabilityIndex
from courtplanner.services.errors import (
    AuthorizationError,
    AvailabilityConflict,
    CapacityExhausted,
    NotFoundError,
    OccupancyConflict,
    ValidationError,
)
from courtplanner.services.permissions import can_modify, require_player

logger = setup_logger(__name__)


class ReservationBook:
    """
    The committed reservations, plus the occupancy questions asked of them.
    Nothing is cached: every query scans the current list.
    """

    def __init__(self, roster: Roster, time_slots: Sequence[str], court_count: int,
                 reservations: Optional[List[Reservation]] = None):
        self.roster = roster
        self.time_slots = list(time_slots)
        self.court_count = court_count
        self.reservations: List[Reservation] = reservations or []

    # --- Occupancy ---

    def find(self, day: date, slot: str, court: int) -> Optional[Reservation]:
        return next(
            (r for r in self.reservations if r.date == day and r.time_slot == slot and r.court == court),
            None,
        )

    def in_hour(self, day: date, slot: str) -> List[Reservation]:
        return [r for r in self.reservations if r.date == day and r.time_slot == slot]

    def for_date(self, day: date) -> List[Reservation]:
        return [r for r in self.reservations if r.date == day]

    def players_booked(self, day: date, slot: str) -> Set[str]:
        booked: Set[str] = set()
        for reservation in self.in_hour(day, slot):
            booked.update(reservation.players)
        return booked

    def free_court(self, day: date, slot: str) -> Optional[int]:
        taken = {r.court for r in self.in_hour(day, slot)}
        return next((court for court in range(1, self.court_count + 1) if court not in taken), None)

    def by_challenge(self, challenge_id: str) -> Optional[Reservation]:
        return next((r for r in self.reservations if r.challenge_id == challenge_id), None)

    # --- Conflict checks shared by manual bookings and challenges ---

    def check_players_free(self, players: Sequence[str], day: date, slot: str,
                           availability: AvailabilityIndex, ignore: Optional[Reservation] = None) -> None:
        unavailable = [p for p in players if not availability.is_available(p, day, slot)]
        if unavailable:
            raise AvailabilityConflict(f"Not available on {day} {slot}: {', '.join(unavailable)}")
        booked: Set[str] = set()
        for reservation in self.in_hour(day, slot):
            if reservation is not ignore:
                booked.update(reservation.players)
        clashing = [p for p in players if p in booked]
        if clashing:
            raise OccupancyConflict(f"Already playing on {day} {slot}: {', '.join(clashing)}")

    def validate_cell(self, day: date, slot: str, court: Optional[int] = None) -> None:
        if slot not in self.time_slots:
            raise ValidationError(f"Unknown time slot: {slot}")
        if court is not None and not 1 <= court <= self.court_count:
            raise ValidationError(f"Court must be between 1 and {self.court_count}")

    # --- Mutations ---

    def add(self, reservation: Reservation) -> Reservation:
        if self.find(reservation.date, reservation.time_slot, reservation.court) is not None:
            raise CapacityExhausted(
                f"Court {reservation.court} is already reserved on {reservation.date} {reservation.time_slot}"
            )
        clashing = self.players_booked(reservation.date, reservation.time_slot) & set(reservation.players)
        if clashing:
            raise OccupancyConflict(f"Already playing in this hour: {', '.join(sorted(clashing))}")
        self.reservations.append(reservation)
        return reservation

    def replace_all(self, reservations: List[Reservation]) -> None:
        self.reservations = list(reservations)

    def reserve(self, actor: Actor, day: date, slot: str, court: int, match_type: MatchType,
                players: Sequence[str], availability: AvailabilityIndex) -> Reservation:
        """
        Book (or rebook) one court by hand. Non-administrators can only book
        matches they play in, and only rebook a court they already play on.
        """
        me = require_player(actor)
        self.validate_cell(day, slot, court)
        try:
            match_type = MatchType(match_type)
        except ValueError:
            raise ValidationError(f"Unknown match type: {match_type}")
        players = [p for p in players if p]
        required = PLAYERS_PER_MATCH[match_type.value]
        if len(players) != required:
            raise ValidationError(f"Select all {required} players for this court")
        if len(set(players)) != len(players):
            raise ValidationError("A player cannot appear twice in the same match")
        unknown = [p for p in players if p not in self.roster]
        if unknown:
            raise ValidationError(f"Unknown players: {', '.join(unknown)}")
        if not actor.is_admin and me not in players:
            raise AuthorizationError("You can only create matches you play in yourself.")

        existing = self.find(day, slot, court)
        if existing is not None and not can_modify(actor, existing.players):
            raise AuthorizationError("You can only change your own matches.")
        self.check_players_free(players, day, slot, availability, ignore=existing)

        if existing is not None:
            if existing.challenge_id is not None:
                logger.info(f"Court {court} on {day} {slot} no longer hosts challenge {existing.challenge_id}")
            # A rebooked court is a new match: no challenge link, no result
            existing.players = list(players)
            existing.match_type = match_type.value
            existing.origin = ReservationOrigin.TRAINING.value
            existing.challenge_id = None
            existing.result = None
            logger.info(f"{me} rebooked court {court} on {day} {slot}: {', '.join(players)}")
            return existing

        reservation = Reservation(
            date=day,
            time_slot=slot,
            court=court,
            match_type=match_type,
            players=list(players),
            origin=ReservationOrigin.TRAINING,
        )
        self.reservations.append(reservation)
        logger.info(f"{me} booked court {court} on {day} {slot}: {', '.join(players)}")
        return reservation

    def remove(self, actor: Actor, day: date, slot: str, court: int) -> Reservation:
        existing = self.find(day, slot, court)
        if existing is None:
            raise NotFoundError(f"No reservation on court {court} at {day} {slot}")
        if not can_modify(actor, existing.players):
            raise AuthorizationError("You can only remove your own matches.")
        self.reservations.remove(existing)
        logger.info(f"Removed reservation on court {court} at {day} {slot}")
        return existing
