from datetime import date
from typing import Any, List, Optional, Sequence, Set

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from courtplanner.core.logger import setup_logger
from courtplanner.models.challenge_model import Challenge
from courtplanner.models.ladder_model import LadderEntry
from courtplanner.models.reservation_model import MatchType, Reservation
from courtplanner.models.roster_model import Roster, TimeSlot
from courtplanner.models.user_model import Actor
from courtplanner.services import storage_service
from courtplanner.services.availability_service import AvailabilityIndex, AvailabilityMap
from courtplanner.services.challenge_service import ChallengeService
from courtplanner.services.errors import AuthorizationError, ValidationError
from courtplanner.services.ladder_service import compute_ladder
from courtplanner.services.notification_service import Notifier
from courtplanner.services.pairing_service import TieBreak
from courtplanner.services.permissions import require_admin, require_player
from courtplanner.services.planner_service import SeasonPlanner
from courtplanner.services.reminder_service import ReminderService
from courtplanner.services.reservation_service import ReservationBook
from courtplanner.services.storage_service import (
    AVAILABILITY,
    CHALLENGES,
    REMINDERS,
    RESERVATIONS,
    SYNCED_COLLECTIONS,
    JsonCollectionStore,
)

logger = setup_logger(__name__)

AVAILABILITY_ADAPTER = TypeAdapter(AvailabilityMap)


class SchedulingService:
    """
    Owns the reservation, challenge, availability and reminder collections.

    Every mutation goes through a method here: the in-memory state is changed
    all-or-nothing first, then the touched collections are written back whole.
    Another instance may replace any collection at any time through
    adopt_collection(); the last write wins, there is no locking between
    instances.
    """

    def __init__(
        self,
        roster: Roster,
        time_slots: Sequence[str],
        season_dates: Sequence[date],
        store: JsonCollectionStore,
        court_count: int = 3,
        notifier: Optional[Notifier] = None,
        tie_break: Optional[TieBreak] = None,
        reminder_interval: int = 60,
    ):
        self.roster = roster
        self.time_slots = [TimeSlot(id=slot, label=slot) for slot in time_slots]
        self.season_dates = list(season_dates)
        self.court_count = court_count
        self.store = store
        self.notifier = notifier

        slot_ids = [slot.id for slot in self.time_slots]
        self.book = ReservationBook(roster, slot_ids, court_count)
        self.availability = AvailabilityIndex(roster)
        self.challenges = ChallengeService(roster, self.book, self.availability, notifier)
        self.planner = SeasonPlanner(roster, slot_ids, self.season_dates, court_count, tie_break)
        self.reminders = ReminderService(
            self.book,
            notifier,
            check_interval=reminder_interval,
            on_sent=lambda: self._save(REMINDERS),
        )
        self.reload()

    # --- Persistence ---

    def _dump(self, name: str) -> Any:
        if name == RESERVATIONS:
            return [r.model_dump(mode="json") for r in self.book.reservations]
        if name == CHALLENGES:
            return [c.model_dump(mode="json") for c in self.challenges.challenges]
        if name == AVAILABILITY:
            return self.availability.to_dict()
        if name == REMINDERS:
            return sorted(self.reminders.sent)
        raise ValidationError(f"Unknown collection: {name}")

    def _save(self, *names: str) -> None:
        for name in names:
            self.store.save(name, self._dump(name))

    def _apply(self, name: str, data: Any) -> None:
        """Parse a whole collection and swap it in. Parsing happens before anything is replaced."""
        if name == RESERVATIONS:
            parsed = [Reservation(**r) for r in (data or [])]
            self.book.replace_all(parsed)
        elif name == CHALLENGES:
            parsed = [Challenge(**c) for c in (data or [])]
            self.challenges.challenges = parsed
        elif name == AVAILABILITY:
            try:
                parsed = AVAILABILITY_ADAPTER.validate_python(data or {}, strict=True)
            except PydanticValidationError:
                raise ValidationError("Availability must be a mapping of date -> slot -> player -> bool")
            self.availability.replace(parsed)
        elif name == REMINDERS:
            self.reminders.replace(data or [])
        else:
            raise ValidationError(f"Unknown collection: {name}")

    def reload(self) -> None:
        """Read every collection from the store, as at startup."""
        for name in SYNCED_COLLECTIONS:
            self._apply(name, self.store.load(name))
        logger.info(
            f"Loaded {len(self.book.reservations)} reservations and {len(self.challenges.challenges)} challenges"
        )

    def adopt_collection(self, name: str, data: Any) -> None:
        """Take over a full collection written elsewhere (another instance or tab)."""
        if name not in SYNCED_COLLECTIONS:
            raise ValidationError(f"Unknown collection: {name}")
        try:
            self._apply(name, data)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Invalid {name} data: {e}")
        self._save(name)
        logger.info(f"Adopted external {name} collection")

    def export_collection(self, name: str) -> Any:
        if name not in SYNCED_COLLECTIONS:
            raise ValidationError(f"Unknown collection: {name}")
        return self._dump(name)

    # --- Queries ---

    @property
    def reservations(self) -> List[Reservation]:
        return self.book.reservations

    def reservations_for(self, day: date) -> List[Reservation]:
        return sorted(self.book.for_date(day), key=lambda r: (r.time_slot, r.court))

    def available_players(self, day: date, slot: str) -> Set[str]:
        return self.availability.available_players(day, slot)

    def players_booked(self, day: date, slot: str) -> Set[str]:
        return self.book.players_booked(day, slot)

    def free_court(self, day: date, slot: str) -> Optional[int]:
        return self.book.free_court(day, slot)

    def ladder(self) -> List[LadderEntry]:
        return compute_ladder(self.roster, self.book.reservations)

    # --- Availability ---

    def set_availability(self, actor: Actor, player: str, day: date, slot: str, available: bool) -> None:
        me = require_player(actor)
        if player not in self.roster:
            raise ValidationError(f"Unknown player: {player}")
        if not (actor.is_admin or me == player):
            raise AuthorizationError("You can only change your own availability.")
        self.availability.set_availability(player, day, slot, available)
        self._save(AVAILABILITY)

    # --- Manual reservations ---

    def reserve(self, actor: Actor, day: date, slot: str, court: int, match_type: MatchType, players: Sequence[str]) -> Reservation:
        reservation = self.book.reserve(actor, day, slot, court, match_type, players, self.availability)
        self._save(RESERVATIONS)
        return reservation

    def remove_reservation(self, actor: Actor, day: date, slot: str, court: int) -> Reservation:
        removed = self.book.remove(actor, day, slot, court)
        self._save(RESERVATIONS)
        return removed

    # --- Planning (administrator only) ---

    def plan_all_balanced(self, actor: Actor) -> List[Reservation]:
        require_admin(actor)
        planned = self.planner.plan_all_balanced(self.book.reservations, self.availability)
        self.book.replace_all(planned)
        self._save(RESERVATIONS)
        return planned

    def plan_selected_week(self, actor: Actor, day: date) -> List[Reservation]:
        require_admin(actor)
        merged = self.planner.plan_selected_week(day, self.book.reservations, self.availability)
        self.book.replace_all(merged)
        self._save(RESERVATIONS)
        return self.reservations_for(day)

    # --- Challenges ---

    def create_challenge(self, actor: Actor, to_player: str, day: date, slot: str) -> Challenge:
        challenge = self.challenges.create(actor, to_player, day, slot)
        self._save(CHALLENGES)
        return challenge

    def accept_challenge(self, actor: Actor, challenge_id: str) -> Reservation:
        reservation = self.challenges.accept(actor, challenge_id)
        self._save(RESERVATIONS, CHALLENGES)
        return reservation

    def decline_challenge(self, actor: Actor, challenge_id: str) -> Challenge:
        challenge = self.challenges.decline(actor, challenge_id)
        self._save(CHALLENGES)
        return challenge

    def record_challenge_result(self, actor: Actor, challenge_id: str, winner: str) -> Challenge:
        challenge = self.challenges.record_result(actor, challenge_id, winner)
        self._save(RESERVATIONS, CHALLENGES)
        return challenge

    # --- Reminders ---

    def send_due_reminders(self, today: Optional[date] = None) -> int:
        return self.reminders.tick(today)
