from datetime import date
from typing import List, Optional, Sequence, Set, Tuple

from courtplanner.core.logger import setup_logger
from courtplanner.models.reservation_model import MatchType, Reservation, ReservationOrigin
from courtplanner.models.roster_model import Roster
from courtplanner.services.availability_service import AvailabilityIndex
from courtplanner.services.errors import ValidationError
from courtplanner.services.pairing_service import OpponentHistory, PairingHeuristic, TieBreak

logger = setup_logger(__name__)

# Players per court, alternating by hour index over the whole season
COURT_GROUP_PATTERNS = ([4, 4, 2], [4, 2, 2])

Hour = Tuple[int, date, str]


class SeasonPlanner:
    """
    Fills the (week x slot x court) grid with training matches.

    Hours are walked in date-then-slot order. Within an hour each court gets
    the best pairing from whoever is still free; a court is left empty when the
    pool runs dry.
    """

    def __init__(self, roster: Roster, time_slots: Sequence[str], season_dates: Sequence[date],
                 court_count: int = 3, tie_break: Optional[TieBreak] = None):
        self.roster = roster
        self.time_slots = list(time_slots)
        self.season_dates = list(season_dates)
        self.court_count = court_count
        self.heuristic = PairingHeuristic({p.name: p.score for p in roster.players}, tie_break)

    def hours(self) -> List[Hour]:
        hours: List[Hour] = []
        for day in self.season_dates:
            for slot in self.time_slots:
                hours.append((len(hours), day, slot))
        return hours

    def hours_for(self, day: date) -> List[Hour]:
        if day not in self.season_dates:
            raise ValidationError(f"{day} is not a play date of this season")
        return [hour for hour in self.hours() if hour[1] == day]

    def court_groups(self, hour_index: int) -> List[int]:
        return COURT_GROUP_PATTERNS[hour_index % 2][:self.court_count]

    def plan_hour(self, hour: Hour, availability: AvailabilityIndex, history: OpponentHistory) -> List[Reservation]:
        hour_index, day, slot = hour
        available = availability.available_players(day, slot)
        used: Set[str] = set()
        planned: List[Reservation] = []

        for position, size in enumerate(self.court_groups(hour_index)):
            court = position + 1
            pool = [name for name in self.roster.names if name in available and name not in used]
            if size == 2:
                pair = self.heuristic.pick_singles(pool, history)
                if pair is None:
                    continue
                players, match_type = list(pair), MatchType.SINGLE
            else:
                teams = self.heuristic.pick_doubles(pool, history)
                if teams is None:
                    continue
                (x1, x2), (y1, y2) = teams
                players, match_type = [x1, x2, y1, y2], MatchType.DOUBLE
            used.update(players)
            planned.append(Reservation(
                date=day,
                time_slot=slot,
                court=court,
                match_type=match_type,
                players=players,
                origin=ReservationOrigin.TRAINING,
            ))
        return planned

    def plan_hours(self, hours: List[Hour], availability: AvailabilityIndex, history: OpponentHistory) -> List[Reservation]:
        planned: List[Reservation] = []
        for hour in hours:
            planned.extend(self.plan_hour(hour, availability, history))
        return planned

    def plan_all_balanced(self, existing: List[Reservation], availability: AvailabilityIndex) -> List[Reservation]:
        """A fresh plan for the whole season. Replaces every existing reservation."""
        history = OpponentHistory.from_reservations(existing)
        planned = self.plan_hours(self.hours(), availability, history)
        logger.info(f"Planned {len(planned)} matches over {len(self.season_dates)} weeks")
        return planned

    def plan_selected_week(self, day: date, existing: List[Reservation], availability: AvailabilityIndex) -> List[Reservation]:
        """
        Replan one play date. Reservations on other dates are kept as they are
        and still count towards the opponent history.
        """
        hours = self.hours_for(day)
        history = OpponentHistory.from_reservations(existing, excluding_date=day)
        kept = [r for r in existing if r.date != day]
        planned = self.plan_hours(hours, availability, history)
        logger.info(f"Replanned {day}: {len(planned)} matches")
        return kept + planned
