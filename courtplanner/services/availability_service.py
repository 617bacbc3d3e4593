from datetime import date
from typing import Dict, Optional, Set

from courtplanner.models.roster_model import Roster

# date (ISO) -> slot id -> player name -> available
AvailabilityMap = Dict[str, Dict[str, Dict[str, bool]]]


class AvailabilityIndex:
    """
    Which roster players may be scheduled in a (date, slot).
    A missing entry means available; only explicit False entries exclude a player.
    """

    def __init__(self, roster: Roster, entries: Optional[AvailabilityMap] = None):
        self.roster = roster
        self.entries: AvailabilityMap = entries or {}

    def is_available(self, player: str, day: date, slot: str) -> bool:
        return self.entries.get(day.isoformat(), {}).get(slot, {}).get(player) is not False

    def available_players(self, day: date, slot: str) -> Set[str]:
        return {name for name in self.roster.names if self.is_available(name, day, slot)}

    def set_availability(self, player: str, day: date, slot: str, available: bool) -> None:
        self.entries.setdefault(day.isoformat(), {}).setdefault(slot, {})[player] = available

    def replace(self, entries: AvailabilityMap) -> None:
        self.entries = entries or {}

    def to_dict(self) -> AvailabilityMap:
        return self.entries
