from typing import Dict, Iterable, List

from courtplanner.models.ladder_model import LadderEntry
from courtplanner.models.reservation_model import MatchType, Reservation
from courtplanner.models.roster_model import Roster


def compute_ladder(roster: Roster, reservations: Iterable[Reservation]) -> List[LadderEntry]:
    """
    Standings from recorded singles results only. Doubles and matches without a
    result never count. Ranked by wins, then matches played, then name.
    """
    stats: Dict[str, Dict[str, int]] = {
        name: {"wins": 0, "losses": 0, "matches": 0} for name in roster.names
    }
    for reservation in reservations:
        if reservation.match_type != MatchType.SINGLE or reservation.result is None:
            continue
        winner, loser = reservation.result.winner, reservation.result.loser
        if winner not in stats or loser not in stats:
            continue
        stats[winner]["wins"] += 1
        stats[winner]["matches"] += 1
        stats[loser]["losses"] += 1
        stats[loser]["matches"] += 1

    ranked = sorted(stats, key=lambda name: (-stats[name]["wins"], -stats[name]["matches"], name))
    ladder = []
    for position, name in enumerate(ranked, start=1):
        s = stats[name]
        ladder.append(LadderEntry(
            position=position,
            player=name,
            matches=s["matches"],
            wins=s["wins"],
            losses=s["losses"],
            win_percentage=round(s["wins"] / s["matches"] * 100) if s["matches"] else 0,
        ))
    return ladder
