"""
Greedy balanced pairing for one court.

Given the players still free in an hour, pick the singles pair or doubles
four-some with the lowest cost. Rematches are penalised much harder than
skill gaps, so the heuristic avoids repeats first and balances skill second.
"""
import random
from collections import Counter
from datetime import date
from itertools import combinations
from typing import Callable, Iterable, List, Mapping, Optional, Sequence, Tuple

from courtplanner.models.reservation_model import MatchType, Reservation

SINGLES_SKILL_WEIGHT = 12
SINGLES_REMATCH_WEIGHT = 60
DOUBLES_SKILL_WEIGHT = 15
DOUBLES_REMATCH_WEIGHT = 1
TIE_BREAK_MAGNITUDE = 0.5

TieBreak = Callable[[], float]
Team = Tuple[str, str]


class RandomTieBreak:
    """Uniform noise in [0, magnitude] so repeated plans don't lock into the same pairs."""

    def __init__(self, magnitude: float = TIE_BREAK_MAGNITUDE, seed: Optional[int] = None):
        self.magnitude = magnitude
        self._rng = random.Random(seed)

    def __call__(self) -> float:
        return self._rng.uniform(0, self.magnitude)


def no_tie_break() -> float:
    return 0.0


def opponent_pairs(reservation: Reservation) -> List[Team]:
    """Head-to-head pairs of a match. Doubles partners are not opponents."""
    players = reservation.players
    if reservation.match_type == MatchType.SINGLE:
        return [(players[0], players[1])]
    x1, x2, y1, y2 = players
    return [(x1, y1), (x1, y2), (x2, y1), (x2, y2)]


class OpponentHistory:
    """How often two players have met as opponents, keyed by unordered pair."""

    def __init__(self, counts: Optional[Mapping[frozenset, int]] = None):
        self._counts: Counter = Counter(counts or {})

    @classmethod
    def from_reservations(cls, reservations: Iterable[Reservation], excluding_date: Optional[date] = None) -> "OpponentHistory":
        history = cls()
        for reservation in reservations:
            if excluding_date is not None and reservation.date == excluding_date:
                continue
            for a, b in opponent_pairs(reservation):
                history.record(a, b)
        return history

    def record(self, a: str, b: str) -> None:
        self._counts[frozenset((a, b))] += 1

    def count(self, a: str, b: str) -> int:
        return self._counts.get(frozenset((a, b)), 0)

    def __len__(self) -> int:
        return len(self._counts)


class PairingHeuristic:
    def __init__(self, scores: Mapping[str, int], tie_break: Optional[TieBreak] = None):
        self.scores = scores
        self.tie_break = tie_break or RandomTieBreak()

    def score_of(self, name: str) -> int:
        return self.scores.get(name, 0)

    def singles_cost(self, a: str, b: str, history: OpponentHistory) -> float:
        gap = abs(self.score_of(a) - self.score_of(b))
        return gap * SINGLES_SKILL_WEIGHT + history.count(a, b) * SINGLES_REMATCH_WEIGHT + self.tie_break()

    def doubles_cost(self, team_a: Team, team_b: Team, history: OpponentHistory) -> float:
        (x1, x2), (y1, y2) = team_a, team_b
        gap = abs(self.score_of(x1) + self.score_of(x2) - self.score_of(y1) - self.score_of(y2))
        rematches = history.count(x1, y1) + history.count(x1, y2) + history.count(x2, y1) + history.count(x2, y2)
        return gap * DOUBLES_SKILL_WEIGHT + rematches * DOUBLES_REMATCH_WEIGHT + self.tie_break()

    def pick_singles(self, pool: Sequence[str], history: OpponentHistory) -> Optional[Team]:
        if len(pool) < 2:
            return None
        # sorted() is stable, so equal scores keep roster order
        ordered = sorted(pool, key=self.score_of)
        best: Optional[Team] = None
        best_cost = float("inf")
        for a, b in combinations(ordered, 2):
            cost = self.singles_cost(a, b, history)
            if cost < best_cost:
                best, best_cost = (a, b), cost
        return best

    def pick_doubles(self, pool: Sequence[str], history: OpponentHistory) -> Optional[Tuple[Team, Team]]:
        if len(pool) < 4:
            return None
        best: Optional[Tuple[Team, Team]] = None
        best_cost = float("inf")
        for a, b, c, d in combinations(pool, 4):
            for team_a, team_b in (((a, b), (c, d)), ((a, c), (b, d)), ((a, d), (b, c))):
                cost = self.doubles_cost(team_a, team_b, history)
                if cost < best_cost:
                    best, best_cost = (team_a, team_b), cost
        return best
