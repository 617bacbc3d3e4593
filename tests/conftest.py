import pytest
from datetime import date
from unittest.mock import MagicMock

from courtplanner.models.roster_model import Roster
from courtplanner.models.user_model import Actor
from courtplanner.services.pairing_service import no_tie_break
from courtplanner.services.scheduling_service import SchedulingService
from courtplanner.services.storage_service import JsonCollectionStore

SLOT_EARLY = "18u30-19u30"
SLOT_LATE = "19u30-20u30"
TIME_SLOTS = [SLOT_EARLY, SLOT_LATE]
WEEK_1 = date(2025, 9, 28)
WEEK_2 = date(2025, 10, 5)
SEASON = [WEEK_1, WEEK_2]


@pytest.fixture
def small_roster():
    return Roster.from_scores({"Ann": 50, "Bo": 40, "Cy": 30, "Dee": 20})


@pytest.fixture
def club_roster():
    # Ten players fill a [4, 4, 2] hour exactly
    return Roster.from_scores({
        "Ann": 55, "Bo": 70, "Cy": 55, "Dee": 60, "Eli": 50,
        "Fay": 10, "Gus": 5, "Hal": 15, "Ivy": 20, "Jo": 25,
    })


@pytest.fixture
def admin():
    return Actor(player_name="Ann", is_admin=True)


@pytest.fixture
def notifier():
    return MagicMock()


@pytest.fixture
def store(tmp_path):
    return JsonCollectionStore(str(tmp_path / "data"))


@pytest.fixture
def scheduler(small_roster, store, notifier):
    return SchedulingService(
        roster=small_roster,
        time_slots=TIME_SLOTS,
        season_dates=SEASON,
        store=store,
        court_count=3,
        notifier=notifier,
        tie_break=no_tie_break,
    )
