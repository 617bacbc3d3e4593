import pytest
from datetime import date
from unittest.mock import MagicMock

from courtplanner.models.reservation_model import MatchType, Reservation
from courtplanner.models.roster_model import Roster
from courtplanner.models.user_model import Actor
from courtplanner.services.availability_service import AvailabilityIndex
from courtplanner.services.challenge_service import ChallengeService
from courtplanner.services.errors import (
    AuthorizationError,
    AvailabilityConflict,
    CapacityExhausted,
    NotFoundError,
    OccupancyConflict,
    StateError,
    ValidationError,
)
from courtplanner.services.ladder_service import compute_ladder
from courtplanner.services.reservation_service import ReservationBook

EARLY, LATE = "18u30-19u30", "19u30-20u30"
DAY = date(2025, 9, 28)
ANN = Actor(player_name="Ann")
BO = Actor(player_name="Bo")
CY = Actor(player_name="Cy")


@pytest.fixture
def roster():
    return Roster.from_scores({"Ann": 50, "Bo": 45, "Cy": 40, "Dee": 35, "Eve": 30})


@pytest.fixture
def availability(roster):
    return AvailabilityIndex(roster)


@pytest.fixture
def book(roster):
    return ReservationBook(roster, [EARLY, LATE], court_count=3)


@pytest.fixture
def notifier():
    return MagicMock()


@pytest.fixture
def challenges(roster, book, availability, notifier):
    return ChallengeService(roster, book, availability, notifier)


def _kinds(notifier):
    return [(c.args[0], c.args[1].kind) for c in notifier.notify.call_args_list]


class TestClubScenario:

    def test_accept_then_result_on_an_empty_evening(self, notifier):
        roster = Roster.from_scores({"Ann": 50, "Bo": 50, "Cy": 10})
        book = ReservationBook(roster, [EARLY, LATE], court_count=3)
        challenges = ChallengeService(roster, book, AvailabilityIndex(roster), notifier)

        challenge = challenges.create(ANN, "Bo", DAY, EARLY)
        reservation = challenges.accept(BO, challenge.id)
        assert (reservation.court, reservation.origin, challenge.status) == (1, "challenge", "accepted")

        challenges.record_result(ANN, challenge.id, "Ann")
        assert (reservation.result.winner, reservation.result.loser) == ("Ann", "Bo")
        assert challenge.status == "completed"
        ladder = {e.player: e for e in compute_ladder(roster, book.reservations)}
        assert (ladder["Ann"].wins, ladder["Ann"].matches) == (1, 1)
        assert (ladder["Bo"].losses, ladder["Bo"].matches) == (1, 1)
        assert ladder["Cy"].matches == 0


class TestCreateChallenge:

    def test_create_is_pending_and_books_nothing(self, challenges, book, notifier):
        challenge = challenges.create(ANN, "Bo", DAY, EARLY)
        assert challenge.status == "pending"
        assert challenge.from_player == "Ann"
        assert challenge.to_player == "Bo"
        assert book.reservations == []
        assert _kinds(notifier) == [("Bo", "challenge-received"), ("Ann", "challenge-sent-ack")]

    def test_newest_challenge_first(self, challenges):
        first = challenges.create(ANN, "Bo", DAY, EARLY)
        second = challenges.create(CY, "Ann", DAY, LATE)
        assert challenges.for_player("Ann") == [second, first]
        assert challenges.incoming("Bo") == [first]

    def test_cannot_challenge_yourself(self, challenges, notifier):
        with pytest.raises(ValidationError):
            challenges.create(ANN, "Ann", DAY, EARLY)
        assert challenges.challenges == []
        notifier.notify.assert_not_called()

    @pytest.mark.parametrize("to_player, slot", [("Zed", EARLY), ("Bo", "07u00-08u00")])
    def test_unknown_player_or_slot(self, challenges, to_player, slot):
        with pytest.raises(ValidationError):
            challenges.create(ANN, to_player, DAY, slot)

    def test_must_be_logged_in(self, challenges):
        with pytest.raises(AuthorizationError):
            challenges.create(Actor(), "Bo", DAY, EARLY)


class TestAcceptChallenge:

    def test_accept_books_lowest_free_court(self, challenges, book, notifier):
        challenge = challenges.create(ANN, "Bo", DAY, EARLY)
        notifier.reset_mock()

        reservation = challenges.accept(BO, challenge.id)
        assert reservation.court == 1
        assert reservation.origin == "challenge"
        assert reservation.challenge_id == challenge.id
        assert reservation.players == ["Ann", "Bo"]
        assert reservation.match_type == "single"
        assert challenge.status == "accepted"
        assert book.reservations == [reservation]
        assert _kinds(notifier) == [("Ann", "challenge-accepted"), ("Bo", "challenge-accepted")]
        assert notifier.notify.call_args_list[0].args[1].court == 1

    def test_accept_skips_taken_courts(self, challenges, book):
        book.add(Reservation(date=DAY, time_slot=EARLY, court=1, players=["Cy", "Dee"]))
        challenge = challenges.create(ANN, "Bo", DAY, EARLY)
        assert challenges.accept(BO, challenge.id).court == 2

    def test_only_the_challenged_player_accepts(self, challenges):
        challenge = challenges.create(ANN, "Bo", DAY, EARLY)
        with pytest.raises(AuthorizationError):
            challenges.accept(ANN, challenge.id)
        with pytest.raises(AuthorizationError):
            challenges.accept(CY, challenge.id)
        admin = Actor(player_name="Eve", is_admin=True)
        assert challenges.accept(admin, challenge.id).court == 1

    def test_accept_twice(self, challenges):
        challenge = challenges.create(ANN, "Bo", DAY, EARLY)
        challenges.accept(BO, challenge.id)
        with pytest.raises(StateError):
            challenges.accept(BO, challenge.id)

    def test_unknown_challenge(self, challenges):
        with pytest.raises(NotFoundError):
            challenges.accept(BO, "nope")

    def test_unavailable_player_blocks_accept(self, challenges, availability, book):
        challenge = challenges.create(ANN, "Bo", DAY, EARLY)
        availability.set_availability("Ann", DAY, EARLY, False)
        with pytest.raises(AvailabilityConflict):
            challenges.accept(BO, challenge.id)
        assert challenge.status == "pending"
        assert book.reservations == []

    def test_player_already_on_court_blocks_accept(self, challenges, book):
        book.add(Reservation(date=DAY, time_slot=EARLY, court=1, players=["Bo", "Cy"]))
        challenge = challenges.create(ANN, "Bo", DAY, EARLY)
        with pytest.raises(OccupancyConflict):
            challenges.accept(BO, challenge.id)
        assert challenge.status == "pending"

    def test_no_free_court(self, roster, availability, notifier):
        book = ReservationBook(roster, [EARLY], court_count=1)
        book.add(Reservation(date=DAY, time_slot=EARLY, court=1, players=["Cy", "Dee"]))
        challenges = ChallengeService(roster, book, availability, notifier)
        challenge = challenges.create(ANN, "Bo", DAY, EARLY)
        with pytest.raises(CapacityExhausted):
            challenges.accept(BO, challenge.id)
        assert challenge.status == "pending"
        assert len(book.reservations) == 1

    def test_failing_notifier_does_not_undo_accept(self, roster, book, availability):
        notifier = MagicMock()
        notifier.notify.side_effect = RuntimeError("mail server down")
        challenges = ChallengeService(roster, book, availability, notifier)
        challenge = challenges.create(ANN, "Bo", DAY, EARLY)
        reservation = challenges.accept(BO, challenge.id)
        assert challenge.status == "accepted"
        assert book.reservations == [reservation]


class TestDeclineChallenge:

    def test_decline_notifies_the_challenger(self, challenges, book, notifier):
        challenge = challenges.create(ANN, "Bo", DAY, EARLY)
        notifier.reset_mock()
        challenges.decline(BO, challenge.id)
        assert challenge.status == "declined"
        assert challenge.is_terminal
        assert book.reservations == []
        assert _kinds(notifier) == [("Ann", "challenge-declined")]

    def test_decline_after_accept(self, challenges):
        challenge = challenges.create(ANN, "Bo", DAY, EARLY)
        challenges.accept(BO, challenge.id)
        with pytest.raises(StateError):
            challenges.decline(BO, challenge.id)

    def test_accept_after_decline(self, challenges):
        challenge = challenges.create(ANN, "Bo", DAY, EARLY)
        challenges.decline(BO, challenge.id)
        with pytest.raises(StateError):
            challenges.accept(BO, challenge.id)


class TestRecordResult:

    def test_result_completes_challenge_and_feeds_ladder(self, roster, challenges, book, notifier):
        challenge = challenges.create(ANN, "Bo", DAY, EARLY)
        reservation = challenges.accept(BO, challenge.id)
        notifier.reset_mock()

        challenges.record_result(ANN, challenge.id, "Ann")
        assert challenge.status == "completed"
        assert challenge.result.winner == "Ann"
        assert reservation.result.loser == "Bo"
        assert _kinds(notifier) == [("Ann", "match-result"), ("Bo", "match-result")]

        ladder = {entry.player: entry for entry in compute_ladder(roster, book.reservations)}
        assert (ladder["Ann"].wins, ladder["Ann"].losses, ladder["Ann"].position) == (1, 0, 1)
        assert (ladder["Bo"].wins, ladder["Bo"].losses, ladder["Bo"].position) == (0, 1, 2)

    def test_result_before_accept(self, challenges):
        challenge = challenges.create(ANN, "Bo", DAY, EARLY)
        with pytest.raises(StateError):
            challenges.record_result(ANN, challenge.id, "Ann")

    def test_result_twice(self, challenges):
        challenge = challenges.create(ANN, "Bo", DAY, EARLY)
        challenges.accept(BO, challenge.id)
        challenges.record_result(BO, challenge.id, "Bo")
        with pytest.raises(StateError):
            challenges.record_result(ANN, challenge.id, "Ann")

    def test_winner_must_have_played(self, challenges):
        challenge = challenges.create(ANN, "Bo", DAY, EARLY)
        challenges.accept(BO, challenge.id)
        with pytest.raises(ValidationError):
            challenges.record_result(ANN, challenge.id, "Cy")
        assert challenge.status == "accepted"

    def test_outsider_cannot_report(self, challenges):
        challenge = challenges.create(ANN, "Bo", DAY, EARLY)
        challenges.accept(BO, challenge.id)
        with pytest.raises(AuthorizationError):
            challenges.record_result(CY, challenge.id, "Ann")

    def test_result_after_decline(self, challenges, book):
        challenge = challenges.create(ANN, "Bo", DAY, EARLY)
        challenges.decline(BO, challenge.id)
        with pytest.raises(StateError):
            challenges.record_result(ANN, challenge.id, "Ann")
        assert challenge.status == "declined"
        assert challenge.result is None
        assert book.reservations == []

    def test_rebooked_challenge_court_keeps_no_result(self, roster, challenges, book, availability):
        challenge = challenges.create(ANN, "Bo", DAY, EARLY)
        reservation = challenges.accept(BO, challenge.id)
        rebooked = book.reserve(ANN, DAY, EARLY, reservation.court, MatchType.DOUBLE,
                                ["Ann", "Bo", "Cy", "Dee"], availability)
        assert (rebooked.origin, rebooked.challenge_id) == ("training", None)

        challenges.record_result(ANN, challenge.id, "Ann")
        assert challenge.status == "completed"
        assert challenge.result.winner == "Ann"
        assert rebooked.result is None
        assert Reservation(**rebooked.model_dump(mode="json")).match_type == "double"
        ladder = {entry.player: entry for entry in compute_ladder(roster, book.reservations)}
        assert ladder["Ann"].matches == 0

    def test_rebooked_singles_with_another_opponent_keeps_no_result(self, challenges, book, availability):
        challenge = challenges.create(ANN, "Bo", DAY, EARLY)
        reservation = challenges.accept(BO, challenge.id)
        book.reserve(ANN, DAY, EARLY, reservation.court, MatchType.SINGLE, ["Ann", "Cy"], availability)

        challenges.record_result(BO, challenge.id, "Bo")
        assert challenge.result.winner == "Bo"
        assert book.find(DAY, EARLY, reservation.court).result is None
