import pytest
import os
import json
from datetime import datetime

from courtplanner.models.roster_model import Roster
from courtplanner.services.user_service import UserService, preset_password

TEST_USERS_FILE = "test_users.json"

@pytest.fixture
def temp_users_file(tmp_path):
    # Create a temporary file path for user data
    return tmp_path / TEST_USERS_FILE

@pytest.fixture
def roster():
    return Roster.from_scores({"Ann": 50, "Bo": 40, "SanderD": 25})

@pytest.fixture
def user_service(roster, temp_users_file):
    service = UserService(roster, data_file_path=str(temp_users_file))
    yield service
    # Clean up the temporary file after tests if it exists
    if os.path.exists(str(temp_users_file)):
        os.remove(str(temp_users_file))


class TestUserService:

    def test_every_roster_player_gets_an_account(self, user_service: UserService, temp_users_file):
        with open(temp_users_file, "r") as f:
            users_in_file = json.load(f)
        assert [u["player_name"] for u in users_in_file] == ["Ann", "Bo", "SanderD"]
        # Only hashes are stored
        assert all(u["password_hash"] != preset_password(u["player_name"]) for u in users_in_file)

    def test_authenticate_with_preset_password(self, user_service: UserService):
        account = user_service.authenticate("Ann", "Ann!2025")
        assert account.player_name == "Ann"

    def test_authenticate_ignores_name_case(self, user_service: UserService):
        account = user_service.authenticate("  sanderd ", "SanderD!2025")
        assert account.player_name == "SanderD"

    def test_authenticate_wrong_password(self, user_service: UserService):
        with pytest.raises(ValueError, match="Incorrect password."):
            user_service.authenticate("Ann", "ann!2025")

    def test_authenticate_unknown_player(self, user_service: UserService):
        with pytest.raises(ValueError, match="Unknown player name."):
            user_service.authenticate("Zed", "Zed!2025")

    def test_change_password(self, user_service: UserService):
        user_service.change_password("Bo", "new-secret")
        assert user_service.authenticate("Bo", "new-secret").player_name == "Bo"
        with pytest.raises(ValueError):
            user_service.authenticate("Bo", "Bo!2025")

    def test_change_password_unknown_account(self, user_service: UserService):
        with pytest.raises(ValueError, match="No account exists for Zed."):
            user_service.change_password("Zed", "whatever")

    def test_existing_passwords_survive_a_restart(self, roster, user_service: UserService):
        user_service.change_password("Ann", "kept-secret")
        restarted = UserService(roster, data_file_path=user_service.data_file_path)
        assert restarted.authenticate("Ann", "kept-secret").player_name == "Ann"

    def test_reset_restores_preset_passwords(self, user_service: UserService):
        user_service.change_password("Ann", "forgotten")
        user_service.reset_accounts()
        assert user_service.authenticate("Ann", "Ann!2025").player_name == "Ann"

    def test_players_removed_from_roster_lose_their_account(self, user_service: UserService):
        smaller = UserService(Roster.from_scores({"Ann": 50}), data_file_path=user_service.data_file_path)
        assert smaller.get_user_by_name("Bo") is None
        assert smaller.get_user_by_name("Ann") is not None

    def test_load_users_json_decode_error(self, user_service, temp_users_file):
        with open(temp_users_file, "w") as f:
            f.write("this is not json")

        users = user_service._load_users()
        assert users == []

    def test_created_at_round_trips_as_datetime(self, roster, user_service: UserService):
        with open(user_service.data_file_path, "r") as f:
            raw_data = json.load(f)
        assert isinstance(raw_data[0]["created_at"], str)

        # Pydantic parses the ISO string back to a datetime object
        retrieved_user = user_service.get_user_by_name("Ann")
        assert isinstance(retrieved_user.created_at, datetime)

    def test_init_creates_directory_and_file(self, roster, tmp_path):
        test_dir = tmp_path / "non_existent_dir"
        test_file_in_new_dir = test_dir / "users.json"

        assert not os.path.exists(test_dir)

        UserService(roster, data_file_path=str(test_file_in_new_dir))

        assert os.path.exists(test_file_in_new_dir)
        with open(test_file_in_new_dir, "r") as f:
            assert len(json.load(f)) == 3
