import json
import os
from typing import List, Optional, Dict, Any

from courtplanner.core import security
from courtplanner.models.roster_model import Roster
from courtplanner.models.user_model import UserAccount

DATA_DIR = "courtplanner/data"
USERS_FILE = os.path.join(DATA_DIR, "users.json")

def preset_password(player_name: str) -> str:
    """Every member starts with a fixed password derived from their name."""
    return f"{player_name}!2025"

class UserService:
    def __init__(self, roster: Roster, data_file_path: str = USERS_FILE):
        self.roster = roster
        self.data_file_path = data_file_path
        # Ensure data directory exists
        os.makedirs(os.path.dirname(self.data_file_path) or ".", exist_ok=True)
        self.ensure_preset_accounts()

    def _load_users(self) -> List[Dict[str, Any]]:
        if not os.path.exists(self.data_file_path):
            return []
        try:
            with open(self.data_file_path, "r") as f:
                return json.load(f)
        except json.JSONDecodeError:
            # Handle case where file is empty or corrupted
            return []

    def _save_users(self, users: List[Dict[str, Any]]):
        with open(self.data_file_path, "w") as f:
            json.dump(users, f, indent=4, default=str) # Use default=str for datetime serialization

    def ensure_preset_accounts(self) -> List[UserAccount]:
        """
        Makes sure every roster player has exactly one account.
        Existing accounts are kept; accounts for names no longer on the roster are dropped.
        """
        stored = {u.get("player_name"): u for u in self._load_users()}
        accounts = []
        for name in self.roster.names:
            if name in stored:
                accounts.append(UserAccount(**stored[name]))
            else:
                accounts.append(UserAccount(
                    player_name=name,
                    password_hash=security.get_password_hash(preset_password(name)),
                ))
        self._save_users([a.model_dump(mode="json") for a in accounts])
        return accounts

    def reset_accounts(self) -> List[UserAccount]:
        """Restores every preset password."""
        self._save_users([])
        return self.ensure_preset_accounts()

    def get_user_by_name(self, player_name: str) -> Optional[UserAccount]:
        users = self._load_users()
        for user_dict in users:
            if user_dict.get("player_name") == player_name:
                return UserAccount(**user_dict)
        return None

    def authenticate(self, raw_name: str, password: str) -> UserAccount:
        player_name = self.roster.canonical_name(raw_name)
        if not player_name:
            raise ValueError("Unknown player name.")
        account = self.get_user_by_name(player_name)
        if account is None:
            raise ValueError("No account exists for this player.")
        if not security.verify_password(password, account.password_hash):
            raise ValueError("Incorrect password.")
        return account

    def change_password(self, player_name: str, new_password: str) -> UserAccount:
        users = self._load_users()
        for user_dict in users:
            if user_dict.get("player_name") == player_name:
                user_dict["password_hash"] = security.get_password_hash(new_password)
                self._save_users(users)
                return UserAccount(**user_dict)
        raise ValueError(f"No account exists for {player_name}.")
