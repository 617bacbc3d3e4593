import json
import os
from typing import Any

from courtplanner.core.logger import setup_logger

logger = setup_logger(__name__)

RESERVATIONS = "reservations"
CHALLENGES = "challenges"
AVAILABILITY = "availability"
REMINDERS = "reminders"
NOTIFICATIONS = "notifications"
USERS = "users"

# Collections another instance may replace wholesale at any time
SYNCED_COLLECTIONS = (RESERVATIONS, CHALLENGES, AVAILABILITY, REMINDERS)


class JsonCollectionStore:
    """
    Key-value store with one JSON file per collection.
    Collections are always read and written whole; there are no partial writes.
    """

    def __init__(self, data_dir: str):
        self.data_dir = data_dir
        os.makedirs(self.data_dir, exist_ok=True)

    def path_for(self, name: str) -> str:
        return os.path.join(self.data_dir, f"{name}.json")

    def load(self, name: str, default: Any = None) -> Any:
        filepath = self.path_for(name)
        if not os.path.exists(filepath):
            return default
        try:
            with open(filepath, "r") as f:
                content = f.read()
                if not content:
                    return default
                return json.loads(content)
        except json.JSONDecodeError:
            logger.warning(f"Could not decode JSON from {filepath}, using an empty {name} collection")
            return default

    def save(self, name: str, data: Any) -> None:
        with open(self.path_for(name), "w") as f:
            json.dump(data, f, indent=4, default=str)
