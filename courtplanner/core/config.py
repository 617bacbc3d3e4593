from datetime import date, timedelta
from typing import Dict, List

from pydantic_settings import BaseSettings

# Club members and their skill scores, used when no ROSTER is configured.
DEFAULT_ROSTER: Dict[str, int] = {
    "Mattias": 55,
    "Ruben": 70,
    "Seppe": 55,
    "Tibo": 60,
    "Aaron": 50,
    "Koenraad": 10,
    "Brent": 5,
    "Nicolas": 15,
    "Remi": 20,
    "SanderD": 25,
    "Gilles": 10,
    "Thomas": 35,
    "Wout": 20,
    "SanderB": 75,
}

DEFAULT_TIME_SLOTS: List[str] = ["18u30-19u30", "19u30-20u30"]


class Settings(BaseSettings):
    SECRET_KEY: str = "YOUR_SECRET_KEY_HERE"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 720

    DATA_DIR: str = "courtplanner/data"
    LOG_LEVEL: str = "INFO"

    ADMIN_PLAYER: str = "Mattias"
    ROSTER: Dict[str, int] = DEFAULT_ROSTER

    SEASON_START: date = date(2025, 9, 28)
    SEASON_WEEKS: int = 20
    TIME_SLOTS: List[str] = DEFAULT_TIME_SLOTS
    COURT_COUNT: int = 3

    REMINDER_INTERVAL_SECONDS: int = 60

    class Config:
        env_file = ".env"

    def season_dates(self) -> List[date]:
        """One play date per week, starting at SEASON_START."""
        return [self.SEASON_START + timedelta(weeks=i) for i in range(self.SEASON_WEEKS)]


settings = Settings()
