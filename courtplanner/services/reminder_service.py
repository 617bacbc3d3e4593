"""Day-of match reminders"""
import asyncio
from datetime import date
from typing import Callable, Iterable, Optional, Set

from courtplanner.core.logger import setup_logger
from courtplanner.models.notification_model import MatchReminder
from courtplanner.services.notification_service import Notifier, deliver
from courtplanner.services.reservation_service import ReservationBook

logger = setup_logger(__name__)


def reminder_key(day: date, player: str) -> str:
    return f"{day.isoformat()}|{player}"


class ReminderService:
    """
    Reminds every player with a match today, at most once per (date, player).
    The sent keys are kept so repeated ticks, restarts and other instances
    sharing the same store do not remind twice.
    """

    def __init__(
        self,
        book: ReservationBook,
        notifier: Optional[Notifier] = None,
        sent: Optional[Iterable[str]] = None,
        check_interval: int = 60,
        on_sent: Optional[Callable[[], None]] = None,
        today: Callable[[], date] = date.today,
    ):
        """
        Args:
            book: Reservations to scan
            notifier: Where reminders go
            sent: Keys of reminders already sent
            check_interval: Seconds between checks
            on_sent: Called after a tick that sent at least one reminder
            today: Clock for the current date
        """
        self.book = book
        self.notifier = notifier
        self.sent: Set[str] = set(sent or [])
        self.check_interval = check_interval
        self.on_sent = on_sent
        self.today = today
        self.running = False

    def tick(self, today: Optional[date] = None) -> int:
        """Send the reminders due today. Returns how many were sent."""
        today = today or self.today()
        count = 0
        for reservation in self.book.for_date(today):
            for player in reservation.players:
                key = reminder_key(today, player)
                if key in self.sent:
                    continue
                deliver(self.notifier, player, MatchReminder(
                    date=reservation.date, slot=reservation.time_slot, court=reservation.court,
                ))
                self.sent.add(key)
                count += 1
        if count:
            logger.info(f"Sent {count} match reminders for {today}")
            if self.on_sent is not None:
                self.on_sent()
        return count

    def replace(self, sent: Iterable[str]) -> None:
        self.sent = set(sent or [])

    async def start(self):
        """Start the reminder checking loop"""
        self.running = True
        logger.info(f"Starting reminder service (check every {self.check_interval}s)")

        while self.running:
            try:
                self.tick()
            except Exception as e:
                logger.error(f"Error in reminder loop: {e}")

            await asyncio.sleep(self.check_interval)

    def stop(self):
        """Stop the reminder checking loop"""
        self.running = False
        logger.info("Stopping reminder service")
