from courtplanner.core.config import Settings
from courtplanner.models.roster_model import Roster
from courtplanner.services.notification_service import NotificationService
from courtplanner.services.scheduling_service import SchedulingService
from courtplanner.services.storage_service import USERS, JsonCollectionStore
from courtplanner.services.user_service import UserService


def build_services(settings: Settings):
    """Wire the store, inbox, scheduler and accounts from one Settings object."""
    roster = Roster.from_scores(settings.ROSTER)
    store = JsonCollectionStore(settings.DATA_DIR)
    notifications = NotificationService(store)
    scheduler = SchedulingService(
        roster=roster,
        time_slots=settings.TIME_SLOTS,
        season_dates=settings.season_dates(),
        store=store,
        court_count=settings.COURT_COUNT,
        notifier=notifications,
        reminder_interval=settings.REMINDER_INTERVAL_SECONDS,
    )
    users = UserService(roster, data_file_path=store.path_for(USERS))
    return scheduler, notifications, users
