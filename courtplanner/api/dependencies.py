from functools import lru_cache

from fastapi import Depends, HTTPException, status

from courtplanner.core import security
from courtplanner.core.config import settings
from courtplanner.models.user_model import Actor
from courtplanner.services.factory import build_services
from courtplanner.services.notification_service import NotificationService
from courtplanner.services.scheduling_service import SchedulingService
from courtplanner.services.user_service import UserService


@lru_cache()
def _services():
    return build_services(settings)

def get_scheduling_service() -> SchedulingService:
    return _services()[0]

def get_notification_service() -> NotificationService:
    return _services()[1]

def get_user_service() -> UserService:
    return _services()[2]

def get_current_actor(
    token: str = Depends(security.oauth2_scheme),
    users: UserService = Depends(get_user_service),
) -> Actor:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    token_data = security.decode_access_token(token)
    if token_data is None:
        raise credentials_exception
    account = users.get_user_by_name(token_data.player_name)
    if account is None:
        raise credentials_exception
    return Actor(player_name=account.player_name, is_admin=account.player_name == settings.ADMIN_PLAYER)
