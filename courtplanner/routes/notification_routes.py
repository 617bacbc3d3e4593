from typing import List

from fastapi import APIRouter, Depends

from courtplanner.api.dependencies import get_current_actor, get_notification_service
from courtplanner.models.notification_model import Notification
from courtplanner.models.user_model import Actor
from courtplanner.routes.errors import to_http_exception
from courtplanner.services.notification_service import NotificationService

router = APIRouter()

@router.get("/", response_model=List[Notification])
async def get_user_notifications_endpoint(
    actor: Actor = Depends(get_current_actor),
    service: NotificationService = Depends(get_notification_service),
    skip: int = 0,
    limit: int = 100,
):
    return service.get_user_notifications(actor.player_name, skip=skip, limit=limit)

@router.get("/unread-count", response_model=int)
async def get_unread_count_endpoint(
    actor: Actor = Depends(get_current_actor),
    service: NotificationService = Depends(get_notification_service),
):
    return service.unread_count(actor.player_name)

@router.patch("/{notification_id}/read", response_model=Notification)
async def mark_notification_as_read_endpoint(
    notification_id: str,
    actor: Actor = Depends(get_current_actor),
    service: NotificationService = Depends(get_notification_service),
):
    try:
        return service.mark_notification_as_read(notification_id, actor.player_name)
    except Exception as e:
        raise to_http_exception(e)

@router.post("/read-all", response_model=List[Notification])
async def mark_all_user_notifications_as_read_endpoint(
    actor: Actor = Depends(get_current_actor),
    service: NotificationService = Depends(get_notification_service),
):
    # Empty list when nothing was unread
    return service.mark_all_user_notifications_as_read(actor.player_name)
