from typing import Any

from fastapi import APIRouter, Body, Depends, Path

from courtplanner.api.dependencies import get_current_actor, get_notification_service, get_scheduling_service
from courtplanner.core.logger import setup_logger
from courtplanner.models.user_model import Actor
from courtplanner.routes.errors import to_http_exception
from courtplanner.services.notification_service import NotificationService
from courtplanner.services.permissions import require_admin
from courtplanner.services.scheduling_service import SchedulingService

logger = setup_logger(__name__)

router = APIRouter()


@router.get("/{collection}", summary="Export a whole collection")
async def export_collection(
    collection: str = Path(..., description="reservations, challenges, availability or reminders"),
    actor: Actor = Depends(get_current_actor),
    service: SchedulingService = Depends(get_scheduling_service),
) -> Any:
    try:
        return service.export_collection(collection)
    except Exception as e:
        raise to_http_exception(e)


@router.put("/{collection}", status_code=204, summary="Adopt a collection written elsewhere (Admin Only)")
async def adopt_collection(
    collection: str = Path(..., description="reservations, challenges, availability or reminders"),
    data: Any = Body(...),
    actor: Actor = Depends(get_current_actor),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """
    Replaces one collection with the given full snapshot and persists it.
    The last write wins: changes made here since the snapshot was taken are lost.
    """
    try:
        require_admin(actor)
        service.adopt_collection(collection, data)
    except Exception as e:
        raise to_http_exception(e)
    return None


@router.post("/reload", status_code=204, summary="Re-read every collection from disk (Admin Only)")
async def reload_collections(
    actor: Actor = Depends(get_current_actor),
    service: SchedulingService = Depends(get_scheduling_service),
    notifications: NotificationService = Depends(get_notification_service),
):
    try:
        require_admin(actor)
        service.reload()
        notifications.reload()
    except Exception as e:
        raise to_http_exception(e)
    logger.info(f"Collections reloaded by {actor.player_name}")
    return None
