from datetime import date
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Path
from pydantic import BaseModel, Field

from courtplanner.api.dependencies import get_current_actor, get_scheduling_service
from courtplanner.models.user_model import Actor
from courtplanner.routes.errors import to_http_exception
from courtplanner.services.scheduling_service import SchedulingService

router = APIRouter()


class AvailabilityUpdate(BaseModel):
    date: date
    slot: str
    available: bool
    player: Optional[str] = Field(None, description="Defaults to the current player. Only the administrator may set someone else.")


@router.get("/{day}/{slot}", response_model=List[str], summary="Available players for an hour")
async def get_available_players(
    day: date = Path(..., description="Play date (YYYY-MM-DD)"),
    slot: str = Path(..., description="Time slot id"),
    service: SchedulingService = Depends(get_scheduling_service),
):
    available = service.available_players(day, slot)
    return [name for name in service.roster.names if name in available]


@router.get("/{day}", response_model=Dict[str, List[str]], summary="Available players per slot for a date")
async def get_day_availability(
    day: date = Path(..., description="Play date (YYYY-MM-DD)"),
    service: SchedulingService = Depends(get_scheduling_service),
):
    result = {}
    for slot in service.time_slots:
        available = service.available_players(day, slot.id)
        result[slot.id] = [name for name in service.roster.names if name in available]
    return result


@router.put("", status_code=204, summary="Set availability")
async def set_availability(
    payload: AvailabilityUpdate,
    actor: Actor = Depends(get_current_actor),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Marks a player (un)available for one date and slot. Unset entries count as available."""
    player = payload.player or actor.player_name
    try:
        service.set_availability(actor, player, payload.date, payload.slot, payload.available)
    except Exception as e:
        raise to_http_exception(e)
    return None
