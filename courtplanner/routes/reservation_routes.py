from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query
from pydantic import BaseModel, Field

from courtplanner.api.dependencies import get_current_actor, get_scheduling_service
from courtplanner.models.reservation_model import MatchType, Reservation
from courtplanner.models.roster_model import Player, TimeSlot
from courtplanner.models.user_model import Actor
from courtplanner.routes.errors import to_http_exception
from courtplanner.services.scheduling_service import SchedulingService

router = APIRouter()

# --- DTOs (Data Transfer Objects) ---

class ReservationRequest(BaseModel):
    date: date
    time_slot: str = Field(..., description="Time slot id, e.g. 18u30-19u30")
    court: int = Field(..., ge=1, description="Court number")
    match_type: MatchType = Field(MatchType.SINGLE, description="single (2 players) or double (4 players)")
    players: List[str] = Field(..., description="Singles: [a, b]. Doubles: [team A x2, team B x2].")

class SeasonResponse(BaseModel):
    dates: List[date]
    time_slots: List[TimeSlot]
    court_count: int
    players: List[Player]

class HourOccupancyResponse(BaseModel):
    date: date
    time_slot: str
    available_players: List[str]
    booked_players: List[str]
    free_court: Optional[int] = None


@router.get("/season", response_model=SeasonResponse, summary="Season grid and roster")
async def get_season(service: SchedulingService = Depends(get_scheduling_service)):
    """The play dates, time slots, court count and roster the planner works with."""
    return SeasonResponse(
        dates=service.season_dates,
        time_slots=service.time_slots,
        court_count=service.court_count,
        players=service.roster.players,
    )


@router.get("", response_model=List[Reservation], summary="List reservations")
async def list_reservations(
    day: Optional[date] = Query(None, alias="date", description="Only reservations on this date"),
    service: SchedulingService = Depends(get_scheduling_service),
):
    if day is not None:
        return service.reservations_for(day)
    return service.reservations


@router.get("/occupancy/{day}/{time_slot}", response_model=HourOccupancyResponse, summary="Who can still play in an hour")
async def get_hour_occupancy(
    day: date = Path(..., description="Play date (YYYY-MM-DD)"),
    time_slot: str = Path(..., description="Time slot id"),
    service: SchedulingService = Depends(get_scheduling_service),
):
    roster_order = service.roster.names
    available = service.available_players(day, time_slot)
    booked = service.players_booked(day, time_slot)
    return HourOccupancyResponse(
        date=day,
        time_slot=time_slot,
        available_players=[p for p in roster_order if p in available],
        booked_players=[p for p in roster_order if p in booked],
        free_court=service.free_court(day, time_slot),
    )


@router.post("", response_model=Reservation, status_code=201, summary="Book a court")
async def create_reservation(
    payload: ReservationRequest,
    actor: Actor = Depends(get_current_actor),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """
    Books (or rebooks) one court for one hour.

    - Players must be available and not already playing in that hour.
    - Non-administrators can only book matches they play in themselves.
    - Rebooking a taken court is only allowed for its players or the administrator.
    """
    try:
        return service.reserve(
            actor, payload.date, payload.time_slot, payload.court, payload.match_type, payload.players,
        )
    except Exception as e:
        raise to_http_exception(e)


@router.delete("/{day}/{time_slot}/{court}", status_code=204, summary="Remove a reservation")
async def delete_reservation(
    day: date = Path(..., description="Play date (YYYY-MM-DD)"),
    time_slot: str = Path(..., description="Time slot id"),
    court: int = Path(..., ge=1, description="Court number"),
    actor: Actor = Depends(get_current_actor),
    service: SchedulingService = Depends(get_scheduling_service),
):
    try:
        service.remove_reservation(actor, day, time_slot, court)
    except Exception as e:
        raise to_http_exception(e)
    return None


@router.post("/plan-all", response_model=List[Reservation], summary="Plan the whole season (Admin Only)")
async def plan_all_balanced(
    actor: Actor = Depends(get_current_actor),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """
    Replaces every reservation with a fresh balanced plan for the whole season.
    Opponent history from the current reservations steers the new pairings away from rematches.
    """
    try:
        return service.plan_all_balanced(actor)
    except Exception as e:
        raise to_http_exception(e)


@router.post("/plan-week/{day}", response_model=List[Reservation], summary="Replan one play date (Admin Only)")
async def plan_selected_week(
    day: date = Path(..., description="Play date to replan (YYYY-MM-DD)"),
    actor: Actor = Depends(get_current_actor),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """
    Removes this date's reservations and plans it again. Other dates are left untouched.
    Returns the new reservations of the date.
    """
    try:
        return service.plan_selected_week(actor, day)
    except Exception as e:
        raise to_http_exception(e)
