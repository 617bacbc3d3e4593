from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Path
from pydantic import BaseModel, Field

from courtplanner.api.dependencies import get_current_actor, get_scheduling_service
from courtplanner.models.challenge_model import Challenge
from courtplanner.models.reservation_model import Reservation
from courtplanner.models.user_model import Actor
from courtplanner.routes.errors import to_http_exception
from courtplanner.services.scheduling_service import SchedulingService

router = APIRouter()

# --- DTOs (Data Transfer Objects) ---

class ChallengeRequest(BaseModel):
    to_player: str = Field(..., description="Name of the player being challenged")
    date: date
    slot: str = Field(..., description="Time slot id, e.g. 19u30-20u30")

class ChallengeResultRequest(BaseModel):
    winner: str = Field(..., description="Name of the player who won the match")


@router.get("", response_model=List[Challenge], summary="My challenges")
async def list_my_challenges(
    actor: Actor = Depends(get_current_actor),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Every challenge the current player sent or received, newest first."""
    return service.challenges.for_player(actor.player_name)


@router.get("/incoming", response_model=List[Challenge], summary="Challenges waiting for my answer")
async def list_incoming_challenges(
    actor: Actor = Depends(get_current_actor),
    service: SchedulingService = Depends(get_scheduling_service),
):
    return service.challenges.incoming(actor.player_name)


@router.post("", response_model=Challenge, status_code=201, summary="Challenge another player")
async def create_challenge(
    payload: ChallengeRequest,
    actor: Actor = Depends(get_current_actor),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """
    Sends a singles challenge for one date and time slot.
    No court is booked until the challenged player accepts.
    """
    try:
        return service.create_challenge(actor, payload.to_player, payload.date, payload.slot)
    except Exception as e:
        raise to_http_exception(e)


@router.post("/{challenge_id}/accept", response_model=Reservation, summary="Accept a challenge")
async def accept_challenge(
    challenge_id: str = Path(..., description="The ID of the challenge"),
    actor: Actor = Depends(get_current_actor),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """
    Accepts a pending challenge and books the lowest free court for it.
    Fails when either player is unavailable or already playing, or when every court is taken.
    """
    try:
        return service.accept_challenge(actor, challenge_id)
    except Exception as e:
        raise to_http_exception(e)


@router.post("/{challenge_id}/decline", response_model=Challenge, summary="Decline a challenge")
async def decline_challenge(
    challenge_id: str = Path(..., description="The ID of the challenge"),
    actor: Actor = Depends(get_current_actor),
    service: SchedulingService = Depends(get_scheduling_service),
):
    try:
        return service.decline_challenge(actor, challenge_id)
    except Exception as e:
        raise to_http_exception(e)


@router.post("/{challenge_id}/result", response_model=Challenge, summary="Record the winner")
async def record_challenge_result(
    payload: ChallengeResultRequest,
    challenge_id: str = Path(..., description="The ID of the challenge"),
    actor: Actor = Depends(get_current_actor),
    service: SchedulingService = Depends(get_scheduling_service),
):
    try:
        return service.record_challenge_result(actor, challenge_id, payload.winner)
    except Exception as e:
        raise to_http_exception(e)
