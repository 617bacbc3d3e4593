from typing import List

from fastapi import APIRouter, Depends

from courtplanner.api.dependencies import get_scheduling_service
from courtplanner.models.ladder_model import LadderEntry
from courtplanner.services.scheduling_service import SchedulingService

router = APIRouter()


@router.get("", response_model=List[LadderEntry], summary="Club ladder")
async def get_ladder(service: SchedulingService = Depends(get_scheduling_service)):
    """Standings from every recorded singles result: most wins first, then most matches played."""
    return service.ladder()
