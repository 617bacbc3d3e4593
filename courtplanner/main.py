import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI

from courtplanner.api.dependencies import get_scheduling_service, get_user_service
from courtplanner.core.logger import setup_logger
from courtplanner.routes import (
    auth_routes,
    availability_routes,
    challenge_routes,
    ladder_routes,
    notification_routes,
    reservation_routes,
    sync_routes,
)

logger = setup_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    get_user_service().ensure_preset_accounts()
    reminders = get_scheduling_service().reminders
    task = asyncio.create_task(reminders.start())
    try:
        yield
    finally:
        reminders.stop()
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Court planner stopped")


app = FastAPI(title="Tennis Court Planner API", lifespan=lifespan)

# Include routers
app.include_router(auth_routes.router, prefix="/auth", tags=["Authentication"])
app.include_router(reservation_routes.router, prefix="/reservations", tags=["Reservations"])
app.include_router(availability_routes.router, prefix="/availability", tags=["Availability"])
app.include_router(challenge_routes.router, prefix="/challenges", tags=["Challenges"])
app.include_router(ladder_routes.router, prefix="/ladder", tags=["Ladder"])
app.include_router(notification_routes.router, prefix="/notifications", tags=["Notifications"])
app.include_router(sync_routes.router, prefix="/sync", tags=["Sync"])


@app.get("/")
async def read_root():
    return {"message": "Tennis Court Planner API"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("courtplanner.main:app", host="0.0.0.0", port=8000, reload=True)
