from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from pydantic import BaseModel, Field

from courtplanner.api.dependencies import get_current_actor, get_user_service
from courtplanner.core import security
from courtplanner.core.config import settings
from courtplanner.core.logger import setup_logger
from courtplanner.models.user_model import Actor
from courtplanner.schemas.auth_schemas import Token
from courtplanner.services.user_service import UserService

logger = setup_logger(__name__)

router = APIRouter()


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=6)


@router.post("/login", response_model=Token, summary="Log in as a club member")
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    users: UserService = Depends(get_user_service),
):
    """
    Exchanges a player name and password for a bearer token.
    The player name is matched case-insensitively against the roster.
    """
    try:
        account = users.authenticate(form_data.username, form_data.password)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )
    access_token = security.create_access_token(account.player_name)
    logger.info(f"{account.player_name} logged in")
    return Token(
        access_token=access_token,
        token_type="bearer",
        player_name=account.player_name,
        is_admin=account.player_name == settings.ADMIN_PLAYER,
    )


@router.get("/me", response_model=Actor, summary="Who am I")
async def read_me(actor: Actor = Depends(get_current_actor)):
    return actor


@router.post("/password", status_code=204, summary="Change my password")
async def change_password(
    payload: ChangePasswordRequest,
    actor: Actor = Depends(get_current_actor),
    users: UserService = Depends(get_user_service),
):
    try:
        users.authenticate(actor.player_name, payload.current_password)
        users.change_password(actor.player_name, payload.new_password)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return None


@router.post("/reset-accounts", status_code=204, summary="Restore every preset password (Admin Only)")
async def reset_accounts(
    actor: Actor = Depends(get_current_actor),
    users: UserService = Depends(get_user_service),
):
    if not actor.is_admin:
        raise HTTPException(status_code=403, detail="Only the administrator can reset accounts.")
    users.reset_accounts()
    logger.info("All accounts were reset to their preset passwords")
    return None
