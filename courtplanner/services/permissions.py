from typing import Iterable

from courtplanner.models.user_model import Actor
from courtplanner.services.errors import AuthorizationError


def require_player(actor: Actor) -> str:
    if not actor.is_authenticated:
        raise AuthorizationError("You must be logged in to do this.")
    return actor.player_name


def require_admin(actor: Actor) -> None:
    if not actor.is_admin:
        raise AuthorizationError("Only the administrator can do this.")


def can_modify(actor: Actor, players: Iterable[str]) -> bool:
    """Administrators may touch anything, players only matches they play in."""
    return actor.is_admin or (actor.is_authenticated and actor.player_name in players)
