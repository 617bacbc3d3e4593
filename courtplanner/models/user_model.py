from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, EmailStr

class UserAccount(BaseModel):
    player_name: str
    password_hash: str
    email: Optional[EmailStr] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Config:
        json_encoders = {
            datetime: lambda v: v.isoformat(),
        }
        from_attributes = True


class Actor(BaseModel):
    """Who is calling: a logged-in player (or nobody) plus the administrator flag."""
    player_name: Optional[str] = None
    is_admin: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.player_name is not None
