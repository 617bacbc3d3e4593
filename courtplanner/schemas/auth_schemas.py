from pydantic import BaseModel
from typing import Optional

class Token(BaseModel):
    access_token: str
    token_type: str
    player_name: str
    is_admin: bool = False

class TokenData(BaseModel):
    # The player name is the identity carried in the token
    player_name: Optional[str] = None
