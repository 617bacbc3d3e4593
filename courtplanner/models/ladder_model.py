from pydantic import BaseModel


class LadderEntry(BaseModel):
    position: int
    player: str
    matches: int = 0
    wins: int = 0
    losses: int = 0
    win_percentage: int = 0
