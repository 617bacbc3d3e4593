from typing import Dict, List, Optional

from pydantic import BaseModel, Field, validator


class Player(BaseModel):
    name: str = Field(min_length=1)
    score: int

    class Config:
        frozen = True


class TimeSlot(BaseModel):
    id: str
    label: str

    class Config:
        frozen = True


class Roster(BaseModel):
    """
    The club members that can be scheduled, in their canonical order.
    The order matters: candidate pools are always built by filtering the roster,
    so it decides which pairing wins a cost tie.
    """
    players: List[Player] = Field(default_factory=list)

    @validator('players')
    def unique_names(cls, v):
        names = [p.name for p in v]
        if len(names) != len(set(names)):
            raise ValueError("Player names must be unique")
        return v

    @classmethod
    def from_scores(cls, scores: Dict[str, int]) -> "Roster":
        return cls(players=[Player(name=name, score=score) for name, score in scores.items()])

    @property
    def names(self) -> List[str]:
        return [p.name for p in self.players]

    def canonical_name(self, raw: str) -> Optional[str]:
        """Case-insensitive lookup of a typed player name."""
        wanted = raw.strip().lower()
        return next((p.name for p in self.players if p.name.lower() == wanted), None)

    def __contains__(self, name: object) -> bool:
        return any(p.name == name for p in self.players)

    def __len__(self) -> int:
        return len(self.players)
