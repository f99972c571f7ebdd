from pydantic import BaseModel
from typing import Optional
from enum import Enum


class Tier(str, Enum):
    FREE = "free"
    STANDARD = "standard"
    PREMIUM = "premium"


class Board(str, Enum):
    CBSE = "CBSE"
    ICSE = "ICSE"
    ISC = "ISC"


class UserBase(BaseModel):
    username: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    grade: Optional[int] = None
    board: Optional[Board] = None
    subscription_tier: Tier = Tier.FREE


class UserCreate(UserBase):
    pass


class User(UserBase):
    id: int

    class Config:
        from_attributes = True
