from pydantic import BaseModel
from typing import Optional


class Subject(BaseModel):
    id: int
    name: str
    grade_level: int
    board: str

    class Config:
        from_attributes = True


class Chapter(BaseModel):
    id: int
    subject_id: int
    name: str
    description: Optional[str] = None

    class Config:
        from_attributes = True
