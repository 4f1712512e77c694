from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class MemberResponse(BaseModel):
    id: int
    name: str
    email: str

    class Config:
        from_attributes = True


class BoardCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    members: List[int] = []


class BoardUpdate(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None


class BoardMemberAdd(BaseModel):
    board_id: int
    user_id: int


class BoardResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    created_by_id: Optional[int] = None
    members: List[MemberResponse] = []
    created_at: datetime

    class Config:
        from_attributes = True


class BoardListCreate(BaseModel):
    board_id: int
    title: str = Field(..., min_length=1)


class BoardListUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    position: Optional[int] = Field(None, ge=0)


class BoardListResponse(BaseModel):
    id: int
    title: str
    board_id: int
    position: int
    created_at: datetime

    class Config:
        from_attributes = True
