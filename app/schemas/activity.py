"""Activity log payloads.

Each ``ActivityAction`` has exactly one details model. ``ACTION_DETAILS`` is
the lookup the logger uses to validate a payload before it is written.
"""
from pydantic import BaseModel
from typing import Dict, List, Optional, Type
from datetime import datetime
from app.models.activity import ActivityAction


class BoardCreatedDetails(BaseModel):
    description: Optional[str] = None
    member_count: int = 0


class ListCreatedDetails(BaseModel):
    position: int = 0


class ListMovedDetails(BaseModel):
    from_position: int
    to_position: int


class ListDeletedDetails(BaseModel):
    card_count: int = 0


class CardCreatedDetails(BaseModel):
    list_id: int
    list_name: str


class CardUpdatedDetails(BaseModel):
    changed_fields: List[str] = []


class CardMovedDetails(BaseModel):
    from_list: Optional[int] = None
    to_list: Optional[int] = None
    from_position: Optional[int] = None
    to_position: Optional[int] = None


class CardStatusChangedDetails(BaseModel):
    old_status: str
    new_status: str


class CardDeletedDetails(BaseModel):
    list_id: int
    status: str


ACTION_DETAILS: Dict[ActivityAction, Type[BaseModel]] = {
    ActivityAction.CREATED_BOARD: BoardCreatedDetails,
    ActivityAction.CREATED_LIST: ListCreatedDetails,
    ActivityAction.MOVED_LIST: ListMovedDetails,
    ActivityAction.DELETED_LIST: ListDeletedDetails,
    ActivityAction.CREATED_CARD: CardCreatedDetails,
    ActivityAction.UPDATED_CARD: CardUpdatedDetails,
    ActivityAction.MOVED_CARD: CardMovedDetails,
    ActivityAction.CHANGED_CARD_STATUS: CardStatusChangedDetails,
    ActivityAction.DELETED_CARD: CardDeletedDetails,
}


class ActivityResponse(BaseModel):
    id: int
    user_id: Optional[int] = None
    user_name: str
    user_role: str
    action: str
    target_type: str
    target_id: int
    target_name: str
    details: Optional[dict] = None
    board_id: Optional[int] = None
    board_name: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class ActivityPageResponse(BaseModel):
    count: int
    total_count: int
    page: int
    total_pages: int
    activities: List[ActivityResponse]


class RecentActivityResponse(BaseModel):
    count: int
    activities: List[ActivityResponse]


class EmployeeRef(BaseModel):
    id: int
    name: str
    email: str
    role: Optional[str] = None


class EmployeeActivityStats(BaseModel):
    employee: EmployeeRef
    action_counts: Dict[str, int]
    last_activity: Optional[datetime] = None


class ActivityStatsResponse(BaseModel):
    period: str
    stats: List[EmployeeActivityStats]


class CleanupResponse(BaseModel):
    message: str
    deleted_count: int
