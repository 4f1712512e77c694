from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from datetime import datetime
from app.models.task import WorkStatus
from app.schemas.board import MemberResponse


class CardCreate(BaseModel):
    list_id: int
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    assigned_to_id: Optional[int] = None
    due_date: Optional[datetime] = None


class CardUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    list_id: Optional[int] = None
    assigned_to_id: Optional[int] = None
    due_date: Optional[datetime] = None
    position: Optional[int] = Field(None, ge=0)
    status: Optional[WorkStatus] = None


class TimerStart(BaseModel):
    note: Optional[str] = ""


class AcknowledgeRequest(BaseModel):
    card_ids: List[int] = []


class TimeEntryResponse(BaseModel):
    id: int
    start_time: datetime
    end_time: Optional[datetime] = None
    duration: int = 0
    note: Optional[str] = ""

    class Config:
        from_attributes = True


class CardResponse(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    list_id: int
    assigned_to_id: Optional[int] = None
    assigned_to: Optional[MemberResponse] = None
    due_date: Optional[datetime] = None
    position: int
    status: str
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    total_minutes: int = 0
    time_entries: List[TimeEntryResponse] = []
    carried_from_date: Optional[datetime] = None
    is_carried_over: bool = False
    acknowledged_by_employee: bool = False
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CardListResponse(BaseModel):
    count: int
    cards: List[CardResponse]


class TimerStopResponse(BaseModel):
    message: str
    duration: int
    total_minutes: int
    card: CardResponse


class AcknowledgeResponse(BaseModel):
    message: str
    modified_count: int


class TimeSpent(BaseModel):
    hours: int
    minutes: int
    total_minutes: int


class StatusBreakdown(BaseModel):
    total: int = 0
    completed: int = 0
    in_progress: int = 0
    on_hold: int = 0
    pending: int = 0
    total_minutes: int = 0


class WorkSummary(BaseModel):
    total_tasks: int
    completed_tasks: int
    in_progress_tasks: int
    pending_tasks: int
    on_hold_tasks: int
    completion_rate: int
    total_time_spent: TimeSpent


class WorkSummaryResponse(BaseModel):
    period: str
    summary: WorkSummary
    tasks_by_board: Dict[str, StatusBreakdown]
    cards: List[CardResponse]
