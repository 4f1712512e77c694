from pydantic import BaseModel, Field
from typing import List, Optional, Union
from datetime import datetime
from app.models.task import WorkStatus
from app.models.user import SubRole


class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1)
    assigned_sub_role: SubRole
    # A user id, or "all" / None for the whole department
    specific_user: Optional[Union[int, str]] = None


class TaskUpdate(TaskCreate):
    pass


class TaskStatusUpdate(BaseModel):
    status: WorkStatus


class TaskResponse(BaseModel):
    id: int
    title: str
    assigned_sub_role: str
    assigned_user_id: Optional[int] = None
    assigned_user_name: Optional[str] = ""
    status: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TaskListResponse(BaseModel):
    count: int
    tasks: List[TaskResponse]
