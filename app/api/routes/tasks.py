from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.models.user import User
from app.schemas.task import TaskCreate, TaskListResponse, TaskResponse, TaskStatusUpdate, TaskUpdate
from app.services.task_service import task_service
from app.api.deps import get_current_user, get_ceo_user

router = APIRouter(prefix="/tasks", tags=["Tasks"])


@router.post("/add", status_code=status.HTTP_201_CREATED)
async def add_task(
    task_data: TaskCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_ceo_user)
):
    """Assign a task to a department or a single employee."""
    task = task_service.create_task(db, task_data)
    return {"message": "Task added successfully", "task": TaskResponse.model_validate(task)}


@router.get("/my-tasks", response_model=TaskListResponse)
async def get_my_tasks(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    tasks = task_service.my_tasks(db, current_user)
    return {"count": len(tasks), "tasks": tasks}


@router.get("/all", response_model=TaskListResponse)
async def get_all_tasks(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_ceo_user)
):
    tasks = task_service.all_tasks(db)
    return {"count": len(tasks), "tasks": tasks}


@router.put("/{task_id}/status")
async def update_task_status(
    task_id: int,
    data: TaskStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    task = task_service.update_status(db, task_id, data.status)
    return {"message": f"Task marked as {task.status}", "task": TaskResponse.model_validate(task)}


@router.put("/{task_id}")
async def update_task(
    task_id: int,
    task_data: TaskUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_ceo_user)
):
    task = task_service.update_task(db, task_id, task_data)
    return {"message": "Task updated successfully", "task": TaskResponse.model_validate(task)}


@router.delete("/{task_id}")
async def delete_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_ceo_user)
):
    task_service.delete_task(db, task_id)
    return {"message": "Task deleted successfully"}
