from typing import List, Optional, Tuple, Union
from sqlalchemy import or_
from sqlalchemy.orm import Session
from app.core.exceptions import NotFoundError, ValidationError
from app.models.task import Task, WorkStatus
from app.models.user import User
from app.schemas.task import TaskCreate, TaskUpdate
import logging

logger = logging.getLogger(__name__)


class TaskService:
    """Department and individual tasks."""

    def _resolve_assignee(self, db: Session, specific_user: Optional[Union[int, str]]) -> Tuple[Optional[int], str]:
        # "all" or nothing targets the whole department
        if specific_user is None or specific_user == "" or specific_user == "all":
            return None, ""
        try:
            user_id = int(specific_user)
        except (TypeError, ValueError):
            raise ValidationError("specific_user must be a user id or 'all'")

        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError("Assigned user not found")
        return user.id, user.name

    def get_task(self, db: Session, task_id: int) -> Task:
        task = db.query(Task).filter(Task.id == task_id).first()
        if not task:
            raise NotFoundError("Task not found")
        return task

    def create_task(self, db: Session, data: TaskCreate) -> Task:
        user_id, user_name = self._resolve_assignee(db, data.specific_user)
        task = Task(
            title=data.title.strip(),
            assigned_sub_role=data.assigned_sub_role.value,
            assigned_user_id=user_id,
            assigned_user_name=user_name,
            status=WorkStatus.PENDING.value
        )
        db.add(task)
        db.commit()
        db.refresh(task)
        return task

    def my_tasks(self, db: Session, user: User) -> List[Task]:
        """Tasks assigned to the user plus department tasks for their sub-role."""
        return db.query(Task).filter(
            or_(
                Task.assigned_user_id == user.id,
                (Task.assigned_user_id.is_(None)) & (Task.assigned_sub_role == user.sub_role)
            )
        ).order_by(Task.created_at.desc(), Task.id.desc()).all()

    def all_tasks(self, db: Session) -> List[Task]:
        return db.query(Task).order_by(Task.created_at.desc(), Task.id.desc()).all()

    def update_status(self, db: Session, task_id: int, status: WorkStatus) -> Task:
        task = self.get_task(db, task_id)
        task.status = WorkStatus(status).value
        db.commit()
        db.refresh(task)
        return task

    def update_task(self, db: Session, task_id: int, data: TaskUpdate) -> Task:
        task = self.get_task(db, task_id)
        user_id, user_name = self._resolve_assignee(db, data.specific_user)

        task.title = data.title.strip()
        task.assigned_sub_role = data.assigned_sub_role.value
        task.assigned_user_id = user_id
        task.assigned_user_name = user_name

        db.commit()
        db.refresh(task)
        return task

    def delete_task(self, db: Session, task_id: int):
        task = self.get_task(db, task_id)
        db.delete(task)
        db.commit()


# Singleton instance
task_service = TaskService()
