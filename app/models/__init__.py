from app.models.user import User, UserRole, SubRole
from app.models.attendance import Attendance
from app.models.task import Task, WorkStatus
from app.models.board import Board, BoardList, board_members
from app.models.card import Card, CardTimeEntry
from app.models.activity import Activity, ActivityAction, TargetType

__all__ = [
    "User",
    "UserRole",
    "SubRole",
    "Attendance",
    "Task",
    "WorkStatus",
    "Board",
    "BoardList",
    "board_members",
    "Card",
    "CardTimeEntry",
    "Activity",
    "ActivityAction",
    "TargetType",
]
