from app.schemas.user import (
    UserCreate, UserUpdate, UserResponse, LoginRequest, LoginResponse, PasswordChange
)
from app.schemas.attendance import (
    AttendanceResponse, PunchOutResponse, CurrentSessionResponse, AttendanceStatsResponse
)
from app.schemas.task import (
    TaskCreate, TaskUpdate, TaskStatusUpdate, TaskResponse
)
from app.schemas.board import (
    BoardCreate, BoardUpdate, BoardResponse, BoardListCreate, BoardListUpdate, BoardListResponse
)
from app.schemas.card import (
    CardCreate, CardUpdate, CardResponse, TimerStart, AcknowledgeRequest
)
from app.schemas.activity import ActivityResponse, ACTION_DETAILS
from app.schemas.analytics import AnalyticsResponse, ComprehensiveAnalyticsResponse

__all__ = [
    "UserCreate", "UserUpdate", "UserResponse", "LoginRequest", "LoginResponse", "PasswordChange",
    "AttendanceResponse", "PunchOutResponse", "CurrentSessionResponse", "AttendanceStatsResponse",
    "TaskCreate", "TaskUpdate", "TaskStatusUpdate", "TaskResponse",
    "BoardCreate", "BoardUpdate", "BoardResponse", "BoardListCreate", "BoardListUpdate", "BoardListResponse",
    "CardCreate", "CardUpdate", "CardResponse", "TimerStart", "AcknowledgeRequest",
    "ActivityResponse", "ACTION_DETAILS",
    "AnalyticsResponse", "ComprehensiveAnalyticsResponse",
]
