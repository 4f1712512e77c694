from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON, Index
from datetime import datetime
import enum
from app.core.database import Base


class ActivityAction(str, enum.Enum):
    CREATED_BOARD = "created_board"
    CREATED_LIST = "created_list"
    CREATED_CARD = "created_card"
    UPDATED_CARD = "updated_card"
    MOVED_CARD = "moved_card"
    MOVED_LIST = "moved_list"
    DELETED_CARD = "deleted_card"
    DELETED_LIST = "deleted_list"
    CHANGED_CARD_STATUS = "changed_card_status"


class TargetType(str, enum.Enum):
    BOARD = "board"
    LIST = "list"
    CARD = "card"


class Activity(Base):
    """Append-only audit record of a kanban mutation."""

    __tablename__ = "activities"

    id = Column(Integer, primary_key=True, index=True)
    # Name and role are snapshotted so records survive user removal
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    user_name = Column(String(255), nullable=False)
    user_role = Column(String(50), nullable=False)
    action = Column(String(50), nullable=False)
    target_type = Column(String(20), nullable=False)
    target_id = Column(Integer, nullable=False)
    target_name = Column(String(255), nullable=False)
    details = Column(JSON, default=dict)
    board_id = Column(Integer, nullable=True)
    board_name = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("ix_activities_user_created", "user_id", "created_at"),
        Index("ix_activities_created", "created_at"),
        Index("ix_activities_board_created", "board_id", "created_at"),
        Index("ix_activities_action_created", "action", "created_at"),
        Index("ix_activities_target", "target_type", "target_id"),
    )
