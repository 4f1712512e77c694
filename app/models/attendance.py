from sqlalchemy import Column, Integer, DateTime, ForeignKey, Float, Index, text
from sqlalchemy.orm import relationship
from datetime import datetime
from app.core.database import Base


class Attendance(Base):
    __tablename__ = "attendances"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    punch_in_time = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    punch_out_time = Column(DateTime, nullable=True)
    duration = Column(Float, nullable=False, default=0)  # seconds

    # Relationships
    user = relationship("User", back_populates="attendances")

    # At most one open session per user
    __table_args__ = (
        Index(
            "uq_attendances_open_session",
            "user_id",
            unique=True,
            sqlite_where=text("punch_out_time IS NULL"),
            postgresql_where=text("punch_out_time IS NULL"),
        ),
    )

    @property
    def is_active(self) -> bool:
        return self.punch_out_time is None
