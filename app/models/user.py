from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
import enum
from app.core.database import Base


class UserRole(str, enum.Enum):
    CEO = "CEO"
    EMPLOYEE = "Employee"


class SubRole(str, enum.Enum):
    DEVELOPER = "Developer"
    DESIGNER = "Designer"
    CONTENT_WRITER = "Content Writer"
    SEO = "SEO"
    MARKETING = "Marketing"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(20), default=UserRole.EMPLOYEE.value, nullable=False, index=True)
    sub_role = Column(String(50), nullable=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    attendances = relationship("Attendance", back_populates="user", cascade="all, delete-orphan")
    tasks = relationship("Task", back_populates="assigned_user")
    assigned_cards = relationship("Card", back_populates="assigned_to")

    @property
    def is_ceo(self) -> bool:
        return self.role == UserRole.CEO.value

    @property
    def display_role(self) -> str:
        """Role label used on activity records."""
        if self.is_ceo:
            return UserRole.CEO.value
        return self.sub_role or UserRole.EMPLOYEE.value
