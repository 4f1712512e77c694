from sqlalchemy import Column, Integer, String, DateTime, Text, Boolean, ForeignKey, Index, CheckConstraint, text
from sqlalchemy.orm import relationship
from datetime import datetime
from app.core.database import Base
from app.models.task import WorkStatus


class Card(Base):
    __tablename__ = "cards"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    list_id = Column(Integer, ForeignKey("lists.id", ondelete="CASCADE"), nullable=False, index=True)
    assigned_to_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    due_date = Column(DateTime, nullable=True)
    position = Column(Integer, default=0, nullable=False)
    status = Column(String(20), default=WorkStatus.PENDING.value, nullable=False)

    # Time tracking
    start_time = Column(DateTime, nullable=True)
    end_time = Column(DateTime, nullable=True)
    total_minutes = Column(Integer, default=0, nullable=False)

    # Daily progress tracking
    carried_from_date = Column(DateTime, nullable=True)
    is_carried_over = Column(Boolean, default=False, nullable=False)
    acknowledged_by_employee = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    board_list = relationship("BoardList", back_populates="cards")
    assigned_to = relationship("User", back_populates="assigned_cards")
    time_entries = relationship(
        "CardTimeEntry",
        back_populates="card",
        cascade="all, delete-orphan",
        order_by="CardTimeEntry.id",
    )

    __table_args__ = (
        CheckConstraint("total_minutes >= 0", name="ck_cards_total_minutes"),
    )

    @property
    def open_time_entry(self):
        for entry in self.time_entries:
            if entry.end_time is None:
                return entry
        return None


class CardTimeEntry(Base):
    __tablename__ = "card_time_entries"

    id = Column(Integer, primary_key=True, index=True)
    card_id = Column(Integer, ForeignKey("cards.id", ondelete="CASCADE"), nullable=False, index=True)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=True)
    duration = Column(Integer, default=0, nullable=False)  # minutes
    note = Column(String(500), default="")

    # Relationships
    card = relationship("Card", back_populates="time_entries")

    # At most one running timer per card
    __table_args__ = (
        Index(
            "uq_card_time_entries_open",
            "card_id",
            unique=True,
            sqlite_where=text("end_time IS NULL"),
            postgresql_where=text("end_time IS NULL"),
        ),
        CheckConstraint("duration >= 0", name="ck_card_time_entries_duration"),
    )
