from datetime import datetime
from typing import Dict, List, Optional, Tuple
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload
from app.core.dates import rolling_window_start, start_of_day, utcnow
from app.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from app.models.activity import ActivityAction, TargetType
from app.models.board import BoardList
from app.models.card import Card, CardTimeEntry
from app.models.task import WorkStatus
from app.models.user import User
from app.schemas.activity import (
    CardCreatedDetails, CardDeletedDetails, CardMovedDetails, CardStatusChangedDetails, CardUpdatedDetails
)
from app.schemas.card import CardCreate, CardUpdate
from app.services.activity_service import activity_service
import logging
import math

logger = logging.getLogger(__name__)

STATUS_KEYS = {
    WorkStatus.COMPLETED.value: "completed",
    WorkStatus.IN_PROGRESS.value: "in_progress",
    WorkStatus.ON_HOLD.value: "on_hold",
    WorkStatus.PENDING.value: "pending",
}

# Columns a client may change but never clear
REQUIRED_FIELDS = ("title", "list_id", "position", "status")


def round_minutes(seconds: float) -> int:
    """Nearest whole minute, halves rounded up."""
    return int(math.floor(seconds / 60 + 0.5))


class CardService:
    """Cards, per-card time tracking and carried-over work."""

    def get_card(self, db: Session, card_id: int) -> Card:
        card = db.query(Card).filter(Card.id == card_id).first()
        if not card:
            raise NotFoundError("Card not found")
        return card

    def _get_list(self, db: Session, list_id: int) -> BoardList:
        board_list = db.query(BoardList).options(joinedload(BoardList.board)).filter(BoardList.id == list_id).first()
        if not board_list:
            raise NotFoundError("List not found")
        return board_list

    def create_card(self, db: Session, current_user: User, data: CardCreate) -> Card:
        board_list = self._get_list(db, data.list_id)
        if data.assigned_to_id and not db.query(User).filter(User.id == data.assigned_to_id).first():
            raise NotFoundError("Assigned user not found")

        card = Card(
            title=data.title.strip(),
            description=data.description,
            list_id=board_list.id,
            assigned_to_id=data.assigned_to_id,
            due_date=data.due_date,
            position=len(board_list.cards)
        )
        db.add(card)
        db.commit()
        db.refresh(card)

        board = board_list.board
        activity_service.log_activity(
            db, current_user.id, ActivityAction.CREATED_CARD, TargetType.CARD, card.id, card.title,
            CardCreatedDetails(list_id=board_list.id, list_name=board_list.title),
            board.id if board else None, board.name if board else None
        )
        return card

    def can_edit(self, card: Card, user: User) -> bool:
        """CEO, the assignee, or any employee for an unassigned card."""
        if user.is_ceo:
            return True
        if card.assigned_to_id is not None:
            return card.assigned_to_id == user.id
        return True

    def update_card(self, db: Session, current_user: User, card_id: int, data: CardUpdate) -> Card:
        card = self.get_card(db, card_id)
        if not self.can_edit(card, current_user):
            raise AuthorizationError(
                "You don't have permission to edit this card. Only admin or assigned employee can edit."
            )

        updates = data.model_dump(exclude_unset=True)
        for field in REQUIRED_FIELDS:
            if field in updates and updates[field] is None:
                raise ValidationError(f"{field} cannot be null")

        if "title" in updates:
            updates["title"] = updates["title"].strip()
            if not updates["title"]:
                raise ValidationError("Card title is required")
        if "list_id" in updates:
            self._get_list(db, updates["list_id"])
        if updates.get("assigned_to_id") and not db.query(User).filter(User.id == updates["assigned_to_id"]).first():
            raise NotFoundError("Assigned user not found")
        if "status" in updates:
            updates["status"] = WorkStatus(updates["status"]).value

        old_status = card.status
        old_list_id = card.list_id
        old_position = card.position

        for field, value in updates.items():
            setattr(card, field, value)
        db.commit()
        db.refresh(card)

        board = card.board_list.board if card.board_list else None
        board_id = board.id if board else None
        board_name = board.name if board else None

        if updates.get("status") and updates["status"] != old_status:
            activity_service.log_activity(
                db, current_user.id, ActivityAction.CHANGED_CARD_STATUS, TargetType.CARD, card.id, card.title,
                CardStatusChangedDetails(old_status=old_status, new_status=updates["status"]),
                board_id, board_name
            )
        elif updates.get("list_id") and updates["list_id"] != old_list_id:
            activity_service.log_activity(
                db, current_user.id, ActivityAction.MOVED_CARD, TargetType.CARD, card.id, card.title,
                CardMovedDetails(from_list=old_list_id, to_list=updates["list_id"]),
                board_id, board_name
            )
        elif updates.get("position") is not None and updates["position"] != old_position:
            activity_service.log_activity(
                db, current_user.id, ActivityAction.MOVED_CARD, TargetType.CARD, card.id, card.title,
                CardMovedDetails(from_position=old_position, to_position=updates["position"]),
                board_id, board_name
            )
        else:
            activity_service.log_activity(
                db, current_user.id, ActivityAction.UPDATED_CARD, TargetType.CARD, card.id, card.title,
                CardUpdatedDetails(changed_fields=sorted(updates.keys())),
                board_id, board_name
            )
        return card

    def delete_card(self, db: Session, current_user: User, card_id: int):
        card = self.get_card(db, card_id)
        board = card.board_list.board if card.board_list else None
        board_id, board_name = (board.id, board.name) if board else (None, None)
        card_title, list_id, status = card.title, card.list_id, card.status

        db.delete(card)
        db.commit()

        activity_service.log_activity(
            db, current_user.id, ActivityAction.DELETED_CARD, TargetType.CARD, card_id, card_title,
            CardDeletedDetails(list_id=list_id, status=status), board_id, board_name
        )

    def cards_by_list(self, db: Session, list_id: int) -> List[Card]:
        return db.query(Card).options(joinedload(Card.assigned_to)).filter(
            Card.list_id == list_id
        ).order_by(Card.position, Card.id).all()

    # Time tracking

    def start_timer(self, db: Session, card_id: int, note: Optional[str] = "", now: Optional[datetime] = None) -> Card:
        """Open a time entry; a card may have only one running timer."""
        card = self.get_card(db, card_id)
        if card.open_time_entry is not None:
            raise ConflictError("Timer already running for this card")

        now = now or utcnow()
        card.time_entries.append(CardTimeEntry(start_time=now, note=note or ""))
        if not card.start_time:
            card.start_time = now

        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ConflictError("Timer already running for this card")

        db.refresh(card)
        logger.info(f"Timer started on card {card.id}")
        return card

    def stop_timer(self, db: Session, card_id: int, now: Optional[datetime] = None) -> Tuple[Card, int]:
        """Close the running entry and add its rounded minutes to the card total."""
        card = self.get_card(db, card_id)
        entry = card.open_time_entry
        if entry is None:
            raise ValidationError("No active timer found")

        now = now or utcnow()
        duration = max(round_minutes((now - entry.start_time).total_seconds()), 0)
        entry.end_time = now
        entry.duration = duration
        card.total_minutes = (card.total_minutes or 0) + duration
        card.end_time = now

        db.commit()
        db.refresh(card)
        logger.info(f"Timer stopped on card {card.id}: {duration} min (total {card.total_minutes})")
        return card, duration

    # Carried-over work

    def list_incomplete(self, db: Session, user_id: int, now: Optional[datetime] = None) -> List[Card]:
        """Unacknowledged, unfinished cards assigned to the user and created before today."""
        today = start_of_day(now or utcnow())
        return db.query(Card).options(joinedload(Card.assigned_to)).filter(
            Card.assigned_to_id == user_id,
            Card.status != WorkStatus.COMPLETED.value,
            Card.created_at < today,
            Card.acknowledged_by_employee.is_(False)
        ).order_by(Card.created_at.desc()).all()

    def acknowledge(self, db: Session, user_id: int, card_ids: List[int], now: Optional[datetime] = None) -> int:
        """Mark the caller's own cards as carried over; other ids are skipped."""
        if not card_ids:
            raise ValidationError("Card IDs array required")

        modified = db.query(Card).filter(
            Card.id.in_(card_ids),
            Card.assigned_to_id == user_id
        ).update({
            Card.acknowledged_by_employee: True,
            Card.is_carried_over: True,
            Card.carried_from_date: now or utcnow(),
        }, synchronize_session=False)
        db.commit()
        return modified

    # Analytics

    def work_summary(self, db: Session, employee_id: int, period: str, now: Optional[datetime] = None) -> Dict:
        """Card counts, completion rate and time spent over a rolling period."""
        start_date = rolling_window_start(period, now)
        cards = db.query(Card).options(
            joinedload(Card.board_list).joinedload(BoardList.board),
            joinedload(Card.assigned_to)
        ).filter(
            Card.assigned_to_id == employee_id,
            Card.created_at >= start_date
        ).order_by(Card.created_at.desc()).all()

        counts = {key: 0 for key in STATUS_KEYS.values()}
        for card in cards:
            if card.status in STATUS_KEYS:
                counts[STATUS_KEYS[card.status]] += 1

        total = len(cards)
        total_minutes = sum(card.total_minutes or 0 for card in cards)

        return {
            "period": period,
            "summary": {
                "total_tasks": total,
                "completed_tasks": counts["completed"],
                "in_progress_tasks": counts["in_progress"],
                "pending_tasks": counts["pending"],
                "on_hold_tasks": counts["on_hold"],
                "completion_rate": round(counts["completed"] / total * 100) if total else 0,
                "total_time_spent": {
                    "hours": total_minutes // 60,
                    "minutes": total_minutes % 60,
                    "total_minutes": total_minutes,
                },
            },
            "tasks_by_board": breakdown_by_board(cards),
            "cards": cards,
        }


def breakdown_by_board(cards: List[Card]) -> Dict[str, Dict]:
    breakdown: Dict[str, Dict] = {}
    for card in cards:
        board = card.board_list.board if card.board_list else None
        name = board.name if board else "Unassigned"
        row = breakdown.setdefault(name, {
            "total": 0, "completed": 0, "in_progress": 0, "on_hold": 0, "pending": 0, "total_minutes": 0
        })
        row["total"] += 1
        row[STATUS_KEYS.get(card.status, "pending")] += 1
        row["total_minutes"] += card.total_minutes or 0
    return breakdown


# Singleton instance
card_service = CardService()
