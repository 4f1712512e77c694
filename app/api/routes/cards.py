from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Optional
from app.core.database import get_db
from app.core.exceptions import ValidationError
from app.models.user import User
from app.schemas.card import (
    AcknowledgeRequest, AcknowledgeResponse, CardCreate, CardListResponse, CardResponse,
    CardUpdate, TimerStart, TimerStopResponse, WorkSummaryResponse
)
from app.services.card_service import card_service
from app.api.deps import get_current_user

router = APIRouter(prefix="/cards", tags=["Cards"])

PERIODS = ("daily", "weekly", "monthly")


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_card(
    card_data: CardCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    card = card_service.create_card(db, current_user, card_data)
    return {"message": "Card created", "card": CardResponse.model_validate(card)}


# Static prefixes are registered before /{list_id}

@router.get("/progress/yesterday-incomplete", response_model=CardListResponse)
async def get_yesterday_incomplete(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Unfinished cards from earlier days awaiting acknowledgment."""
    cards = card_service.list_incomplete(db, current_user.id)
    return {"count": len(cards), "cards": cards}


@router.post("/progress/acknowledge", response_model=AcknowledgeResponse)
async def acknowledge_carried_cards(
    data: Optional[AcknowledgeRequest] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    modified = card_service.acknowledge(db, current_user.id, data.card_ids if data else [])
    return {"message": f"{modified} cards acknowledged and carried over", "modified_count": modified}


@router.get("/analytics/{employee_id}/{period}", response_model=WorkSummaryResponse)
async def get_employee_work_summary(
    employee_id: int,
    period: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Card counts and tracked time for one employee over a rolling period."""
    if period not in PERIODS:
        raise ValidationError(f"Invalid period. Must be one of: {', '.join(PERIODS)}")
    return card_service.work_summary(db, employee_id, period)


@router.get("/{list_id}", response_model=CardListResponse)
async def get_cards_by_list(
    list_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    cards = card_service.cards_by_list(db, list_id)
    return {"count": len(cards), "cards": cards}


@router.put("/{card_id}")
async def update_card(
    card_id: int,
    card_data: CardUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    card = card_service.update_card(db, current_user, card_id, card_data)
    return {"message": "Card updated", "card": CardResponse.model_validate(card)}


@router.delete("/{card_id}")
async def delete_card(
    card_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    card_service.delete_card(db, current_user, card_id)
    return {"message": "Card deleted successfully"}


@router.post("/{card_id}/timer/start")
async def start_timer(
    card_id: int,
    data: Optional[TimerStart] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    card = card_service.start_timer(db, card_id, data.note if data else "")
    return {"message": "Timer started", "card": CardResponse.model_validate(card)}


@router.post("/{card_id}/timer/stop", response_model=TimerStopResponse)
async def stop_timer(
    card_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Stop the running timer and add the rounded minutes to the card."""
    card, duration = card_service.stop_timer(db, card_id)
    return {
        "message": "Timer stopped",
        "duration": duration,
        "total_minutes": card.total_minutes,
        "card": card,
    }
