from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.models.user import User
from app.schemas.board import BoardListCreate, BoardListResponse, BoardListUpdate
from app.services.board_service import board_service
from app.api.deps import get_current_user

router = APIRouter(prefix="/lists", tags=["Lists"])


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_list(
    list_data: BoardListCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Append a list to a board."""
    board_list = board_service.create_list(db, current_user, list_data)
    return {"message": "List created", "list": BoardListResponse.model_validate(board_list)}


@router.get("/{board_id}")
async def get_lists_by_board(
    board_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    lists = board_service.lists_by_board(db, board_id)
    return {"lists": [BoardListResponse.model_validate(board_list) for board_list in lists]}


@router.put("/{list_id}")
async def update_list(
    list_id: int,
    list_data: BoardListUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    board_list = board_service.update_list(db, current_user, list_id, list_data)
    return {"message": "List updated", "list": BoardListResponse.model_validate(board_list)}


@router.delete("/{list_id}")
async def delete_list(
    list_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    board_service.delete_list(db, current_user, list_id)
    return {"message": "List deleted successfully"}
