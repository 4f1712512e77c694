from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.models.user import User
from app.schemas.board import BoardCreate, BoardMemberAdd, BoardResponse, BoardUpdate
from app.services.board_service import board_service
from app.api.deps import get_current_user

router = APIRouter(prefix="/boards", tags=["Boards"])


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_board(
    board_data: BoardCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    board = board_service.create_board(db, current_user, board_data)
    return {"message": "Board created", "board": BoardResponse.model_validate(board)}


@router.get("/")
async def list_boards(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Boards visible to the current user."""
    boards = board_service.list_boards(db, current_user)
    return {"boards": [BoardResponse.model_validate(board) for board in boards]}


@router.post("/add-member")
async def add_member(
    data: BoardMemberAdd,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    board = board_service.add_member(db, data.board_id, data.user_id)
    return {"message": "Member added", "board": BoardResponse.model_validate(board)}


@router.put("/{board_id}")
async def update_board(
    board_id: int,
    board_data: BoardUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    board = board_service.update_board(db, board_id, board_data)
    return {"message": "Board updated successfully", "board": BoardResponse.model_validate(board)}


@router.delete("/{board_id}")
async def delete_board(
    board_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    board_service.delete_board(db, board_id)
    return {"message": "Board deleted successfully"}
