from typing import List
from sqlalchemy.orm import Session
from app.core.exceptions import ConflictError, NotFoundError
from app.models.activity import ActivityAction, TargetType
from app.models.board import Board, BoardList
from app.models.user import User
from app.schemas.activity import BoardCreatedDetails, ListCreatedDetails, ListDeletedDetails, ListMovedDetails
from app.schemas.board import BoardCreate, BoardListCreate, BoardListUpdate, BoardUpdate
from app.services.activity_service import activity_service
import logging

logger = logging.getLogger(__name__)


class BoardService:
    """Kanban boards and their lists."""

    def get_board(self, db: Session, board_id: int) -> Board:
        board = db.query(Board).filter(Board.id == board_id).first()
        if not board:
            raise NotFoundError("Board not found")
        return board

    def _users(self, db: Session, user_ids: List[int]) -> List[User]:
        if not user_ids:
            return []
        users = db.query(User).filter(User.id.in_(user_ids)).all()
        if len(users) != len(set(user_ids)):
            raise NotFoundError("User not found")
        return users

    def create_board(self, db: Session, current_user: User, data: BoardCreate) -> Board:
        board = Board(
            name=data.name.strip(),
            description=data.description,
            created_by_id=current_user.id,
            members=self._users(db, data.members)
        )
        db.add(board)
        db.commit()
        db.refresh(board)

        activity_service.log_activity(
            db, current_user.id, ActivityAction.CREATED_BOARD, TargetType.BOARD, board.id, board.name,
            BoardCreatedDetails(description=board.description, member_count=len(board.members)),
            board.id, board.name
        )
        return board

    def list_boards(self, db: Session, current_user: User) -> List[Board]:
        """CEO sees every board; others see boards they created or belong to."""
        query = db.query(Board)
        if not current_user.is_ceo:
            query = query.filter(
                (Board.created_by_id == current_user.id) | Board.members.any(User.id == current_user.id)
            )
        return query.order_by(Board.created_at.desc(), Board.id.desc()).all()

    def add_member(self, db: Session, board_id: int, user_id: int) -> Board:
        board = self.get_board(db, board_id)
        if any(member.id == user_id for member in board.members):
            raise ConflictError("User already a member")

        board.members.extend(self._users(db, [user_id]))
        db.commit()
        db.refresh(board)
        return board

    def update_board(self, db: Session, board_id: int, data: BoardUpdate) -> Board:
        board = self.get_board(db, board_id)
        board.name = data.name.strip()
        if data.description is not None:
            board.description = data.description
        db.commit()
        db.refresh(board)
        return board

    def delete_board(self, db: Session, board_id: int):
        board = self.get_board(db, board_id)
        db.delete(board)
        db.commit()
        logger.info(f"Board {board_id} deleted")

    # Lists

    def get_list(self, db: Session, list_id: int) -> BoardList:
        board_list = db.query(BoardList).filter(BoardList.id == list_id).first()
        if not board_list:
            raise NotFoundError("List not found")
        return board_list

    def create_list(self, db: Session, current_user: User, data: BoardListCreate) -> BoardList:
        board = self.get_board(db, data.board_id)
        board_list = BoardList(title=data.title.strip(), board_id=board.id, position=len(board.lists))
        db.add(board_list)
        db.commit()
        db.refresh(board_list)

        activity_service.log_activity(
            db, current_user.id, ActivityAction.CREATED_LIST, TargetType.LIST, board_list.id, board_list.title,
            ListCreatedDetails(position=board_list.position), board.id, board.name
        )
        return board_list

    def lists_by_board(self, db: Session, board_id: int) -> List[BoardList]:
        return db.query(BoardList).filter(
            BoardList.board_id == board_id
        ).order_by(BoardList.position, BoardList.id).all()

    def update_list(self, db: Session, current_user: User, list_id: int, data: BoardListUpdate) -> BoardList:
        board_list = self.get_list(db, list_id)
        old_position = board_list.position

        if data.title is not None:
            board_list.title = data.title.strip()
        if data.position is not None:
            board_list.position = data.position
        db.commit()
        db.refresh(board_list)

        if data.position is not None and data.position != old_position:
            board = board_list.board
            activity_service.log_activity(
                db, current_user.id, ActivityAction.MOVED_LIST, TargetType.LIST, board_list.id, board_list.title,
                ListMovedDetails(from_position=old_position, to_position=data.position),
                board.id, board.name
            )
        return board_list

    def delete_list(self, db: Session, current_user: User, list_id: int):
        board_list = self.get_list(db, list_id)
        board_id, board_name = board_list.board.id, board_list.board.name
        title, card_count = board_list.title, len(board_list.cards)

        db.delete(board_list)
        db.commit()

        activity_service.log_activity(
            db, current_user.id, ActivityAction.DELETED_LIST, TargetType.LIST, list_id, title,
            ListDeletedDetails(card_count=card_count), board_id, board_name
        )


# Singleton instance
board_service = BoardService()
