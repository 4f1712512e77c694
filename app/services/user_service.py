from typing import Dict, List, Optional
from sqlalchemy.orm import Session
from app.core.config import Settings
from app.core.exceptions import AuthError, ConflictError, NotFoundError
from app.core.security import get_password_hash, verify_password
from app.models.user import User, UserRole
from app.schemas.user import UserCreate, UserUpdate
import logging

logger = logging.getLogger(__name__)


class UserService:
    """Employee records, credentials and the bootstrap CEO account."""

    def authenticate(self, db: Session, email: str, password: str) -> User:
        user = db.query(User).filter(User.email == email).first()
        if not user or not verify_password(password, user.hashed_password):
            raise AuthError("Invalid credentials")
        return user

    def get_employee(self, db: Session, user_id: int) -> User:
        employee = db.query(User).filter(User.id == user_id).first()
        if not employee or employee.role != UserRole.EMPLOYEE.value:
            raise NotFoundError("Employee not found")
        return employee

    def list_employees(self, db: Session) -> List[User]:
        return db.query(User).filter(
            User.role == UserRole.EMPLOYEE.value
        ).order_by(User.created_at.desc()).all()

    def create_employee(self, db: Session, data: UserCreate) -> User:
        if db.query(User).filter(User.email == data.email).first():
            raise ConflictError("Email already exists")

        user = User(
            name=data.name,
            email=data.email,
            hashed_password=get_password_hash(data.password),
            role=UserRole.EMPLOYEE.value,
            sub_role=data.sub_role.value if data.sub_role else None
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info(f"Employee created: {user.email}")
        return user

    def update_employee(self, db: Session, user_id: int, data: UserUpdate) -> User:
        employee = self.get_employee(db, user_id)

        if data.email and data.email != employee.email:
            if db.query(User).filter(User.email == data.email).first():
                raise ConflictError("Email already exists")
            employee.email = data.email
        if data.name:
            employee.name = data.name.strip()
        if data.sub_role:
            employee.sub_role = data.sub_role.value

        db.commit()
        db.refresh(employee)
        return employee

    def delete_employee(self, db: Session, user_id: int):
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError("Employee not found")
        db.delete(user)
        db.commit()
        logger.info(f"User {user_id} deleted")

    def change_password(self, db: Session, user_id: int, new_password: str) -> User:
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError("Employee not found")
        user.hashed_password = get_password_hash(new_password)
        db.commit()
        return user

    def department_stats(self, db: Session) -> Dict:
        """Employees grouped by sub-role, largest department first."""
        departments: Dict[Optional[str], List[User]] = {}
        for employee in db.query(User).filter(User.role == UserRole.EMPLOYEE.value).all():
            departments.setdefault(employee.sub_role, []).append(employee)

        total = sum(len(members) for members in departments.values())
        result = []
        for sub_role, members in sorted(departments.items(), key=lambda item: len(item[1]), reverse=True):
            result.append({
                "name": sub_role or "Unassigned",
                "count": len(members),
                "percentage": round(len(members) / total * 100) if total else 0,
                "employees": [
                    {"id": m.id, "name": m.name, "email": m.email, "created_at": m.created_at}
                    for m in members
                ],
            })
        return {"total_employees": total, "departments": result}

    def seed_ceo(self, db: Session, settings: Settings) -> Optional[User]:
        """Create the CEO account from settings if it does not exist yet."""
        if not settings.CEO_EMAIL or not settings.CEO_PASSWORD:
            logger.warning("CEO_EMAIL/CEO_PASSWORD not set; skipping CEO seed")
            return None

        email = settings.CEO_EMAIL.strip().lower()
        existing = db.query(User).filter(User.email == email).first()
        if existing:
            return existing

        ceo = User(
            name=settings.CEO_NAME,
            email=email,
            hashed_password=get_password_hash(settings.CEO_PASSWORD),
            role=UserRole.CEO.value
        )
        db.add(ceo)
        db.commit()
        db.refresh(ceo)
        logger.info(f"CEO account created: {email}")
        return ceo


# Singleton instance
user_service = UserService()
