from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.core.security import create_access_token
from app.models.user import User
from app.schemas.user import (
    DepartmentStatsResponse, EmployeeListResponse, LoginRequest, LoginResponse,
    PasswordChange, UserCreate, UserResponse, UserUpdate
)
from app.services.user_service import user_service
from app.api.deps import get_current_user, get_ceo_user
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: LoginRequest,
    request: Request,
    db: Session = Depends(get_db)
):
    """Exchange email and password for a bearer token."""
    user = user_service.authenticate(db, credentials.email, credentials.password)
    token = create_access_token(request.app.state.settings, user.id, user.role, user.sub_role)
    logger.info(f"User logged in: {user.email}")
    return LoginResponse(token=token, user=UserResponse.model_validate(user))


@router.post("/logout")
async def logout():
    # Tokens are stateless; the client discards its copy
    return {"message": "Logged out successfully"}


@router.post("/add", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def add_employee(
    user_data: UserCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_ceo_user)
):
    """Create an employee account."""
    return user_service.create_employee(db, user_data)


@router.get("/employees", response_model=EmployeeListResponse)
async def list_employees(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    employees = user_service.list_employees(db)
    return {"count": len(employees), "employees": employees}


@router.get("/department-stats", response_model=DepartmentStatsResponse)
async def department_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_ceo_user)
):
    """Employees grouped by sub-role."""
    return user_service.department_stats(db)


@router.get("/employee/{user_id}", response_model=UserResponse)
async def get_employee(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return user_service.get_employee(db, user_id)


@router.put("/employee/{user_id}", response_model=UserResponse)
async def update_employee(
    user_id: int,
    user_data: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_ceo_user)
):
    return user_service.update_employee(db, user_id, user_data)


@router.put("/employee/{user_id}/change-password")
async def change_password(
    user_id: int,
    data: PasswordChange,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_ceo_user)
):
    """Set a new password for an employee."""
    user_service.change_password(db, user_id, data.new_password)
    return {"message": "Password changed successfully"}


@router.delete("/employee/{user_id}")
async def delete_employee(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_ceo_user)
):
    user_service.delete_employee(db, user_id)
    return {"message": "Employee deleted successfully"}
