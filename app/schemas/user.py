from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import List, Optional
from datetime import datetime
from app.models.user import SubRole


def _normalize_email(value):
    if isinstance(value, str):
        return value.strip().lower()
    return value


class UserBase(BaseModel):
    name: str = Field(..., min_length=2)
    email: EmailStr
    sub_role: Optional[SubRole] = None

    @field_validator('email', mode='before')
    @classmethod
    def normalize_email(cls, v):
        return _normalize_email(v)

    @field_validator('name')
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if len(v) < 2:
            raise ValueError('Name must be at least 2 characters')
        return v


class UserCreate(UserBase):
    password: str = Field(..., min_length=6)


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2)
    email: Optional[EmailStr] = None
    sub_role: Optional[SubRole] = None

    @field_validator('email', mode='before')
    @classmethod
    def normalize_email(cls, v):
        return _normalize_email(v)


class PasswordChange(BaseModel):
    new_password: str = Field(..., min_length=6)


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    role: str
    sub_role: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserSummary(BaseModel):
    id: int
    name: str
    email: str
    sub_role: Optional[str] = None

    class Config:
        from_attributes = True


class LoginRequest(BaseModel):
    email: EmailStr
    password: str

    @field_validator('email', mode='before')
    @classmethod
    def normalize_email(cls, v):
        return _normalize_email(v)


class LoginResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    user: UserResponse


class EmployeeListResponse(BaseModel):
    count: int
    employees: List[UserResponse]


class DepartmentEmployee(BaseModel):
    id: int
    name: str
    email: str
    created_at: Optional[datetime] = None


class DepartmentStat(BaseModel):
    name: str
    count: int
    percentage: int
    employees: List[DepartmentEmployee]


class DepartmentStatsResponse(BaseModel):
    total_employees: int
    departments: List[DepartmentStat]
