import uuid
from datetime import date, datetime
from typing import List, Optional
from enum import Enum

from pydantic import BaseModel, field_validator


class UserRole(str, Enum):
    admin = "admin"
    manager = "manager"
    user = "user"


class UserStatus(str, Enum):
    active = "active"
    inactive = "inactive"


class UserBase(BaseModel):
    name: Optional[str] = None
    email: str
    role: UserRole = UserRole.user
    company: Optional[str] = None
    department: Optional[str] = None
    status: UserStatus = UserStatus.active

    @field_validator("name", "company", "department", mode="before")
    @classmethod
    def empty_str_to_none(cls, v):
        if v is None:
            return None
        v = str(v).strip()
        return v or None


class UserCreate(UserBase):
    pass


class UserUpdate(BaseModel):
    name: Optional[str] = None
    role: Optional[UserRole] = None
    company: Optional[str] = None
    department: Optional[str] = None
    status: Optional[UserStatus] = None


class UserSummary(UserBase):
    id: uuid.UUID
    # Latest known organisation from employment history
    dept: Optional[str] = None
    branch: Optional[str] = None
    device_count: int = 0


class EmploymentHistoryBase(BaseModel):
    start_date: date
    end_date: Optional[date] = None
    company: Optional[str] = None
    department: Optional[str] = None
    branch: Optional[str] = None
    position: Optional[str] = None

    @field_validator("end_date", mode="before")
    @classmethod
    def blank_end_date(cls, v):
        return v or None


class EmploymentHistoryCreate(EmploymentHistoryBase):
    pass


class EmploymentHistoryUpdate(BaseModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    company: Optional[str] = None
    department: Optional[str] = None
    branch: Optional[str] = None
    position: Optional[str] = None


class EmploymentHistoryResponse(EmploymentHistoryBase):
    id: uuid.UUID
    user_id: uuid.UUID

    class Config:
        from_attributes = True


class UserDetail(UserSummary):
    created_at: Optional[datetime] = None
    history: List[EmploymentHistoryResponse] = []
