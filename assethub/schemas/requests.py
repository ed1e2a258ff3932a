import uuid
import datetime as dt
from typing import Optional
from enum import Enum

from pydantic import BaseModel


class RequestType(str, Enum):
    new_hire = "new_hire"
    breakdown = "breakdown"
    return_ = "return"


class RequestStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    completed = "completed"
    rejected = "rejected"


class RequestCreate(BaseModel):
    type: RequestType
    user_id: uuid.UUID
    asset_id: Optional[uuid.UUID] = None
    date: dt.date
    detail: Optional[str] = None
    note: Optional[str] = None


class RequestStatusUpdate(BaseModel):
    status: RequestStatus
    admin_note: Optional[str] = None


class RequestResponse(BaseModel):
    id: uuid.UUID
    type: RequestType
    user_id: Optional[uuid.UUID] = None
    asset_id: Optional[uuid.UUID] = None
    date: Optional[dt.date] = None
    status: RequestStatus
    detail: Optional[str] = None
    note: Optional[str] = None
    admin_note: Optional[str] = None
    created_at: dt.datetime
    updated_at: Optional[dt.datetime] = None

    @classmethod
    def from_row(cls, row) -> "RequestResponse":
        return cls(
            id=row.id,
            type=row.type,
            user_id=row.user_id,
            asset_id=row.asset_id,
            date=row.request_date,
            status=row.status,
            detail=row.detail,
            note=row.note,
            admin_note=row.admin_note,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )
