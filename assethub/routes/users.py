import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session

from ..db import get_db
from ..tenancy import get_current_tenant
from ..models.models import Asset, EmploymentHistory, Tenant, User
from ..schemas.users import (
    UserCreate,
    UserUpdate,
    UserSummary,
    UserDetail,
    EmploymentHistoryCreate,
    EmploymentHistoryUpdate,
    EmploymentHistoryResponse,
)
from ..services.attribution import select_history_entry


router = APIRouter(prefix="/users", tags=["users"])


def _get_user(user_id: uuid.UUID, tenant: Tenant, db: Session) -> User:
    u = db.query(User).filter(User.id == user_id, User.tenant_id == tenant.id).first()
    if not u:
        raise HTTPException(status_code=404, detail="User not found")
    return u


def _user_to_summary(u: User, device_count: int = 0) -> UserSummary:
    latest = select_history_entry(u.history)
    return UserSummary(
        id=u.id,
        name=u.name or (u.email.split("@")[0] if u.email else None),
        email=u.email,
        role=u.role,
        company=u.company,
        department=u.department,
        status=u.status,
        dept=(getattr(latest, "department", None) or u.department),
        branch=getattr(latest, "branch", None),
        device_count=device_count,
    )


def _device_counts(tenant: Tenant, db: Session) -> dict:
    rows = (
        db.query(Asset.assigned_user_id, func.count(Asset.id))
        .filter(Asset.tenant_id == tenant.id, Asset.assigned_user_id.isnot(None))
        .group_by(Asset.assigned_user_id)
        .all()
    )
    return {uid: count for uid, count in rows}


@router.get("", response_model=List[UserSummary])
def list_users(q: Optional[str] = None, db: Session = Depends(get_db), tenant: Tenant = Depends(get_current_tenant)):
    query = db.query(User).filter(User.tenant_id == tenant.id)
    if q:
        like = f"%{q}%"
        query = query.filter((User.name.ilike(like)) | (User.email.ilike(like)))
    counts = _device_counts(tenant, db)
    return [_user_to_summary(u, counts.get(u.id, 0)) for u in query.order_by(User.created_at.desc()).all()]


@router.post("", response_model=UserSummary, status_code=201)
def create_user(payload: UserCreate, db: Session = Depends(get_db), tenant: Tenant = Depends(get_current_tenant)):
    existing = db.query(User).filter(User.tenant_id == tenant.id, User.email == payload.email).first()
    if existing:
        raise HTTPException(status_code=409, detail="Email already registered for this tenant")
    data = payload.model_dump()
    data["role"] = payload.role.value
    data["status"] = payload.status.value
    u = User(tenant_id=tenant.id, **data)
    db.add(u)
    db.commit()
    db.refresh(u)
    return _user_to_summary(u)


@router.get("/{user_id}", response_model=UserDetail)
def get_user(user_id: uuid.UUID, db: Session = Depends(get_db), tenant: Tenant = Depends(get_current_tenant)):
    u = _get_user(user_id, tenant, db)
    summary = _user_to_summary(u, _device_counts(tenant, db).get(u.id, 0))
    return UserDetail(
        **summary.model_dump(),
        created_at=u.created_at,
        history=[EmploymentHistoryResponse.model_validate(h) for h in u.history],
    )


@router.patch("/{user_id}", response_model=UserSummary)
def update_user(user_id: uuid.UUID, payload: UserUpdate, db: Session = Depends(get_db), tenant: Tenant = Depends(get_current_tenant)):
    u = _get_user(user_id, tenant, db)
    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(u, key, getattr(value, "value", value))
    db.commit()
    db.refresh(u)
    return _user_to_summary(u)


# ---------- EMPLOYMENT HISTORY ----------
@router.post("/{user_id}/history", response_model=EmploymentHistoryResponse, status_code=201)
def create_history(
    user_id: uuid.UUID,
    payload: EmploymentHistoryCreate,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    u = _get_user(user_id, tenant, db)
    row = EmploymentHistory(tenant_id=tenant.id, user_id=u.id, **payload.model_dump())
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def _get_history(history_id: uuid.UUID, tenant: Tenant, db: Session) -> EmploymentHistory:
    row = db.query(EmploymentHistory).filter(
        EmploymentHistory.id == history_id,
        EmploymentHistory.tenant_id == tenant.id,
    ).first()
    if not row:
        raise HTTPException(status_code=404, detail="History entry not found")
    return row


@router.patch("/history/{history_id}", response_model=EmploymentHistoryResponse)
def update_history(
    history_id: uuid.UUID,
    payload: EmploymentHistoryUpdate,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    row = _get_history(history_id, tenant, db)
    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(row, key, value)
    db.commit()
    db.refresh(row)
    return row


@router.delete("/history/{history_id}")
def delete_history(history_id: uuid.UUID, db: Session = Depends(get_db), tenant: Tenant = Depends(get_current_tenant)):
    row = _get_history(history_id, tenant, db)
    db.delete(row)
    db.commit()
    return {"message": "History entry deleted successfully"}
