import uuid
from collections import Counter
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..config import settings
from ..db import get_db
from ..tenancy import get_current_tenant
from ..models.models import Asset, Tenant, User
from ..schemas.assets import (
    AssetCreate,
    AssetUpdate,
    AssetResponse,
    AssetAssign,
    AssetReturn,
    AssetCostResponse,
    AssetStatus,
    AssetStatusStats,
    OwnershipType,
)
from ..services.costs import compute_cost
from ..services.dates import current_year_month
from ..services.org_settings import allowed_ownerships
from ..services.lifecycle import (
    LifecycleError,
    assign_asset,
    return_asset,
    send_to_repair,
    dispose_asset,
)


router = APIRouter(prefix="/assets", tags=["assets"])


def _get_asset(asset_id: uuid.UUID, tenant: Tenant, db: Session) -> Asset:
    asset = db.query(Asset).filter(Asset.id == asset_id, Asset.tenant_id == tenant.id).first()
    if not asset:
        raise HTTPException(status_code=404, detail="Asset not found")
    return asset


def _check_user(user_id: Optional[uuid.UUID], tenant: Tenant, db: Session) -> None:
    if user_id is None:
        return
    exists = db.query(User.id).filter(User.id == user_id, User.tenant_id == tenant.id).first()
    if not exists:
        raise HTTPException(status_code=400, detail="Unknown user for this tenant")


def _check_ownership(ownership: str, tenant: Tenant, db: Session) -> None:
    if ownership not in allowed_ownerships(db, tenant.id):
        raise HTTPException(status_code=400, detail="Ownership type not enabled for this organization")


def _to_response(asset: Asset) -> AssetResponse:
    out = AssetResponse.model_validate(asset)
    user = asset.user
    if user is not None:
        out.user_name = user.name or user.email
    return out


# ---------- ASSETS ----------
@router.get("", response_model=List[AssetResponse])
def list_assets(
    status: Optional[AssetStatus] = None,
    ownership: Optional[OwnershipType] = None,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    query = db.query(Asset).filter(Asset.tenant_id == tenant.id)
    if status:
        query = query.filter(Asset.status == status.value)
    if ownership:
        query = query.filter(Asset.ownership == ownership.value)
    return [_to_response(a) for a in query.order_by(Asset.created_at.desc()).all()]


@router.post("", response_model=AssetResponse, status_code=201)
def create_asset(payload: AssetCreate, db: Session = Depends(get_db), tenant: Tenant = Depends(get_current_tenant)):
    _check_user(payload.assigned_user_id, tenant, db)
    _check_ownership(payload.ownership.value, tenant, db)
    data = payload.model_dump()
    data["ownership"] = payload.ownership.value
    data["status"] = payload.status.value
    data["accessories"] = payload.accessories or []
    row = Asset(tenant_id=tenant.id, **data)
    db.add(row)
    db.commit()
    db.refresh(row)
    return _to_response(row)


@router.get("/stats", response_model=AssetStatusStats)
def asset_status_stats(db: Session = Depends(get_db), tenant: Tenant = Depends(get_current_tenant)):
    statuses = db.query(Asset.status).filter(Asset.tenant_id == tenant.id).all()
    return AssetStatusStats.from_counts(Counter(s for (s,) in statuses))


@router.get("/{asset_id}", response_model=AssetResponse)
def get_asset(asset_id: uuid.UUID, db: Session = Depends(get_db), tenant: Tenant = Depends(get_current_tenant)):
    return _to_response(_get_asset(asset_id, tenant, db))


@router.patch("/{asset_id}", response_model=AssetResponse)
def update_asset(
    asset_id: uuid.UUID,
    payload: AssetUpdate,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    asset = _get_asset(asset_id, tenant, db)
    changes = payload.model_dump(exclude_unset=True)
    if "assigned_user_id" in changes:
        _check_user(changes["assigned_user_id"], tenant, db)
    if "ownership" in changes:
        _check_ownership(changes["ownership"].value, tenant, db)
    for key, value in changes.items():
        setattr(asset, key, getattr(value, "value", value))
    asset.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(asset)
    return _to_response(asset)


@router.delete("/{asset_id}")
def delete_asset(asset_id: uuid.UUID, db: Session = Depends(get_db), tenant: Tenant = Depends(get_current_tenant)):
    asset = _get_asset(asset_id, tenant, db)
    db.delete(asset)
    db.commit()
    return {"message": "Asset deleted successfully"}


@router.get("/{asset_id}/cost", response_model=AssetCostResponse)
def asset_cost(
    asset_id: uuid.UUID,
    year: Optional[int] = Query(default=None, ge=1, le=9999),
    month: Optional[int] = Query(default=None, ge=1, le=12),
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    asset = _get_asset(asset_id, tenant, db)
    if year is None or month is None:
        year, month = current_year_month(settings.tz_default)
    cost = compute_cost(asset, year, month)
    return AssetCostResponse(asset_id=asset.id, year=year, month=month, monthly=cost.monthly, total=cost.total)


# ---------- LIFECYCLE ----------
@router.post("/{asset_id}/assign", response_model=AssetResponse)
def assign(asset_id: uuid.UUID, payload: AssetAssign, db: Session = Depends(get_db), tenant: Tenant = Depends(get_current_tenant)):
    asset = _get_asset(asset_id, tenant, db)
    user = db.query(User).filter(User.id == payload.user_id, User.tenant_id == tenant.id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    try:
        assign_asset(db, asset, user)
    except LifecycleError as e:
        raise HTTPException(status_code=400, detail=str(e))
    db.refresh(asset)
    return _to_response(asset)


@router.post("/{asset_id}/return", response_model=AssetResponse)
def return_(asset_id: uuid.UUID, payload: Optional[AssetReturn] = None, db: Session = Depends(get_db), tenant: Tenant = Depends(get_current_tenant)):
    asset = _get_asset(asset_id, tenant, db)
    payload = payload or AssetReturn()
    try:
        return_asset(db, asset, return_date=payload.return_date, note=payload.note)
    except LifecycleError as e:
        raise HTTPException(status_code=400, detail=str(e))
    db.refresh(asset)
    return _to_response(asset)


@router.post("/{asset_id}/repair", response_model=AssetResponse)
def repair(asset_id: uuid.UUID, db: Session = Depends(get_db), tenant: Tenant = Depends(get_current_tenant)):
    asset = _get_asset(asset_id, tenant, db)
    try:
        send_to_repair(db, asset)
    except LifecycleError as e:
        raise HTTPException(status_code=400, detail=str(e))
    db.refresh(asset)
    return _to_response(asset)


@router.post("/{asset_id}/dispose", response_model=AssetResponse)
def dispose(asset_id: uuid.UUID, db: Session = Depends(get_db), tenant: Tenant = Depends(get_current_tenant)):
    asset = _get_asset(asset_id, tenant, db)
    try:
        dispose_asset(db, asset)
    except LifecycleError as e:
        raise HTTPException(status_code=400, detail=str(e))
    db.refresh(asset)
    return _to_response(asset)
