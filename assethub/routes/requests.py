import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..db import get_db
from ..tenancy import get_current_tenant
from ..models.models import Asset, AssetRequest, Tenant, User
from ..schemas.requests import (
    RequestCreate,
    RequestResponse,
    RequestStatus,
    RequestStatusUpdate,
    RequestType,
)
from ..services.lifecycle import LifecycleError, transition_request


router = APIRouter(prefix="/requests", tags=["requests"])


@router.get("", response_model=List[RequestResponse])
def list_requests(
    status: Optional[RequestStatus] = None,
    type: Optional[RequestType] = None,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    query = db.query(AssetRequest).filter(AssetRequest.tenant_id == tenant.id)
    if status:
        query = query.filter(AssetRequest.status == status.value)
    if type:
        query = query.filter(AssetRequest.type == type.value)
    rows = query.order_by(AssetRequest.request_date.desc(), AssetRequest.created_at.desc()).all()
    return [RequestResponse.from_row(r) for r in rows]


@router.post("", response_model=RequestResponse, status_code=201)
def create_request(payload: RequestCreate, db: Session = Depends(get_db), tenant: Tenant = Depends(get_current_tenant)):
    user = db.query(User.id).filter(User.id == payload.user_id, User.tenant_id == tenant.id).first()
    if not user:
        raise HTTPException(status_code=400, detail="Unknown user for this tenant")
    if payload.asset_id is not None:
        asset = db.query(Asset.id).filter(Asset.id == payload.asset_id, Asset.tenant_id == tenant.id).first()
        if not asset:
            raise HTTPException(status_code=400, detail="Unknown asset for this tenant")
    row = AssetRequest(
        tenant_id=tenant.id,
        type=payload.type.value,
        user_id=payload.user_id,
        asset_id=payload.asset_id,
        request_date=payload.date,
        status=RequestStatus.pending.value,
        detail=payload.detail,
        note=payload.note,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return RequestResponse.from_row(row)


@router.patch("/{request_id}/status", response_model=RequestResponse)
def update_request_status(
    request_id: uuid.UUID,
    payload: RequestStatusUpdate,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    row = db.query(AssetRequest).filter(AssetRequest.id == request_id, AssetRequest.tenant_id == tenant.id).first()
    if not row:
        raise HTTPException(status_code=404, detail="Request not found")
    try:
        transition_request(db, row, payload.status.value, admin_note=payload.admin_note)
    except LifecycleError as e:
        raise HTTPException(status_code=400, detail=str(e))
    db.refresh(row)
    return RequestResponse.from_row(row)
