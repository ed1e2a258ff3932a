"""
Asset lifecycle actions and request status transitions.
Every change is written to the audit log.
"""
from datetime import date, datetime, timezone
from typing import Optional

import structlog
from sqlalchemy.orm import Session

from ..models.models import Asset, AssetRequest, User
from .audit import create_audit_log, compute_diff
from .costs import RECURRING_OWNERSHIPS, ownership_of, plain, status_of


logger = structlog.get_logger(__name__)

# Requests only move forward; nothing returns to pending
REQUEST_TRANSITIONS = {
    "pending": {"approved", "rejected"},
    "approved": {"completed"},
}


class LifecycleError(ValueError):
    pass


def _asset_state(asset: Asset) -> dict:
    return {
        "status": status_of(asset),
        "assigned_user_id": str(asset.assigned_user_id) if asset.assigned_user_id else None,
        "return_date": asset.return_date.isoformat() if asset.return_date else None,
    }


def _record(db: Session, asset: Asset, action: str, before: dict, context: Optional[dict] = None) -> Asset:
    asset.updated_at = datetime.now(timezone.utc)
    db.flush()
    create_audit_log(
        db,
        tenant_id=asset.tenant_id,
        entity_type="asset",
        entity_id=str(asset.id),
        action=action,
        changes_json=compute_diff(before, _asset_state(asset)),
        context=context,
    )
    logger.info("asset_lifecycle", action=action, asset_id=str(asset.id), status=status_of(asset))
    return asset


def assign_asset(db: Session, asset: Asset, user: User) -> Asset:
    if status_of(asset) == "disposed":
        raise LifecycleError("Disposed assets cannot be assigned")
    if user.tenant_id != asset.tenant_id:
        raise LifecycleError("User belongs to another tenant")
    if plain(user.status) == "inactive":
        raise LifecycleError("Inactive users cannot receive assets")
    before = _asset_state(asset)
    asset.assigned_user_id = user.id
    asset.status = "in_use"
    return _record(db, asset, "ASSIGN", before, {"user_id": str(user.id)})


def return_asset(db: Session, asset: Asset, return_date: Optional[date] = None, note: Optional[str] = None) -> Asset:
    if asset.assigned_user_id is None and status_of(asset) != "in_use":
        raise LifecycleError("Asset is not assigned")
    before = _asset_state(asset)
    asset.assigned_user_id = None
    asset.status = "available"
    # A return date on a rental/lease closes the contract for cost purposes
    if return_date is not None and ownership_of(asset) in RECURRING_OWNERSHIPS:
        asset.return_date = return_date
    if note:
        asset.note = f"{asset.note}\n{note}" if asset.note else note
    return _record(db, asset, "RETURN", before, {"return_date": return_date.isoformat() if return_date else None})


def send_to_repair(db: Session, asset: Asset) -> Asset:
    if status_of(asset) == "disposed":
        raise LifecycleError("Disposed assets cannot be repaired")
    before = _asset_state(asset)
    asset.status = "repair"
    return _record(db, asset, "REPAIR", before)


def dispose_asset(db: Session, asset: Asset) -> Asset:
    if status_of(asset) == "disposed":
        raise LifecycleError("Asset is already disposed")
    before = _asset_state(asset)
    asset.assigned_user_id = None
    asset.status = "disposed"
    return _record(db, asset, "DISPOSE", before)


def can_transition(current: str, new: str) -> bool:
    return new in REQUEST_TRANSITIONS.get(current, set())


def transition_request(db: Session, request: AssetRequest, new_status: str, admin_note: Optional[str] = None) -> AssetRequest:
    current = plain(request.status)
    new_status = plain(new_status)
    if not can_transition(current, new_status):
        raise LifecycleError(f"Cannot change request status from {current} to {new_status}")
    request.status = new_status
    if admin_note is not None:
        request.admin_note = admin_note
    request.updated_at = datetime.now(timezone.utc)
    db.flush()
    create_audit_log(
        db,
        tenant_id=request.tenant_id,
        entity_type="request",
        entity_id=str(request.id),
        action="STATUS_CHANGE",
        changes_json={"status": {"before": current, "after": new_status}},
        context={"admin_note": admin_note} if admin_note else None,
    )
    logger.info("request_status_changed", request_id=str(request.id), before=current, after=new_status)
    return request
