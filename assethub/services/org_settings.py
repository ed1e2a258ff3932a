"""
Per-tenant organisation settings and master data lists.
"""
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Set

import structlog
from sqlalchemy.orm import Session

from ..models.models import MasterDataItem, OrganizationSettings, Tenant
from ..schemas.settings import (
    ALL_OWNERSHIPS,
    MasterData,
    OrganizationSettingsResponse,
    OrganizationSettingsUpdate,
)


logger = structlog.get_logger(__name__)

# MasterData field -> stored kind
MASTER_KINDS = {
    "companies": "company",
    "departments": "department",
    "branches": "branch",
}


def _row(db: Session, tenant_id: uuid.UUID):
    return db.query(OrganizationSettings).filter(OrganizationSettings.tenant_id == tenant_id).first()


def get_org_settings(db: Session, tenant: Tenant) -> OrganizationSettingsResponse:
    """Stored settings, or defaults derived from the tenant when none are saved."""
    row = _row(db, tenant.id)
    if row is None:
        return OrganizationSettingsResponse(name=tenant.name, allowed_ownerships=list(ALL_OWNERSHIPS))
    return OrganizationSettingsResponse.model_validate(row)


def update_org_settings(db: Session, tenant: Tenant, payload: OrganizationSettingsUpdate) -> OrganizationSettingsResponse:
    row = _row(db, tenant.id)
    if row is None:
        row = OrganizationSettings(tenant_id=tenant.id)
        db.add(row)
    row.name = payload.name
    row.allowed_ownerships = [o.value for o in payload.allowed_ownerships]
    row.contact_label = payload.contact_label
    row.contact_value = payload.contact_value
    row.updated_at = datetime.now(timezone.utc)
    # The organisation name is also the tenant's display name
    tenant.name = payload.name
    db.commit()
    db.refresh(row)
    logger.info("org_settings_updated", allowed_ownerships=row.allowed_ownerships)
    return OrganizationSettingsResponse.model_validate(row)


def allowed_ownerships(db: Session, tenant_id: uuid.UUID) -> Set[str]:
    row = _row(db, tenant_id)
    if row is None or not row.allowed_ownerships:
        return {o.value for o in ALL_OWNERSHIPS}
    return set(row.allowed_ownerships)


def get_master_data(db: Session, tenant_id: uuid.UUID) -> MasterData:
    rows = (
        db.query(MasterDataItem)
        .filter(MasterDataItem.tenant_id == tenant_id)
        .order_by(MasterDataItem.sort_index, MasterDataItem.name)
        .all()
    )
    grouped: Dict[str, List[str]] = {kind: [] for kind in MASTER_KINDS.values()}
    for r in rows:
        grouped.setdefault(r.kind, []).append(r.name)
    return MasterData(**{field: grouped[kind] for field, kind in MASTER_KINDS.items()})


def _sync_kind(db: Session, tenant_id: uuid.UUID, kind: str, names: List[str]) -> Dict[str, int]:
    existing = {
        r.name: r
        for r in db.query(MasterDataItem).filter(MasterDataItem.tenant_id == tenant_id, MasterDataItem.kind == kind)
    }
    wanted = set(names)
    removed = 0
    for name, r in existing.items():
        if name not in wanted:
            db.delete(r)
            removed += 1
    added = 0
    for index, name in enumerate(names):
        r = existing.get(name)
        if r is None:
            db.add(MasterDataItem(tenant_id=tenant_id, kind=kind, name=name, sort_index=index))
            added += 1
        else:
            r.sort_index = index
    return {"added": added, "removed": removed}


def sync_master_data(db: Session, tenant_id: uuid.UUID, payload: MasterData) -> MasterData:
    """Sync each list by diff so kept names keep their rows."""
    for field, kind in MASTER_KINDS.items():
        counts = _sync_kind(db, tenant_id, kind, getattr(payload, field))
        logger.info("master_data_synced", kind=kind, **counts)
    db.commit()
    return get_master_data(db, tenant_id)
