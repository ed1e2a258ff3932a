import uuid
from dataclasses import dataclass, field
from typing import Dict, List

from sqlalchemy.orm import Session

from ..models.models import Asset, AssetRequest, EmploymentHistory, User
from .attribution import index_history


@dataclass
class TenantSnapshot:
    """Everything the report/KPI core needs for one tenant, read in one go."""
    tenant_id: uuid.UUID
    assets: List[Asset] = field(default_factory=list)
    users: Dict[str, User] = field(default_factory=dict)
    history: Dict[str, List[EmploymentHistory]] = field(default_factory=dict)
    requests: List[AssetRequest] = field(default_factory=list)


def load_tenant_snapshot(db: Session, tenant_id: uuid.UUID) -> TenantSnapshot:
    assets = (
        db.query(Asset)
        .filter(Asset.tenant_id == tenant_id)
        .order_by(Asset.created_at.desc())
        .all()
    )
    users = db.query(User).filter(User.tenant_id == tenant_id).all()
    history = (
        db.query(EmploymentHistory)
        .filter(EmploymentHistory.tenant_id == tenant_id)
        .order_by(EmploymentHistory.start_date.desc())
        .all()
    )
    requests = db.query(AssetRequest).filter(AssetRequest.tenant_id == tenant_id).all()
    return TenantSnapshot(
        tenant_id=tenant_id,
        assets=assets,
        users={str(u.id): u for u in users},
        history=index_history(history),
        requests=requests,
    )
