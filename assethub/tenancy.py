import uuid

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from .config import settings
from .db import get_db
from .models.models import Tenant


def get_current_tenant(request: Request, db: Session = Depends(get_db)) -> Tenant:
    """Resolve the active tenant from the gateway-provided tenant header."""
    raw = request.headers.get(settings.tenant_header)
    if not raw:
        raise HTTPException(status_code=400, detail="No active tenant")
    try:
        tenant_id = uuid.UUID(raw.strip())
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid tenant id")
    tenant = db.query(Tenant).filter(Tenant.id == tenant_id).first()
    if tenant is None:
        raise HTTPException(status_code=404, detail="Tenant not found")
    return tenant
