from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..db import get_db
from ..tenancy import get_current_tenant
from ..models.models import Tenant
from ..schemas.settings import MasterData, OrganizationSettingsResponse, OrganizationSettingsUpdate
from ..services.org_settings import (
    get_master_data,
    get_org_settings,
    sync_master_data,
    update_org_settings,
)


router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=OrganizationSettingsResponse)
def read_settings(db: Session = Depends(get_db), tenant: Tenant = Depends(get_current_tenant)):
    return get_org_settings(db, tenant)


@router.put("", response_model=OrganizationSettingsResponse)
def write_settings(
    payload: OrganizationSettingsUpdate,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    return update_org_settings(db, tenant, payload)


@router.get("/master-data", response_model=MasterData)
def read_master_data(db: Session = Depends(get_db), tenant: Tenant = Depends(get_current_tenant)):
    return get_master_data(db, tenant.id)


@router.put("/master-data", response_model=MasterData)
def write_master_data(payload: MasterData, db: Session = Depends(get_db), tenant: Tenant = Depends(get_current_tenant)):
    return sync_master_data(db, tenant.id, payload)
