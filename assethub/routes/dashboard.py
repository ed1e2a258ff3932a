from typing import Tuple

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..db import get_db
from ..tenancy import get_current_tenant
from ..models.models import Tenant
from ..schemas.reports import DashboardKpi
from ..services.dashboard import compute_kpi
from ..services.snapshot import load_tenant_snapshot
from .reports import report_month


router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/kpi", response_model=DashboardKpi)
def get_kpi(
    period: Tuple[int, int] = Depends(report_month),
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    """KPI tiles for the dashboard: totals, utilization, incidents and cost trend."""
    year, month = period
    snapshot = load_tenant_snapshot(db, tenant.id)
    return compute_kpi(snapshot.assets, snapshot.requests, year, month)
