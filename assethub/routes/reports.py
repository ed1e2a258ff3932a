from typing import Optional, Tuple

import structlog
from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from ..config import settings
from ..db import get_db
from ..tenancy import get_current_tenant
from ..models.models import Tenant
from ..schemas.reports import ReportResponse
from ..services.csv_export import (
    asset_detail_csv,
    asset_detail_filename,
    cost_summary_csv,
    cost_summary_filename,
    incident_csv,
    incident_filename,
)
from ..services.dates import current_year_month, today_in
from ..services.reports import build_report
from ..services.snapshot import load_tenant_snapshot


logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/reports", tags=["reports"])


def report_month(
    year: Optional[int] = Query(default=None, ge=1, le=9999),
    month: Optional[int] = Query(default=None, ge=1, le=12),
) -> Tuple[int, int]:
    """Requested (year, month), defaulting to the current month in the configured timezone."""
    if year is None or month is None:
        now_year, now_month = current_year_month(settings.tz_default)
        return year or now_year, month or now_month
    return year, month


def _build(db: Session, tenant: Tenant, year: int, month: int) -> ReportResponse:
    snapshot = load_tenant_snapshot(db, tenant.id)
    return build_report(
        snapshot.assets,
        snapshot.history,
        snapshot.requests,
        year,
        month,
        users=snapshot.users,
        as_of_month=settings.attribution_as_of_month,
        purchase_guard=settings.report_apply_purchase_guard,
    )


def _csv_response(content: str, filename: str) -> StreamingResponse:
    return StreamingResponse(
        iter([content.encode("utf-8")]),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.get("", response_model=ReportResponse)
def get_reports(
    period: Tuple[int, int] = Depends(report_month),
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    year, month = period
    return _build(db, tenant, year, month)


@router.get("/cost-summary.csv")
def download_cost_summary(
    period: Tuple[int, int] = Depends(report_month),
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    year, month = period
    report = _build(db, tenant, year, month)
    return _csv_response(
        cost_summary_csv(report.cost_report, year, month),
        cost_summary_filename(settings.csv_file_prefix, year, month),
    )


@router.get("/asset-detail.csv")
def download_asset_detail(
    period: Tuple[int, int] = Depends(report_month),
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    year, month = period
    report = _build(db, tenant, year, month)
    today = today_in(settings.tz_default)
    return _csv_response(
        asset_detail_csv(report.asset_detail_list),
        asset_detail_filename(settings.csv_file_prefix, today),
    )


@router.get("/incidents.csv")
def download_incidents(
    period: Tuple[int, int] = Depends(report_month),
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    year, month = period
    report = _build(db, tenant, year, month)
    logger.info("incident_csv_exported", year=year, month=month, count=report.incident_report.count)
    return _csv_response(
        incident_csv(report.incident_report),
        incident_filename(settings.csv_file_prefix, year, month),
    )
