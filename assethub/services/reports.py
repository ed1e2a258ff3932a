"""
Monthly cost and incident reports.

Joins per-asset costs with the organisational attribution of the assigned
user. All data is passed in; nothing here touches the database.
"""
from collections.abc import Mapping
from typing import Dict, Iterable, List, Optional, Tuple

import structlog

from ..schemas.reports import (
    CostReportRow,
    AssetDetailRow,
    IncidentRow,
    IncidentReport,
    ReportResponse,
)
from .attribution import UNASSIGNED, index_history, resolve_attribution
from .costs import monthly_cost, ownership_of, plain, status_of
from .dates import parse_date, month_window


logger = structlog.get_logger(__name__)

BREAKDOWN = "breakdown"
UNKNOWN = "Unknown"


def _index_users(users) -> Optional[Dict[str, object]]:
    if users is None:
        return None
    if isinstance(users, Mapping):
        return {str(k): v for k, v in users.items()}
    return {str(getattr(u, "id", None)): u for u in users}


def _profile(user_id, users: Optional[Dict[str, object]], row=None):
    if user_id is None:
        return None
    if users is not None:
        return users.get(str(user_id))
    # Without a user index fall back to the row's loaded relationship
    return getattr(row, "user", None)


def _label(value, default: str = "-") -> str:
    if value is None:
        return default
    value = str(getattr(value, "value", value)).strip()
    return value or default


def _date_label(value, default: str = "-") -> str:
    parsed = parse_date(value)
    if parsed is not None:
        return parsed.isoformat()
    return _label(value, default)


def request_date_of(request):
    value = getattr(request, "request_date", None)
    if value is None:
        value = getattr(request, "date", None)
    return value


def breakdown_requests(requests: Iterable, year: int, month: int) -> List:
    """Breakdown requests dated within the report month (inclusive window)."""
    start, end = month_window(year, month)
    matched = []
    for request in requests or []:
        if plain(getattr(request, "type", None)) != BREAKDOWN:
            continue
        day = parse_date(request_date_of(request))
        if day is None or not (start <= day <= end):
            continue
        matched.append(request)
    matched.sort(key=lambda r: (parse_date(request_date_of(r)), str(getattr(r, "id", ""))))
    return matched


def build_incident_report(
    requests: Iterable,
    year: int,
    month: int,
    history_by_user=None,
    users=None,
    as_of_month: bool = False,
) -> IncidentReport:
    history = history_by_user if isinstance(history_by_user, Mapping) else index_history(history_by_user or [])
    user_index = _index_users(users)
    rows = []
    for request in breakdown_requests(requests, year, month):
        user_id = getattr(request, "user_id", None)
        profile = _profile(user_id, user_index, request)
        dept = resolve_attribution(user_id, history, year, month, profile=profile, as_of_month=as_of_month).dept
        rows.append(IncidentRow(
            id=str(getattr(request, "id", "")),
            date=_date_label(request_date_of(request), ""),
            user_name=_label(getattr(profile, "name", None), UNKNOWN),
            user_dept=UNKNOWN if dept == UNASSIGNED else dept,
            detail=_label(getattr(request, "detail", None), ""),
            status=plain(getattr(request, "status", None)),
        ))
    return IncidentReport(count=len(rows), requests=rows)


def build_report(
    assets: Iterable,
    history_by_user,
    requests: Iterable,
    year: int,
    month: int,
    users=None,
    as_of_month: bool = False,
    purchase_guard: bool = False,
) -> ReportResponse:
    """
    Build the cost summary, asset detail list and incident report for a month.

    Every asset lands in exactly one (company, dept) bucket; assets without an
    assigned user go to the unassigned bucket. The summary is ordered by cost
    descending, then company and department.

    Args:
        assets: Asset rows of one tenant
        history_by_user: Employment history rows (list, or mapping user id -> rows)
        requests: Request rows of the same tenant
        year: Report year
        month: Report month (1-12)
        users: User rows (list or mapping by id) for profile fallbacks and names
        as_of_month: Attribute to the organisation valid at the report-month start
        purchase_guard: Count assets not yet acquired by the report-month start as 0

    Returns:
        ReportResponse
    """
    history = history_by_user if isinstance(history_by_user, Mapping) else index_history(history_by_user or [])
    user_index = _index_users(users)

    buckets: Dict[Tuple[str, str], CostReportRow] = {}
    details: List[AssetDetailRow] = []

    for asset in assets or []:
        user_id = getattr(asset, "assigned_user_id", None)
        profile = _profile(user_id, user_index, asset)
        attribution = resolve_attribution(user_id, history, year, month, profile=profile, as_of_month=as_of_month)
        cost = monthly_cost(asset, year, month, purchase_guard=purchase_guard)

        key = (attribution.company, attribution.dept)
        row = buckets.get(key)
        if row is None:
            row = buckets[key] = CostReportRow(company=attribution.company, dept=attribution.dept)
        row.asset_count += 1
        row.cost += cost

        return_date = getattr(asset, "return_date", None)
        details.append(AssetDetailRow(
            management_id=_label(getattr(asset, "management_id", None)),
            model=_label(getattr(asset, "model", None)),
            serial=_label(getattr(asset, "serial", None)),
            ownership=ownership_of(asset) or "-",
            status=status_of(asset) or "-",
            user_name=_label(getattr(profile, "name", None)),
            company=attribution.company,
            dept=attribution.dept,
            monthly_cost=cost,
            purchase_date=_date_label(getattr(asset, "purchase_date", None)),
            return_date=_date_label(return_date) if return_date is not None else None,
        ))

    cost_report = sorted(buckets.values(), key=lambda r: (-r.cost, r.company, r.dept))
    incident_report = build_incident_report(
        requests, year, month, history_by_user=history, users=user_index, as_of_month=as_of_month
    )

    logger.info(
        "report_built",
        year=year,
        month=month,
        assets=len(details),
        buckets=len(cost_report),
        incidents=incident_report.count,
    )
    return ReportResponse(
        year=year,
        month=month,
        cost_report=cost_report,
        asset_detail_list=details,
        incident_report=incident_report,
    )
