from typing import Iterable

from ..schemas.reports import DashboardKpi
from .costs import monthly_cost, round_half_up, status_of
from .dates import previous_month
from .reports import breakdown_requests


# No repair start/finish timestamps are recorded, so MTTR cannot be derived
MTTR_UNAVAILABLE = "N/A"


def monthly_total(assets: Iterable, year: int, month: int) -> int:
    """Sum of monthly costs, counting assets not yet acquired in the month as 0."""
    return sum(monthly_cost(asset, year, month, purchase_guard=True) for asset in assets)


def compute_kpi(assets: Iterable, requests: Iterable, year: int, month: int) -> DashboardKpi:
    assets = list(assets or [])
    total_assets = len(assets)
    in_use = sum(1 for asset in assets if status_of(asset) == "in_use")
    utilization_rate = round_half_up(100 * in_use / total_assets) if total_assets else 0

    cost_month = monthly_total(assets, year, month)
    prev_year, prev_month = previous_month(year, month)
    cost_diff = cost_month - monthly_total(assets, prev_year, prev_month)

    return DashboardKpi(
        total_assets=total_assets,
        utilization_rate=utilization_rate,
        incidents=len(breakdown_requests(requests, year, month)),
        mttr=MTTR_UNAVAILABLE,
        cost_month=cost_month,
        cost_diff=cost_diff,
    )
