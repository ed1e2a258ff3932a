"""
Asset cost calculation.

Monthly and total cost of one asset for a report month, by ownership type:
owned assets depreciate straight-line, rental/lease assets bill a monthly
rate until returned, BYOD assets carry no cost. Missing or malformed fields
coalesce to zero instead of raising.
"""
import math
from typing import NamedTuple

import structlog

from .dates import parse_date, first_day_of, months_between, elapsed_contract_months


logger = structlog.get_logger(__name__)

OWNED = "owned"
RENTAL = "rental"
LEASE = "lease"
BYOD = "byod"
RECURRING_OWNERSHIPS = frozenset({RENTAL, LEASE})


class AssetCost(NamedTuple):
    monthly: int
    total: int


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def as_int(value) -> int:
    """Best-effort integer coercion; anything unusable counts as 0."""
    if value is None or isinstance(value, bool):
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        pass
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0


def plain(value) -> str:
    """Enum members and raw strings alike, lower-cased."""
    value = getattr(value, "value", value)
    return str(value).strip().lower() if value is not None else ""


def ownership_of(asset) -> str:
    return plain(getattr(asset, "ownership", None))


def status_of(asset) -> str:
    return plain(getattr(asset, "status", None))


def compute_cost(asset, year: int, month: int) -> AssetCost:
    """
    Compute the cost of one asset for a report month.

    Args:
        asset: Asset row (or any object with the same attributes)
        year: Report year
        month: Report month (1-12)

    Returns:
        AssetCost(monthly, total)
    """
    ownership = ownership_of(asset)

    if ownership == OWNED:
        total = as_int(getattr(asset, "purchase_cost", None))
        depreciation = as_int(getattr(asset, "depreciation_months", None))
        monthly = 0
        if depreciation > 0:
            purchased = parse_date(getattr(asset, "purchase_date", None))
            if purchased is not None:
                passed = months_between(purchased, year, month)
                # Outside the window the asset is either fully depreciated or not yet acquired
                if 0 <= passed < depreciation:
                    monthly = round_half_up(total / depreciation)
        return AssetCost(monthly, total)

    if ownership in RECURRING_OWNERSHIPS:
        rate = as_int(getattr(asset, "monthly_cost", None))
        monthly = rate
        returned = parse_date(getattr(asset, "return_date", None))
        if returned is not None and returned < first_day_of(year, month):
            monthly = 0

        started = parse_date(getattr(asset, "purchase_date", None))
        if returned is not None and started is not None:
            total = rate * elapsed_contract_months(started, returned)
        else:
            contract_months = as_int(getattr(asset, "months", None))
            total = rate * contract_months if contract_months > 0 else 0
        return AssetCost(monthly, total)

    # byod and unknown ownership types carry no cost
    return AssetCost(0, 0)


def is_acquired_by(asset, year: int, month: int) -> bool:
    """False when the purchase/contract start falls after the report-month start or is unknown."""
    purchased = parse_date(getattr(asset, "purchase_date", None))
    return purchased is not None and purchased <= first_day_of(year, month)


def monthly_cost(asset, year: int, month: int, purchase_guard: bool = True) -> int:
    """
    Monthly cost used in month-level totals.

    Never raises: an asset whose cost cannot be computed is logged and
    counted as 0 so one bad record cannot abort an aggregate.

    Args:
        asset: Asset row
        year: Report year
        month: Report month (1-12)
        purchase_guard: Count assets not yet acquired by the report-month start as 0

    Returns:
        Monthly cost in currency units
    """
    try:
        if purchase_guard and not is_acquired_by(asset, year, month):
            return 0
        return compute_cost(asset, year, month).monthly
    except Exception as e:
        logger.warning(
            "asset_cost_skipped",
            asset_id=str(getattr(asset, "id", None)),
            year=year,
            month=month,
            error=str(e),
        )
        return 0
