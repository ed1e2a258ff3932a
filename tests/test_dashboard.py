from datetime import date

from assethub.services.dashboard import MTTR_UNAVAILABLE, compute_kpi, monthly_total
from factories import make_asset, make_request, make_user


def test_zero_assets_has_zero_utilization():
    kpi = compute_kpi([], [], 2024, 5)
    assert kpi.total_assets == 0
    assert kpi.utilization_rate == 0
    assert kpi.cost_month == 0
    assert kpi.cost_diff == 0
    assert kpi.mttr == MTTR_UNAVAILABLE


def test_utilization_rounds_to_whole_percent():
    assets = [
        make_asset(ownership="byod", status="in_use"),
        make_asset(ownership="byod", status="available"),
        make_asset(ownership="byod", status="repair"),
    ]
    # 1/3 -> 33.3%
    assert compute_kpi(assets, [], 2024, 5).utilization_rate == 33
    assets.append(make_asset(ownership="byod", status="in_use"))
    assets.append(make_asset(ownership="byod", status="in_use"))
    # 3/5 -> 60%
    assert compute_kpi(assets, [], 2024, 5).utilization_rate == 60


def test_utilization_half_rounds_up():
    assets = [make_asset(ownership="byod", status="in_use")] + [
        make_asset(ownership="byod", status="available") for _ in range(7)
    ]
    # 1/8 -> 12.5%
    assert compute_kpi(assets, [], 2024, 5).utilization_rate == 13


def test_cost_month_applies_purchase_guard():
    assets = [
        make_asset(ownership="rental", purchase_date=date(2024, 1, 1), monthly_cost=10000),
        make_asset(ownership="rental", purchase_date=date(2024, 5, 15), monthly_cost=4000),
    ]
    assert monthly_total(assets, 2024, 5) == 10000
    assert monthly_total(assets, 2024, 6) == 14000


def test_cost_diff_against_previous_month_across_year_boundary():
    assets = [
        make_asset(ownership="owned", purchase_date=date(2023, 1, 1), purchase_cost=12000, depreciation_months=12),
        make_asset(ownership="rental", purchase_date=date(2024, 1, 1), monthly_cost=3000),
    ]
    kpi = compute_kpi(assets, [], 2024, 1)
    # December 2023: 1000 (owned, last window month); January 2024: 3000 (rental only)
    assert kpi.cost_month == 3000
    assert kpi.cost_diff == 2000


def test_incidents_count_breakdowns_in_month():
    user = make_user()
    requests = [
        make_request(user, date(2024, 5, 1)),
        make_request(user, date(2024, 5, 31), status="completed"),
        make_request(user, date(2024, 6, 1)),
        make_request(user, date(2024, 5, 5), type_="new_hire"),
    ]
    assert compute_kpi([], requests, 2024, 5).incidents == 2
