from datetime import date

from assethub.services.attribution import UNASSIGNED
from assethub.services.reports import breakdown_requests, build_report
from factories import make_asset, make_history, make_request, make_user


def _fixture_data():
    sato = make_user(name="Sato Taro", company="Pantore HD", department="Sales")
    suzuki = make_user(name="Suzuki Hanako", company="Pantore HD", department="Development")
    history = [
        make_history(sato, date(2024, 4, 1), company="Pantore HD", branch="Osaka Branch", department="Sales"),
        make_history(suzuki, date(2023, 10, 1), company="Pantore HD", department="Development"),
    ]
    assets = [
        make_asset(management_id="PC-24-001", model="MacBook Pro 14", ownership="rental",
                   purchase_date=date(2024, 4, 1), monthly_cost=15000, months=24, assigned_user_id=sato.id),
        make_asset(management_id="PC-24-002", ownership="rental",
                   purchase_date=date(2024, 4, 1), monthly_cost=5000, assigned_user_id=sato.id),
        make_asset(management_id="PC-23-014", ownership="owned", purchase_date=date(2023, 10, 1),
                   purchase_cost=240000, depreciation_months=48, assigned_user_id=suzuki.id),
        make_asset(management_id="SPARE-01", ownership="lease", status="available",
                   purchase_date=date(2024, 1, 1), monthly_cost=9000, months=36),
        make_asset(management_id="BYOD-001", ownership="byod", assigned_user_id=suzuki.id),
    ]
    requests = [
        make_request(sato, date(2024, 5, 31), detail="Screen flicker", status="completed"),
        make_request(suzuki, date(2024, 5, 1), detail="Battery swelling"),
        make_request(sato, date(2024, 6, 1), detail="Next month"),
        make_request(sato, date(2024, 4, 30), detail="Last month"),
        make_request(sato, date(2024, 5, 10), type_="new_hire", detail="Not an incident"),
    ]
    return [sato, suzuki], history, assets, requests


def test_cost_report_groups_by_branch_and_department():
    users, history, assets, requests = _fixture_data()
    report = build_report(assets, history, requests, 2024, 5, users=users)

    rows = {(r.company, r.dept): (r.asset_count, r.cost) for r in report.cost_report}
    assert rows == {
        ("Osaka Branch", "Sales"): (2, 20000),
        ("Pantore HD", "Development"): (2, 5000),
        (UNASSIGNED, UNASSIGNED): (1, 9000),
    }


def test_cost_report_is_sorted_by_cost_descending():
    users, history, assets, requests = _fixture_data()
    report = build_report(assets, history, requests, 2024, 5, users=users)
    assert [r.cost for r in report.cost_report] == [20000, 9000, 5000]


def test_cost_ties_are_ordered_by_company_then_department():
    kato = make_user(name="Kato", company="Pantore HD", department="Sales")
    ito = make_user(name="Ito", company="Pantore HD", department="Admin")
    abe = make_user(name="Abe", company="Fukuoka Branch", department="Sales")
    assets = [
        make_asset(ownership="rental", purchase_date=date(2024, 4, 1), monthly_cost=5000, assigned_user_id=u.id)
        for u in (kato, ito, abe)
    ]
    report = build_report(assets, [], [], 2024, 5, users=[kato, ito, abe])
    assert [(r.company, r.dept) for r in report.cost_report] == [
        ("Fukuoka Branch", "Sales"),
        ("Pantore HD", "Admin"),
        ("Pantore HD", "Sales"),
    ]


def test_every_asset_lands_in_exactly_one_bucket():
    users, history, assets, requests = _fixture_data()
    report = build_report(assets, history, requests, 2024, 5, users=users)
    assert sum(r.asset_count for r in report.cost_report) == len(assets)
    assert len(report.asset_detail_list) == len(assets)


def test_summary_total_matches_detail_total():
    users, history, assets, requests = _fixture_data()
    for month in range(1, 13):
        report = build_report(assets, history, requests, 2024, month, users=users)
        assert sum(r.cost for r in report.cost_report) == sum(d.monthly_cost for d in report.asset_detail_list)


def test_report_is_deterministic():
    users, history, assets, requests = _fixture_data()
    first = build_report(assets, history, requests, 2024, 5, users=users)
    second = build_report(assets, history, requests, 2024, 5, users=users)
    assert first.model_dump() == second.model_dump()


def test_asset_detail_rows_carry_resolved_labels():
    users, history, assets, requests = _fixture_data()
    report = build_report(assets, history, requests, 2024, 5, users=users)
    detail = {d.management_id: d for d in report.asset_detail_list}

    mac = detail["PC-24-001"]
    assert (mac.user_name, mac.company, mac.dept) == ("Sato Taro", "Osaka Branch", "Sales")
    assert mac.monthly_cost == 15000
    assert mac.purchase_date == "2024-04-01"
    assert mac.serial == "-"
    assert mac.return_date is None

    spare = detail["SPARE-01"]
    assert (spare.user_name, spare.company, spare.dept) == ("-", UNASSIGNED, UNASSIGNED)


def test_report_path_skips_purchase_guard_by_default():
    user = make_user(name="New Hire")
    asset = make_asset(ownership="rental", purchase_date=date(2024, 5, 20), monthly_cost=7000, assigned_user_id=user.id)
    assert build_report([asset], [], [], 2024, 5, users=[user]).cost_report[0].cost == 7000
    assert build_report([asset], [], [], 2024, 5, users=[user], purchase_guard=True).cost_report[0].cost == 0


def test_as_of_month_attribution_moves_history_between_buckets():
    users, history, assets, requests = _fixture_data()
    report = build_report(assets, history, requests, 2024, 3, users=users, as_of_month=True)
    companies = {r.company for r in report.cost_report}
    # Sato's Osaka entry starts in April; March falls back to the profile
    assert "Osaka Branch" not in companies
    assert "Pantore HD" in companies


def test_bad_asset_still_counted_with_zero_cost():
    user = make_user(name="Sato")
    broken = make_asset(ownership="owned", purchase_date="garbage", purchase_cost="n/a",
                        depreciation_months="twelve", assigned_user_id=user.id)
    report = build_report([broken], [], [], 2024, 5, users=[user])
    assert report.cost_report[0].asset_count == 1
    assert report.cost_report[0].cost == 0
    assert report.asset_detail_list[0].purchase_date == "garbage"


def test_incidents_cover_inclusive_month_window():
    users, history, assets, requests = _fixture_data()
    report = build_report(assets, history, requests, 2024, 5, users=users)
    incidents = report.incident_report

    assert incidents.count == 2
    assert [r.date for r in incidents.requests] == ["2024-05-01", "2024-05-31"]
    first = incidents.requests[0]
    assert (first.user_name, first.user_dept, first.detail, first.status) == (
        "Suzuki Hanako", "Development", "Battery swelling", "pending",
    )


def test_incident_without_known_user_is_unknown():
    orphan = make_request(None, date(2024, 5, 3), detail="Lost charger")
    report = build_report([], [], [orphan], 2024, 5, users=[])
    row = report.incident_report.requests[0]
    assert (row.user_name, row.user_dept) == ("Unknown", "Unknown")


def test_breakdown_requests_ignore_undated_and_other_types():
    user = make_user()
    requests = [
        make_request(user, None),
        make_request(user, date(2024, 2, 29)),
        make_request(user, date(2024, 2, 10), type_="return"),
    ]
    matched = breakdown_requests(requests, 2024, 2)
    assert len(matched) == 1
    assert matched[0].request_date == date(2024, 2, 29)


def test_empty_inputs_give_empty_report():
    report = build_report([], [], [], 2024, 5)
    assert report.cost_report == []
    assert report.asset_detail_list == []
    assert report.incident_report.count == 0
