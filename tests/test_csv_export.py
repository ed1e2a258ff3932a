from datetime import date

from assethub.schemas.reports import AssetDetailRow, CostReportRow, IncidentReport, IncidentRow
from assethub.services.csv_export import (
    BOM,
    asset_detail_csv,
    asset_detail_filename,
    cost_summary_csv,
    cost_summary_filename,
    incident_csv,
    incident_filename,
)


def test_cost_summary_layout():
    rows = [
        CostReportRow(company="Osaka Branch", dept="Sales", asset_count=2, cost=20000),
        CostReportRow(company="unassigned", dept="unassigned", asset_count=1, cost=5000),
    ]
    content = cost_summary_csv(rows, 2024, 5)
    assert content == (
        BOM
        + "対象年月,会社,部署,利用台数,月額費用,構成比(%)\n"
        + '"2024/5","Osaka Branch","Sales","2","20000","80.0"\n'
        + '"2024/5","unassigned","unassigned","1","5000","20.0"'
    )


def test_cost_summary_share_is_zero_without_cost():
    content = cost_summary_csv([CostReportRow(company="A", dept="B", asset_count=1, cost=0)], 2024, 12)
    assert content.endswith('"2024/12","A","B","1","0","0.0"')


def test_empty_export_is_header_only():
    content = cost_summary_csv([], 2024, 5)
    assert content == BOM + "対象年月,会社,部署,利用台数,月額費用,構成比(%)"


def test_asset_detail_layout():
    row = AssetDetailRow(
        management_id="PC-24-001",
        model="MacBook Pro 14",
        serial="C02XG0",
        ownership="rental",
        status="in_use",
        user_name="Sato Taro",
        company="Osaka Branch",
        dept="Sales",
        monthly_cost=15000,
        purchase_date="2024-04-01",
    )
    lines = asset_detail_csv([row]).split("\n")
    assert lines[0] == BOM + "管理番号,機種名,シリアル,所有形態,ステータス,利用者,会社,部署,月額コスト,導入日"
    assert lines[1] == '"PC-24-001","MacBook Pro 14","C02XG0","rental","in_use","Sato Taro","Osaka Branch","Sales","15000","2024-04-01"'
    assert len(lines) == 2


def test_embedded_quotes_are_escaped():
    row = AssetDetailRow(model='Dell 14" "Pro"', company="A", dept="B")
    line = asset_detail_csv([row]).split("\n")[1]
    assert '"Dell 14"" ""Pro"""' in line


def test_incident_status_labels():
    report = IncidentReport(count=2, requests=[
        IncidentRow(id="1", date="2024-05-01", user_name="Suzuki", user_dept="Development", detail="Battery", status="pending"),
        IncidentRow(id="2", date="2024-05-31", user_name="Sato", user_dept="Sales", detail="Screen", status="completed"),
    ])
    lines = incident_csv(report).split("\n")
    assert lines[0] == BOM + "発生日,申請者,部署,内容,ステータス"
    assert lines[1] == '"2024-05-01","Suzuki","Development","Battery","対応中"'
    assert lines[2] == '"2024-05-31","Sato","Sales","Screen","対応完了"'


def test_filenames():
    assert cost_summary_filename("pantore", 2024, 5) == "pantore_cost_summary_2024-05.csv"
    assert incident_filename("pantore", 2024, 11) == "pantore_incident_report_2024-11.csv"
    assert asset_detail_filename("pantore", date(2024, 5, 7)) == "pantore_asset_detail_list_2024-05-07.csv"


def test_cost_summary_share_rounds_ties_up():
    rows = [
        CostReportRow(company="A", dept="Sales", asset_count=1, cost=15000),
        CostReportRow(company="B", dept="Sales", asset_count=1, cost=1000),
    ]
    content = cost_summary_csv(rows, 2024, 5)
    assert '"2024/5","A","Sales","1","15000","93.8"' in content
    assert content.endswith('"2024/5","B","Sales","1","1000","6.3"')
