"""
CSV downloads of monthly reports.

Output layout is fixed for compatibility with existing downloads: UTF-8 BOM,
bare header row, every data field double-quoted, rows separated by "\\n"
with no trailing newline.
"""
import csv
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from io import StringIO
from typing import Iterable, List, Sequence

from ..schemas.reports import AssetDetailRow, CostReportRow, IncidentReport


BOM = "\ufeff"

COST_SUMMARY_HEADER = ["対象年月", "会社", "部署", "利用台数", "月額費用", "構成比(%)"]
ASSET_DETAIL_HEADER = ["管理番号", "機種名", "シリアル", "所有形態", "ステータス", "利用者", "会社", "部署", "月額コスト", "導入日"]
INCIDENT_HEADER = ["発生日", "申請者", "部署", "内容", "ステータス"]

INCIDENT_DONE = "対応完了"
INCIDENT_OPEN = "対応中"


def _render(header: Sequence[str], rows: Iterable[Sequence]) -> str:
    buffer = StringIO()
    csv.writer(buffer, lineterminator="\n").writerow(header)
    csv.writer(buffer, lineterminator="\n", quoting=csv.QUOTE_ALL).writerows(
        [["" if v is None else str(v) for v in row] for row in rows]
    )
    content = buffer.getvalue()
    if content.endswith("\n"):
        content = content[:-1]
    return BOM + content


def _one_decimal(value: float) -> str:
    # Ties round away from zero, matching the figures of existing downloads
    return str(Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def cost_summary_csv(rows: List[CostReportRow], year: int, month: int) -> str:
    total = sum(r.cost for r in rows)
    period = f"{year}/{month}"
    lines = []
    for r in rows:
        share = (r.cost / total) * 100 if total > 0 else 0
        lines.append([period, r.company, r.dept, r.asset_count, r.cost, _one_decimal(share)])
    return _render(COST_SUMMARY_HEADER, lines)


def asset_detail_csv(rows: List[AssetDetailRow]) -> str:
    return _render(ASSET_DETAIL_HEADER, [
        [
            r.management_id,
            r.model,
            r.serial,
            r.ownership,
            r.status,
            r.user_name,
            r.company,
            r.dept,
            r.monthly_cost,
            r.purchase_date,
        ]
        for r in rows
    ])


def incident_csv(report: IncidentReport) -> str:
    return _render(INCIDENT_HEADER, [
        [
            r.date,
            r.user_name,
            r.user_dept,
            r.detail,
            INCIDENT_DONE if r.status == "completed" else INCIDENT_OPEN,
        ]
        for r in report.requests
    ])


def cost_summary_filename(prefix: str, year: int, month: int) -> str:
    return f"{prefix}_cost_summary_{year}-{month:02d}.csv"


def asset_detail_filename(prefix: str, today: date) -> str:
    return f"{prefix}_asset_detail_list_{today.isoformat()}.csv"


def incident_filename(prefix: str, year: int, month: int) -> str:
    return f"{prefix}_incident_report_{year}-{month:02d}.csv"
