from typing import List, Optional

from pydantic import BaseModel


class CostReportRow(BaseModel):
    # Branch when known, otherwise company
    company: str
    dept: str
    asset_count: int = 0
    cost: int = 0


class AssetDetailRow(BaseModel):
    management_id: str = "-"
    model: str = "-"
    serial: str = "-"
    ownership: str = "-"
    status: str = "-"
    user_name: str = "-"
    company: str
    dept: str
    monthly_cost: int = 0
    purchase_date: str = "-"
    return_date: Optional[str] = None


class IncidentRow(BaseModel):
    id: str
    date: str
    user_name: str
    user_dept: str
    detail: str = ""
    status: str


class IncidentReport(BaseModel):
    count: int = 0
    requests: List[IncidentRow] = []


class ReportResponse(BaseModel):
    year: int
    month: int
    cost_report: List[CostReportRow] = []
    asset_detail_list: List[AssetDetailRow] = []
    incident_report: IncidentReport = IncidentReport()


class DashboardKpi(BaseModel):
    total_assets: int = 0
    utilization_rate: int = 0
    incidents: int = 0
    mttr: str = "N/A"
    cost_month: int = 0
    cost_diff: int = 0
