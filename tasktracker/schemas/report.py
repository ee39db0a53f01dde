# backend-server/tasktracker/schemas/report.py
import datetime as dt
from typing import Dict, List, Optional

from tasktracker.schemas.user import CamelModel


class HoursSummary(CamelModel):
    total_hours: float = 0
    normal_hours: float = 0
    extra_hours: float = 0
    task_count: int = 0
    # Keyed by task status and by project name
    status_counts: Dict[str, int] = {}
    completion_rate: int = 0
    project_hours: Dict[str, float] = {}


class EmployeeDaySummary(HoursSummary):
    date: dt.date
    team_name: str
    emp_id: str
    emp_name: Optional[str] = None


class EmployeeReport(CamelModel):
    summary: HoursSummary
    days: List[EmployeeDaySummary]


class TeamMemberSummary(CamelModel):
    emp_id: str
    emp_name: Optional[str] = None
    summary: HoursSummary


class TeamReport(CamelModel):
    team_name: str
    team_summary: HoursSummary
    members: List[TeamMemberSummary]


class TeamTotal(CamelModel):
    team_name: str
    summary: HoursSummary


class CompanyReport(CamelModel):
    company_summary: HoursSummary
    by_team: List[TeamTotal]
