# backend-server/tasktracker/services/reports.py
# Dashboard roll-ups over already fetched task entries.
from collections import Counter, defaultdict
from datetime import date
from typing import Iterable, List

from tasktracker.constants.constants import DAILY_LIMIT_MINUTES, Role, TaskStatus
from tasktracker.core.access import can_access_team
from tasktracker.core.errors import AccessDenied
from tasktracker.db.store import TaskStore
from tasktracker.schemas.report import (
    CompanyReport, EmployeeDaySummary, EmployeeReport, HoursSummary, TeamMemberSummary, TeamReport, TeamTotal,
)
from tasktracker.schemas.task import TaskFilters
from tasktracker.schemas.user import UserProfile
from tasktracker.services import budget
from tasktracker.services.tasks import list_tasks


def _summary(total_minutes: int, normal_minutes: int, statuses: Counter, project_minutes: Counter) -> HoursSummary:
    task_count = sum(statuses.values())
    completed = statuses[TaskStatus.completed.value]
    return HoursSummary(
        total_hours=total_minutes / 60,
        normal_hours=normal_minutes / 60,
        extra_hours=(total_minutes - normal_minutes) / 60,
        task_count=task_count,
        status_counts={status.value: statuses[status.value] for status in TaskStatus},
        completion_rate=round(completed * 100 / task_count) if task_count else 0,
        project_hours={name: minutes / 60 for name, minutes in sorted(project_minutes.items())},
    )


def employee_daily_summaries(entries: Iterable) -> List[EmployeeDaySummary]:
    """One row per (date, teamName, empId) with the day's 9-hour split."""
    grouped = defaultdict(list)
    for entry in entries:
        grouped[(entry.date, entry.team_name, entry.emp_id)].append(entry)

    days = []
    for (day, team_name, emp_id), day_entries in sorted(grouped.items()):
        total = budget.sum_entry_minutes(day_entries)
        normal = min(total, DAILY_LIMIT_MINUTES)
        statuses = Counter(entry.status for entry in day_entries)
        projects = Counter()
        for entry in day_entries:
            project = entry.project_name or entry.project_id
            if project:
                projects[project] += budget.sum_entry_minutes([entry])
        summary = _summary(total, normal, statuses, projects)
        days.append(EmployeeDaySummary(
            date=day, team_name=team_name, emp_id=emp_id,
            emp_name=day_entries[-1].emp_name, **summary.model_dump(),
        ))
    return days


def combine(days: Iterable[EmployeeDaySummary]) -> HoursSummary:
    total = normal = 0
    statuses, projects = Counter(), Counter()
    for day in days:
        total += round(day.total_hours * 60)
        normal += round(day.normal_hours * 60)
        statuses.update(day.status_counts)
        for project, hours in day.project_hours.items():
            projects[project] += round(hours * 60)
    return _summary(total, normal, statuses, projects)


def my_report(store: TaskStore, caller: UserProfile, start_date: date, end_date: date) -> EmployeeReport:
    entries = list_tasks(store, caller, TaskFilters(date_from=start_date, date_to=end_date, employee=caller.emp_id))
    days = employee_daily_summaries(entries)
    return EmployeeReport(summary=combine(days), days=days)


def team_report(store: TaskStore, caller: UserProfile, team_name: str, start_date: date, end_date: date) -> TeamReport:
    """Per-employee totals for the members of ``team_name`` the caller may see."""
    if not can_access_team(caller, team_name):
        raise AccessDenied("You do not have permission to access this team data")

    entries = list_tasks(store, caller, TaskFilters(date_from=start_date, date_to=end_date, team=team_name))
    days = employee_daily_summaries(entries)

    by_employee = defaultdict(list)
    for day in days:
        by_employee[day.emp_id].append(day)
    members = [
        TeamMemberSummary(emp_id=emp_id, emp_name=emp_days[-1].emp_name, summary=combine(emp_days))
        for emp_id, emp_days in sorted(by_employee.items())
    ]
    return TeamReport(team_name=team_name, team_summary=combine(days), members=members)


def company_report(store: TaskStore, caller: UserProfile, start_date: date, end_date: date) -> CompanyReport:
    if caller.role not in (Role.admin, Role.tech_lead):
        raise AccessDenied("Requires admin or tech-lead role")

    entries = list_tasks(store, caller, TaskFilters(date_from=start_date, date_to=end_date))
    days = employee_daily_summaries(entries)

    by_team = defaultdict(list)
    for day in days:
        by_team[day.team_name].append(day)
    totals = [TeamTotal(team_name=name, summary=combine(team_days)) for name, team_days in sorted(by_team.items())]
    return CompanyReport(company_summary=combine(days), by_team=totals)
