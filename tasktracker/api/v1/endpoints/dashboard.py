from fastapi import APIRouter, Depends, HTTPException, status
from datetime import date

from tasktracker.core import security
from tasktracker.db.session import get_store
from tasktracker.db.store import TaskStore
from tasktracker.schemas import report as report_schema
from tasktracker.schemas.user import UserProfile
from tasktracker.services import reports

router = APIRouter()


def _check_range(start_date: date, end_date: date) -> None:
    if start_date > end_date:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="start_date must not be after end_date")


@router.get("/me", response_model=report_schema.EmployeeReport)
def read_dashboard_me(
    start_date: date,
    end_date: date,
    store: TaskStore = Depends(get_store),
    caller: UserProfile = Depends(security.get_caller_profile)
):
    """ Day-by-day hours for the signed-in user. """
    _check_range(start_date, end_date)
    return reports.my_report(store, caller, start_date, end_date)


@router.get("/team/{team_name}", response_model=report_schema.TeamReport)
def read_dashboard_team(
    team_name: str,
    start_date: date,
    end_date: date,
    store: TaskStore = Depends(get_store),
    caller: UserProfile = Depends(security.get_caller_profile)
):
    """ Per-employee totals for the team members the caller may see. """
    _check_range(start_date, end_date)
    return reports.team_report(store, caller, team_name, start_date, end_date)


@router.get("/company", response_model=report_schema.CompanyReport)
def read_dashboard_company(
    start_date: date,
    end_date: date,
    store: TaskStore = Depends(get_store),
    caller: UserProfile = Depends(security.get_caller_profile)
):
    """ Per-team totals across every team the caller oversees. """
    _check_range(start_date, end_date)
    return reports.company_report(store, caller, start_date, end_date)
