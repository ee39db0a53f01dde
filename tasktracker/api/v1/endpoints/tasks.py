from datetime import date
from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional

from tasktracker.core import security
from tasktracker.db.session import get_store
from tasktracker.db.store import TaskStore
from tasktracker.schemas import task as task_schema
from tasktracker.schemas.user import UserProfile
from tasktracker.services import budget
from tasktracker.services import tasks as task_service

router = APIRouter()

ENTRY_PATH = "/teams/{team_name}/dates/{day}/employees/{emp_id}/tasks"


@router.get("/tasks", response_model=List[task_schema.TaskEntry])
def read_tasks(
    date_from: Optional[date] = Query(None, alias="dateFrom"),
    date_to: Optional[date] = Query(None, alias="dateTo"),
    team: Optional[str] = None,
    employee: Optional[str] = None,
    team_leader: Optional[str] = Query(None, alias="teamLeader"),
    store: TaskStore = Depends(get_store),
    caller: UserProfile = Depends(security.get_caller_profile)
):
    """ Every task the caller may see, optionally narrowed by date range, team and employee. """
    filters = task_schema.TaskFilters(
        date_from=date_from, date_to=date_to, team=team, employee=employee, team_leader=team_leader
    )
    return task_service.list_tasks(store, caller, filters)


@router.get("/tasks/filter-options", response_model=task_schema.FilterOptions)
def read_filter_options(
    store: TaskStore = Depends(get_store),
    caller: UserProfile = Depends(security.get_caller_profile)
):
    """ Teams, team-leaders and employees the caller can filter the task list by. """
    return task_service.get_filter_options(store, caller)


@router.post("/tasks", response_model=task_schema.TaskWriteResult, status_code=status.HTTP_201_CREATED)
def create_task(
    entry_in: task_schema.TaskEntryCreate,
    store: TaskStore = Depends(get_store),
    caller: UserProfile = Depends(security.get_caller_profile)
):
    return task_service.create_task(store, caller, entry_in)


@router.post("/tasks/validate", response_model=task_schema.ValidationResult)
def validate_task(
    request: task_schema.TaskValidationRequest,
    store: TaskStore = Depends(get_store),
    caller: UserProfile = Depends(security.get_caller_profile)
):
    """ Dry run of the daily budget check for the entry being typed in. """
    return task_service.preview_validation(store, caller, request)


@router.get("/tasks/default-time")
def read_default_time(
    work_type: str = Query(..., alias="workType"),
    caller: UserProfile = Depends(security.get_caller_profile)
):
    """ Suggested timeSpent for a freshly picked work type. """
    return {"workType": work_type, "timeSpent": budget.default_time_for(work_type)}


@router.get(ENTRY_PATH, response_model=List[task_schema.TaskEntry])
def read_employee_tasks(
    team_name: str,
    day: date,
    emp_id: str,
    store: TaskStore = Depends(get_store),
    caller: UserProfile = Depends(security.get_caller_profile)
):
    return task_service.list_employee_tasks(store, caller, team_name, day, emp_id)


@router.get(ENTRY_PATH + "/summary", response_model=task_schema.DailySummary)
def read_daily_summary(
    team_name: str,
    day: date,
    emp_id: str,
    store: TaskStore = Depends(get_store),
    caller: UserProfile = Depends(security.get_caller_profile)
):
    """ Hours used, remaining and over time for the employee's day. """
    return budget.summarize_day(task_service.list_employee_tasks(store, caller, team_name, day, emp_id))


@router.put(ENTRY_PATH + "/{task_id}", response_model=task_schema.TaskWriteResult)
def update_task(
    team_name: str,
    day: date,
    emp_id: str,
    task_id: str,
    patch: task_schema.TaskEntryUpdate,
    store: TaskStore = Depends(get_store),
    caller: UserProfile = Depends(security.get_caller_profile)
):
    return task_service.update_task(store, caller, team_name, day, emp_id, task_id, patch)


@router.delete(ENTRY_PATH + "/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    team_name: str,
    day: date,
    emp_id: str,
    task_id: str,
    store: TaskStore = Depends(get_store),
    caller: UserProfile = Depends(security.get_caller_profile)
):
    task_service.delete_task(store, caller, team_name, day, emp_id, task_id)
    return
