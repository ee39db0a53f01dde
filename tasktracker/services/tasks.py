# backend-server/tasktracker/services/tasks.py
"""
Task entry operations: access gate, daily budget check, then persistence.

Nothing is written until both gates pass. The employee's day row is locked
before the existing entries are read, so the read-validate-write sequence
for one ``(teamName, date, empId)`` runs inside a single transaction.
"""
import logging
from datetime import date
from typing import Dict, List, Optional

from tasktracker.constants.constants import Role, TECH_LEADS_TEAM
from tasktracker.core.access import (
    RoleLookup, accessible_teams, can_access_employee, can_access_team, ensure_can_write,
)
from tasktracker.core.errors import AccessDenied, InvalidFormat, TaskNotFound, TaskTrackerError
from tasktracker.db import models
from tasktracker.db.store import TaskStore
from tasktracker.schemas.task import (
    FilterOption, FilterOptions, TaskEntry, TaskEntryCreate, TaskEntryUpdate, TaskFilters, TaskValidationRequest,
    TaskWriteResult, ValidationResult,
)
from tasktracker.schemas.user import TargetProfile, UserProfile
from tasktracker.services import budget, teams

logger = logging.getLogger(__name__)

# Fields a task update may never change
IDENTITY_FIELDS = {"team_name", "date", "emp_id"}


def cached_lookup(store: TaskStore) -> RoleLookup:
    """Role lookup that resolves each empId at most once per call."""
    cache: Dict[str, Optional[TargetProfile]] = {}

    def lookup(emp_id: str) -> Optional[TargetProfile]:
        if emp_id not in cache:
            cache[emp_id] = store.lookup_user_role(emp_id)
        return cache[emp_id]

    return lookup


def _can_access(store: TaskStore, caller: UserProfile, team_name: str, emp_id: str, lookup: Optional[RoleLookup] = None) -> bool:
    return can_access_team(caller, team_name) and can_access_employee(
        caller, team_name, emp_id, lookup or store.lookup_user_role
    )


def _require_access(store: TaskStore, caller: UserProfile, team_name: str, emp_id: str, action: str) -> None:
    if not _can_access(store, caller, team_name, emp_id):
        logger.info("Denied %s (%s) to %s tasks of %s in %s", caller.emp_id, caller.role.value, action, emp_id, team_name)
        raise AccessDenied(f"You do not have permission to {action} tasks for this employee")


def _hours(validation: ValidationResult) -> dict:
    return {
        "normal_hours": validation.normal_hours,
        "extra_hours": validation.extra_hours,
        "total_daily_hours": validation.total_daily_hours,
    }


def task_team_for(caller: UserProfile, team_name: str, emp_id: str) -> str:
    """Tech-leads always log their own entries in the shared techLeads team."""
    if caller.role == Role.tech_lead and emp_id == caller.emp_id:
        return TECH_LEADS_TEAM
    return team_name


def create_task(store: TaskStore, caller: UserProfile, entry_in: TaskEntryCreate) -> TaskWriteResult:
    ensure_can_write(caller)
    team_name = task_team_for(caller, entry_in.team_name, entry_in.emp_id)
    _require_access(store, caller, team_name, entry_in.emp_id, "add")

    try:
        store.ensure_team(team_name)
        store.lock_employee_day(team_name, entry_in.date, entry_in.emp_id, entry_in.emp_name)
        existing = store.list_task_entries(team_name, entry_in.date, entry_in.emp_id)
        validation = budget.validate(entry_in.work_type, entry_in.time_spent, existing)

        fields = entry_in.model_dump(exclude=IDENTITY_FIELDS)
        fields["status"] = entry_in.status.value
        fields["work_type"] = budget.canonical_work_type(entry_in.work_type)
        fields["time_spent"] = entry_in.time_spent.strip()
        fields.update(_hours(validation))
        task = store.create_task_entry(team_name, entry_in.date, entry_in.emp_id, fields, created_by=caller.emp_id)
        store.commit()
    except TaskTrackerError:
        store.rollback()
        raise

    logger.info("Task %s created for %s in %s on %s by %s", task.id, task.emp_id, team_name, task.date, caller.emp_id)
    warnings = teams.register_task_values(store, caller, task)
    return TaskWriteResult(task=TaskEntry.model_validate(task), validation=validation, warnings=warnings)


def update_task(
    store: TaskStore,
    caller: UserProfile,
    team_name: str,
    day: date,
    emp_id: str,
    task_id: str,
    patch: TaskEntryUpdate,
) -> TaskWriteResult:
    ensure_can_write(caller)
    _require_access(store, caller, team_name, emp_id, "update")

    try:
        task = store.get_task_entry(team_name, day, emp_id, task_id)
        if task is None:
            raise TaskNotFound(f"Task '{task_id}' not found", taskId=task_id)
        store.lock_employee_day(team_name, day, emp_id)

        changes = {
            field: value for field, value in patch.model_dump(exclude_unset=True).items()
            if field not in IDENTITY_FIELDS
        }
        # Required columns keep their stored value when cleared
        for field in ("work_type", "time_spent", "status"):
            if field in changes and changes[field] is None:
                del changes[field]
        if "status" in changes:
            changes["status"] = changes["status"].value

        start_date = changes.get("start_date", task.start_date)
        end_date = changes.get("end_date", task.end_date)
        if start_date and end_date and start_date > end_date:
            raise InvalidFormat("End date must be after start date")

        work_type = budget.canonical_work_type(changes.get("work_type", task.work_type))
        time_spent = changes.get("time_spent", task.time_spent).strip()
        existing = store.list_task_entries(team_name, day, emp_id)
        validation = budget.validate(work_type, time_spent, existing, exclude_entry_id=task.id, is_edit=True)

        changes.update(work_type=work_type, time_spent=time_spent, **_hours(validation))
        store.update_task_entry(task, changes, updated_by=caller.emp_id)
        store.commit()
    except TaskTrackerError:
        store.rollback()
        raise

    logger.info("Task %s updated by %s", task.id, caller.emp_id)
    warnings = teams.register_task_values(store, caller, task)
    return TaskWriteResult(task=TaskEntry.model_validate(task), validation=validation, warnings=warnings)


def delete_task(store: TaskStore, caller: UserProfile, team_name: str, day: date, emp_id: str, task_id: str) -> None:
    ensure_can_write(caller)
    _require_access(store, caller, team_name, emp_id, "delete")

    try:
        task = store.get_task_entry(team_name, day, emp_id, task_id)
        if task is None:
            raise TaskNotFound(f"Task '{task_id}' not found", taskId=task_id)
        store.lock_employee_day(team_name, day, emp_id)
        store.delete_task_entry(task)
        if not store.list_task_entries(team_name, day, emp_id):
            store.release_employee_day(team_name, day, emp_id)
        store.commit()
    except TaskTrackerError:
        store.rollback()
        raise
    logger.info("Task %s deleted by %s", task_id, caller.emp_id)


def list_employee_tasks(store: TaskStore, caller: UserProfile, team_name: str, day: date, emp_id: str) -> List[models.TaskEntry]:
    _require_access(store, caller, team_name, emp_id, "view")
    return store.list_task_entries(team_name, day, emp_id)


def preview_validation(store: TaskStore, caller: UserProfile, request: TaskValidationRequest) -> ValidationResult:
    """Run the same checks as a write without persisting anything."""
    ensure_can_write(caller)
    team_name = task_team_for(caller, request.team_name, request.emp_id)
    _require_access(store, caller, team_name, request.emp_id, "add")
    existing = store.list_task_entries(team_name, request.date, request.emp_id)
    return budget.validate(
        request.work_type, request.time_spent, existing,
        exclude_entry_id=request.task_id, is_edit=request.task_id is not None,
    )


def list_tasks(store: TaskStore, caller: UserProfile, filters: TaskFilters) -> List[models.TaskEntry]:
    """Every entry the caller may see, narrowed by the optional filters."""
    team_names = accessible_teams(caller, store.all_team_names())
    if filters.team:
        team_names = [name for name in team_names if name == filters.team]
    if not team_names:
        return []

    entries = store.query_task_entries(team_names, filters.date_from, filters.date_to, emp_id=filters.employee)
    if filters.team_leader:
        led_teams = set()
        for name in team_names:
            team = store.get_team(name)
            if team is not None and team.team_leader_id == filters.team_leader:
                led_teams.add(name)
        entries = [e for e in entries if e.emp_id == filters.team_leader or e.team_name in led_teams]

    lookup = cached_lookup(store)
    allowed: Dict[tuple, bool] = {}
    visible = []
    for entry in entries:
        key = (entry.team_name, entry.emp_id)
        if key not in allowed:
            allowed[key] = can_access_employee(caller, entry.team_name, entry.emp_id, lookup)
        if allowed[key]:
            visible.append(entry)
    return visible


def _option(user: models.User, is_current_user: bool = False) -> FilterOption:
    return FilterOption(emp_id=user.emp_id, emp_name=user.emp_name, team_name=user.team_name, is_current_user=is_current_user)


def get_filter_options(store: TaskStore, caller: UserProfile) -> FilterOptions:
    """
    Choices for the task list filters. Tech-leads pick among their managed
    teams and those teams' team-leaders and employees; team-leaders among
    themselves and their team's employees. Other roles only filter by date.
    """
    options = FilterOptions()

    if caller.role == Role.tech_lead:
        options.teams = list(caller.managed_teams)
        for team_name in caller.managed_teams:
            for member in store.team_members(team_name):
                if member.role == Role.team_leader.value:
                    options.team_leaders.append(_option(member))
                elif member.role == Role.employee.value:
                    options.employees.append(_option(member))

    elif caller.role == Role.team_leader:
        options.employees.append(FilterOption(
            emp_id=caller.emp_id, emp_name=f"{caller.emp_name} (Me)", team_name=caller.team_name, is_current_user=True,
        ))
        options.employees += [
            _option(member) for member in store.team_members(caller.team_name)
            if member.role == Role.employee.value
        ]

    return options
