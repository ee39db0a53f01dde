# backend-server/tasktracker/services/teams.py
import logging
from typing import List

from tasktracker.constants.constants import PREDEFINED_VALUES, WorkType
from tasktracker.core.access import accessible_teams, can_access_team, can_manage_team_data
from tasktracker.core.errors import AccessDenied, PredefinedField, TaskTrackerError
from tasktracker.db import models
from tasktracker.db.store import TaskStore
from tasktracker.schemas.team import DropdownOption
from tasktracker.schemas.user import UserProfile
from tasktracker.services import budget

logger = logging.getLogger(__name__)

BUILT_IN_WORK_TYPES = [work_type.value for work_type in WorkType]

# Singular labels for warnings
FIELD_LABELS = {"employees": "employee", "clients": "client", "projects": "project", "workType": "work type"}


def list_accessible_teams(store: TaskStore, caller: UserProfile) -> List[str]:
    return accessible_teams(caller, store.all_team_names())


def get_dropdown_values(store: TaskStore, caller: UserProfile, team_name: str, field: str) -> List[DropdownOption]:
    """Values offered for a form field; predefined fields are the same for every team."""
    if not can_access_team(caller, team_name):
        raise AccessDenied("You do not have permission to access this team data")

    if field in PREDEFINED_VALUES:
        return [DropdownOption(id=value, name=value) for value in PREDEFINED_VALUES[field]]

    options = []
    if field == "workType":
        options = [DropdownOption(id=value, name=value) for value in BUILT_IN_WORK_TYPES]
    options += [DropdownOption(id=value.value_id, name=value.value_name) for value in store.dropdown_values(team_name, field)]
    return options


def add_dropdown_value(store: TaskStore, caller: UserProfile, team_name: str, field: str, value_id: str, value_name: str) -> bool:
    """Register a team value. Returns False when it was already known."""
    if field in PREDEFINED_VALUES:
        raise PredefinedField(f"Cannot save predefined values for field: {field}")
    if not can_manage_team_data(caller, team_name):
        raise AccessDenied("You do not have permission to modify team data")
    if field == "workType" and budget.is_built_in_work_type(value_id):
        return False

    try:
        store.ensure_team(team_name)
        added = store.add_dropdown_value(team_name, field, value_id, value_name)
        store.commit()
    except TaskTrackerError:
        store.rollback()
        raise
    if added:
        logger.info("Registered %s '%s' for team %s", FIELD_LABELS[field], value_name, team_name)
    return added


def register_task_values(store: TaskStore, caller: UserProfile, task: models.TaskEntry) -> List[str]:
    """
    Best-effort registration of the employee, client, project and custom work
    type first seen on a saved task. Runs after the task is committed; failures
    are logged and returned as warnings and never undo the task.
    """
    if not can_manage_team_data(caller, task.team_name):
        return []

    candidates = [
        ("employees", task.emp_id, task.emp_name),
        ("clients", task.client_id, task.client_name),
        ("projects", task.project_id, task.project_name),
    ]
    if not budget.is_built_in_work_type(task.work_type):
        candidates.append(("workType", task.work_type, task.work_type))

    warnings = []
    for field, value_id, value_name in candidates:
        if not value_id or not value_name:
            continue
        try:
            if store.add_dropdown_value(task.team_name, field, value_id, value_name):
                store.commit()
        except TaskTrackerError as e:
            store.rollback()
            logger.warning("Could not register %s '%s' for team %s: %s", FIELD_LABELS[field], value_name, task.team_name, e)
            warnings.append(f"Could not save {FIELD_LABELS[field]} '{value_name}' to team {task.team_name}: {e.message}")
    return warnings
