from fastapi import APIRouter, Depends, status
from typing import List, Literal

from tasktracker.core import security
from tasktracker.db.session import get_store
from tasktracker.db.store import TaskStore
from tasktracker.schemas import team as team_schema
from tasktracker.schemas.user import UserProfile
from tasktracker.services import teams as team_service

router = APIRouter()

DropdownField = Literal["status", "percentageCompletion", "workType", "employees", "clients", "projects"]


@router.get("", response_model=List[str])
def read_teams(store: TaskStore = Depends(get_store), caller: UserProfile = Depends(security.get_caller_profile)):
    """ Teams whose data the caller may see. """
    return team_service.list_accessible_teams(store, caller)


@router.get("/{team_name}/dropdowns/{field}", response_model=List[team_schema.DropdownOption])
def read_dropdown(
    team_name: str,
    field: DropdownField,
    store: TaskStore = Depends(get_store),
    caller: UserProfile = Depends(security.get_caller_profile)
):
    return team_service.get_dropdown_values(store, caller, team_name, field)


@router.post("/{team_name}/dropdowns/{field}", status_code=status.HTTP_201_CREATED)
def add_dropdown_value(
    team_name: str,
    field: DropdownField,
    value: team_schema.DropdownValueCreate,
    store: TaskStore = Depends(get_store),
    caller: UserProfile = Depends(security.get_caller_profile)
):
    """ Registers a team-scoped employee, client, project or custom work type. """
    added = team_service.add_dropdown_value(store, caller, team_name, field, value.id, value.name or value.id)
    return {"added": added}
