# backend-server/tasktracker/schemas/task.py
import datetime as dt
from pydantic import field_validator, model_validator
from typing import List, Optional

from tasktracker.constants.constants import PERCENTAGE_COMPLETION_VALUES, TaskStatus
from tasktracker.schemas.user import CamelModel


def _check_percentage(value: Optional[str]) -> Optional[str]:
    if value and value not in PERCENTAGE_COMPLETION_VALUES:
        raise ValueError("Please select from predefined values only")
    return value


class TaskDetails(CamelModel):
    """Descriptive fields; none of them take part in time validation."""

    client_id: Optional[str] = None
    client_name: Optional[str] = None
    project_id: Optional[str] = None
    project_name: Optional[str] = None
    phase: Optional[str] = None
    task_description: Optional[str] = None
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None
    remarks: Optional[str] = None


class TaskEntryCreate(TaskDetails):
    team_name: str
    date: dt.date
    emp_id: str
    emp_name: str
    work_type: str
    time_spent: str
    status: TaskStatus
    percentage_completion: Optional[str] = None

    check_percentage = field_validator("percentage_completion")(_check_percentage)

    @model_validator(mode="after")
    def check_dates(self):
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("End date must be after start date")
        if not self.work_type.strip():
            raise ValueError("workType is required")
        return self


class TaskEntryUpdate(TaskDetails):
    emp_name: Optional[str] = None
    work_type: Optional[str] = None
    time_spent: Optional[str] = None
    status: Optional[TaskStatus] = None
    percentage_completion: Optional[str] = None

    check_percentage = field_validator("percentage_completion")(_check_percentage)


class TaskEntry(TaskDetails):
    id: str
    team_name: str
    date: dt.date
    emp_id: str
    emp_name: Optional[str] = None
    work_type: str
    time_spent: str
    status: TaskStatus
    percentage_completion: Optional[str] = None
    normal_hours: float = 0
    extra_hours: float = 0
    total_daily_hours: float = 0
    created_at: Optional[dt.datetime] = None
    created_by: Optional[str] = None
    updated_at: Optional[dt.datetime] = None
    updated_by: Optional[str] = None


class ValidationResult(CamelModel):
    normal_hours: float
    extra_hours: float
    total_daily_hours: float
    message: str


class TaskWriteResult(CamelModel):
    task: TaskEntry
    validation: ValidationResult
    warnings: List[str] = []


class TaskValidationRequest(CamelModel):
    team_name: str
    date: dt.date
    emp_id: str
    work_type: str
    time_spent: str
    # Set when validating an edit, so the entry is not counted twice
    task_id: Optional[str] = None


class TaskFilters(CamelModel):
    date_from: Optional[dt.date] = None
    date_to: Optional[dt.date] = None
    team: Optional[str] = None
    employee: Optional[str] = None
    # Entries of this team-leader and of the teams they lead
    team_leader: Optional[str] = None


class DailySummary(CamelModel):
    total_hours: int
    total_minutes: int
    used_hours: float
    remaining_hours: float
    over_time_hours: float


class FilterOption(CamelModel):
    emp_id: str
    emp_name: Optional[str] = None
    team_name: Optional[str] = None
    is_current_user: bool = False


class FilterOptions(CamelModel):
    """The teams and people a caller can narrow their task list by."""

    teams: List[str] = []
    team_leaders: List[FilterOption] = []
    employees: List[FilterOption] = []
