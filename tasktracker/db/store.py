# backend-server/tasktracker/db/store.py
# The task/team/user store behind every service call. Storage failures
# surface as CollaboratorUnavailable with the session rolled back.
import logging
import uuid
from contextlib import contextmanager
from datetime import date, datetime
from typing import Iterable, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from tasktracker.core.errors import CollaboratorUnavailable, WriteConflict
from tasktracker.db import models
from tasktracker.schemas.user import TargetProfile

logger = logging.getLogger(__name__)


class TaskStore:
    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _guard(self, action: str):
        try:
            yield
        except IntegrityError as e:
            self.db.rollback()
            logger.warning("Conflicting write while trying to %s: %s", action, e)
            raise WriteConflict(f"Another change to the same record happened while trying to {action}; please retry")
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Store failure while trying to %s: %s", action, e)
            raise CollaboratorUnavailable(f"Could not {action}; please try again later")

    def commit(self) -> None:
        with self._guard("save changes"):
            self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()

    # --- Tasks ---

    def list_task_entries(self, team_name: str, day: date, emp_id: str) -> List[models.TaskEntry]:
        with self._guard("read task entries"):
            return self.db.query(models.TaskEntry).filter(
                models.TaskEntry.team_name == team_name,
                models.TaskEntry.date == day,
                models.TaskEntry.emp_id == emp_id,
            ).order_by(models.TaskEntry.created_at).all()

    def get_task_entry(self, team_name: str, day: date, emp_id: str, task_id: str) -> Optional[models.TaskEntry]:
        with self._guard("read the task entry"):
            return self.db.query(models.TaskEntry).filter(
                models.TaskEntry.id == task_id,
                models.TaskEntry.team_name == team_name,
                models.TaskEntry.date == day,
                models.TaskEntry.emp_id == emp_id,
            ).first()

    def create_task_entry(self, team_name: str, day: date, emp_id: str, entry: dict, created_by: str) -> models.TaskEntry:
        db_task = models.TaskEntry(
            id=str(uuid.uuid4()), team_name=team_name, date=day, emp_id=emp_id,
            created_at=datetime.utcnow(), created_by=created_by, **entry
        )
        with self._guard("create the task entry"):
            self.db.add(db_task)
            self.db.flush()
        return db_task

    def update_task_entry(self, task: models.TaskEntry, patch: dict, updated_by: str) -> models.TaskEntry:
        with self._guard("update the task entry"):
            for field, value in patch.items():
                setattr(task, field, value)
            task.updated_at = datetime.utcnow()
            task.updated_by = updated_by
            self.db.flush()
        return task

    def delete_task_entry(self, task: models.TaskEntry) -> None:
        with self._guard("delete the task entry"):
            self.db.delete(task)
            self.db.flush()

    def query_task_entries(
        self,
        team_names: Iterable[str],
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        emp_id: Optional[str] = None,
    ) -> List[models.TaskEntry]:
        with self._guard("read task entries"):
            query = self.db.query(models.TaskEntry).filter(models.TaskEntry.team_name.in_(list(team_names)))
            if date_from:
                query = query.filter(models.TaskEntry.date >= date_from)
            if date_to:
                query = query.filter(models.TaskEntry.date <= date_to)
            if emp_id:
                query = query.filter(models.TaskEntry.emp_id == emp_id)
            return query.order_by(models.TaskEntry.date, models.TaskEntry.emp_id, models.TaskEntry.created_at).all()

    def lock_employee_day(self, team_name: str, day: date, emp_id: str, emp_name: Optional[str] = None) -> models.EmployeeDay:
        """Get-or-create the employee's day row and hold a row lock on it until commit."""
        with self._guard("lock the employee's day"):
            employee_day = self.db.query(models.EmployeeDay).filter(
                models.EmployeeDay.team_name == team_name,
                models.EmployeeDay.date == day,
                models.EmployeeDay.emp_id == emp_id,
            ).with_for_update().first()
            if employee_day is None:
                employee_day = models.EmployeeDay(team_name=team_name, date=day, emp_id=emp_id, emp_name=emp_name)
                self.db.add(employee_day)
                self.db.flush()
            elif emp_name and employee_day.emp_name != emp_name:
                employee_day.emp_name = emp_name
            return employee_day

    def release_employee_day(self, team_name: str, day: date, emp_id: str) -> None:
        """Drop the employee's day row once no entries are left for it."""
        with self._guard("release the employee's day"):
            self.db.query(models.EmployeeDay).filter(
                models.EmployeeDay.team_name == team_name,
                models.EmployeeDay.date == day,
                models.EmployeeDay.emp_id == emp_id,
            ).delete(synchronize_session="fetch")

    # --- Teams ---

    def ensure_team(self, team_name: str) -> models.Team:
        with self._guard("create the team"):
            team = self.db.get(models.Team, team_name)
            if team is None:
                team = models.Team(name=team_name, created_at=datetime.utcnow())
                self.db.add(team)
                self.db.flush()
                logger.info("Created team %s", team_name)
            return team

    def get_team(self, team_name: str) -> Optional[models.Team]:
        with self._guard("read the team"):
            return self.db.get(models.Team, team_name)

    def all_team_names(self) -> List[str]:
        with self._guard("list teams"):
            return [name for (name,) in self.db.query(models.Team.name).order_by(models.Team.name).all()]

    def dropdown_values(self, team_name: str, field: str) -> List[models.DropdownValue]:
        with self._guard("read dropdown values"):
            return self.db.query(models.DropdownValue).filter(
                models.DropdownValue.team_name == team_name,
                models.DropdownValue.field == field,
            ).order_by(models.DropdownValue.id).all()

    def add_dropdown_value(self, team_name: str, field: str, value_id: str, value_name: str) -> bool:
        """Register a value unless one with the same id exists. Returns whether it was added."""
        with self._guard("save the dropdown value"):
            exists = self.db.query(models.DropdownValue).filter(
                models.DropdownValue.team_name == team_name,
                models.DropdownValue.field == field,
                models.DropdownValue.value_id == value_id,
            ).first()
            if exists:
                return False
            self.db.add(models.DropdownValue(team_name=team_name, field=field, value_id=value_id, value_name=value_name))
            self.db.flush()
            return True

    # --- Users ---

    def get_user_by_emp_id(self, emp_id: str) -> Optional[models.User]:
        with self._guard("read the user"):
            return self.db.query(models.User).filter(models.User.emp_id == emp_id).first()

    def lookup_user_role(self, emp_id: str) -> Optional[TargetProfile]:
        user = self.get_user_by_emp_id(emp_id)
        if user is None:
            return None
        return TargetProfile.model_validate(user)

    def team_members(self, team_name: str) -> List[models.User]:
        with self._guard("read team members"):
            return self.db.query(models.User).filter(models.User.team_name == team_name).order_by(models.User.emp_id).all()
