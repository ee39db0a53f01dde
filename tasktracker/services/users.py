# backend-server/tasktracker/services/users.py
import logging
from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from tasktracker.constants.constants import Role, TECH_LEADS_TEAM
from tasktracker.core import security
from tasktracker.db import models
from tasktracker.db.store import TaskStore
from tasktracker.schemas import user as user_schema

logger = logging.getLogger(__name__)


def link_teams(store: TaskStore, user: models.User) -> None:
    """Create the teams a profile touches and point their leader back-references at it."""
    if user.team_name:
        team = store.ensure_team(user.team_name)
        if user.role == Role.team_leader.value:
            team.team_leader_id = user.emp_id
    if user.role == Role.tech_lead.value:
        store.ensure_team(TECH_LEADS_TEAM)
        for team_name in user.managed_teams or []:
            store.ensure_team(team_name).tech_lead_id = user.emp_id


def resolve_reports_to(db: Session, user_in: user_schema.UserCreate) -> user_schema.UserCreate:
    """
    Self-registered employees report to their team's leader and team-leaders
    to the tech-lead managing the team. Sign-up is refused until that leader exists.
    """
    if user_in.role not in (Role.employee, Role.team_leader):
        return user_in

    team = TaskStore(db).get_team(user_in.team_name)
    if user_in.role == Role.employee:
        manager_id = team.team_leader_id if team else None
        missing = "No team leader assigned to this team. Please contact admin."
    else:
        manager_id = team.tech_lead_id if team else None
        missing = "No tech lead assigned to this team. Please contact admin."
    if not manager_id:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=missing)
    return user_in.model_copy(update={"reports_to": manager_id})


def create_user(db: Session, user_in: user_schema.UserCreate) -> models.User:
    if db.query(models.User).filter(models.User.email == user_in.email).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")
    if db.query(models.User).filter(models.User.emp_id == user_in.emp_id).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Employee ID already registered")

    db_user = models.User(
        email=user_in.email, emp_id=user_in.emp_id, emp_name=user_in.emp_name,
        hashed_password=security.get_password_hash(user_in.password),
        role=user_in.role.value, team_name=user_in.team_name,
        managed_teams=list(user_in.managed_teams), reports_to=user_in.reports_to,
    )
    store = TaskStore(db)
    link_teams(store, db_user)
    db.add(db_user)
    store.commit()
    db.refresh(db_user)
    logger.info("Registered %s as %s", db_user.emp_id, db_user.role)
    return db_user
