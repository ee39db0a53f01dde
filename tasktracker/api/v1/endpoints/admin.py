from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session
from typing import List

from tasktracker.db import models, session
from tasktracker.db.store import TaskStore
from tasktracker.core import security
from tasktracker.schemas import team as team_schema
from tasktracker.schemas import user as user_schema
from tasktracker.services import users as user_service

router = APIRouter()

class PasswordReset(BaseModel):
    new_password: str


def _get_user_or_404(db: Session, emp_id: str) -> models.User:
    db_user = db.query(models.User).filter(models.User.emp_id == emp_id).first()
    if not db_user:
        raise HTTPException(status_code=404, detail="User not found")
    return db_user


@router.post("/users", response_model=user_schema.User, status_code=status.HTTP_201_CREATED)
def create_user(
    user_in: user_schema.UserCreate,
    db: Session = Depends(session.get_db),
    admin: models.User = Depends(security.get_current_admin_user)
):
    """ Creates a user of any role, admins included. """
    return user_service.create_user(db, user_in)

@router.get("/users", response_model=List[user_schema.User])
def get_all_users(
    db: Session = Depends(session.get_db),
    admin: models.User = Depends(security.get_current_admin_user)
):
    return db.query(models.User).order_by(models.User.emp_id).all()

@router.put("/users/{emp_id}", response_model=user_schema.User)
def update_user_profile(
    emp_id: str,
    updates: user_schema.UserUpdate,
    db: Session = Depends(session.get_db),
    admin: models.User = Depends(security.get_current_admin_user)
):
    """ Updates a user's name, role, team, managed teams or manager. """
    db_user = _get_user_or_404(db, emp_id)

    merged = user_schema.User.model_validate(db_user).model_dump()
    merged.update(updates.model_dump(exclude_unset=True))
    try:
        profile = user_schema.ProfileFields.model_validate(merged)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.errors(include_url=False, include_context=False, include_input=False))

    db_user.emp_name = profile.emp_name
    db_user.role = profile.role.value
    db_user.team_name = profile.team_name
    db_user.managed_teams = list(profile.managed_teams)
    db_user.reports_to = profile.reports_to
    store = TaskStore(db)
    user_service.link_teams(store, db_user)
    store.commit()
    db.refresh(db_user)
    return db_user

@router.put("/users/{emp_id}/password", status_code=status.HTTP_204_NO_CONTENT)
def reset_user_password(
    emp_id: str,
    password_in: PasswordReset,
    db: Session = Depends(session.get_db),
    admin: models.User = Depends(security.get_current_admin_user)
):
    db_user = _get_user_or_404(db, emp_id)
    db_user.hashed_password = security.get_password_hash(password_in.new_password)
    db.commit()
    return

@router.delete("/users/{emp_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_user(
    emp_id: str,
    db: Session = Depends(session.get_db),
    admin: models.User = Depends(security.get_current_admin_user)
):
    """
    Deletes a user, but only if nobody still reports to them.
    """
    db_user = _get_user_or_404(db, emp_id)

    report_count = db.query(models.User).filter(models.User.reports_to == emp_id).count()
    if report_count > 0:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Cannot delete user. They still have {report_count} direct reports. Please reassign them first."
        )

    db.delete(db_user)
    db.commit()
    return

@router.get("/teams", response_model=List[team_schema.TeamDetail])
def get_all_teams(
    db: Session = Depends(session.get_db),
    admin: models.User = Depends(security.get_current_admin_user)
):
    """ Every team with its leaders and members. """
    store = TaskStore(db)
    teams_output = []
    for team in db.query(models.Team).order_by(models.Team.name).all():
        members = store.team_members(team.name)
        teams_output.append(team_schema.TeamDetail(
            name=team.name,
            team_leader_id=team.team_leader_id,
            tech_lead_id=team.tech_lead_id,
            member_count=len(members),
            members=[team_schema.TeamMember.model_validate(member) for member in members],
        ))
    return teams_output
