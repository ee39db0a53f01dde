from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from tasktracker.db import models, session
from tasktracker.core import security
from tasktracker.schemas import user as user_schema

router = APIRouter()

class PasswordUpdate(BaseModel):
    current_password: str
    new_password: str

class NameUpdate(user_schema.CamelModel):
    emp_name: str

@router.get("/me", response_model=user_schema.User)
def read_user_me(current_user: models.User = Depends(security.get_current_user)):
    """ Account details of the signed-in user. """
    return current_user

@router.get("/me/profile", response_model=user_schema.UserProfile)
def read_profile_me(profile: user_schema.UserProfile = Depends(security.get_caller_profile)):
    """ The role/team profile every permission check is made against. """
    return profile

@router.put("/me", response_model=user_schema.User)
def update_name_me(
    update: NameUpdate,
    db: Session = Depends(session.get_db),
    current_user: models.User = Depends(security.get_current_user)
):
    """ Users may rename themselves; role and team changes go through an admin. """
    current_user.emp_name = update.emp_name
    db.commit()
    db.refresh(current_user)
    return current_user

@router.put("/me/password", status_code=status.HTTP_204_NO_CONTENT)
def update_user_password(
    passwords: PasswordUpdate,
    db: Session = Depends(session.get_db),
    current_user: models.User = Depends(security.get_current_user)
):
    if not security.verify_password(passwords.current_password, current_user.hashed_password):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Incorrect current password")

    current_user.hashed_password = security.get_password_hash(passwords.new_password)
    db.commit()
    return
