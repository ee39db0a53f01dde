from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session
from tasktracker.constants.constants import Role
from tasktracker.core import security
from tasktracker.core.config import settings
from tasktracker.db import session, models
from tasktracker.schemas import token as token_schema
from tasktracker.schemas import user as user_schema
from tasktracker.services import users as user_service

router = APIRouter()

@router.post("/token", response_model=token_schema.Token)
def login(db: Session = Depends(session.get_db), form_data: OAuth2PasswordRequestForm = Depends()):
    user = db.query(models.User).filter(models.User.email == form_data.username).first()
    if not user or not security.verify_password(form_data.password, user.hashed_password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Incorrect username or password")

    access_token = security.create_access_token(data={"sub": user.email})
    return {"access_token": access_token, "token_type": "bearer"}

@router.post("/register", response_model=user_schema.User, status_code=status.HTTP_201_CREATED)
def register(user_in: user_schema.UserCreate, db: Session = Depends(session.get_db)):
    """ Self sign-up with a profile; reportsTo comes from the team. Admin accounts are created by other admins. """
    if not settings.ALLOW_SELF_REGISTRATION:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Self registration is disabled")
    if user_in.role == Role.admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin accounts cannot be self-registered")
    return user_service.create_user(db, user_service.resolve_reports_to(db, user_in))
