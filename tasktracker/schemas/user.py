# backend-server/tasktracker/schemas/user.py
from pydantic import BaseModel, EmailStr, model_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional

from tasktracker.constants.constants import Role, TEAM_SCOPED_ROLES


class CamelModel(BaseModel):
    """Base for every wire model: camelCase on the wire, snake_case in code."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class UserProfile(CamelModel):
    role: Role
    emp_id: str
    emp_name: Optional[str] = None
    team_name: Optional[str] = None
    managed_teams: List[str] = []
    reports_to: Optional[str] = None


class TargetProfile(CamelModel):
    """What a hierarchy lookup by empId returns."""

    role: Role
    team_name: Optional[str] = None
    reports_to: Optional[str] = None


class ProfileFields(CamelModel):
    emp_id: str
    emp_name: str
    role: Role
    team_name: Optional[str] = None
    managed_teams: List[str] = []
    reports_to: Optional[str] = None

    @model_validator(mode="after")
    def check_role_shape(self):
        if self.role in TEAM_SCOPED_ROLES and not self.team_name:
            raise ValueError(f"teamName is required for role '{self.role.value}'")
        if self.role in (Role.tech_lead, Role.admin) and self.team_name:
            raise ValueError(f"Role '{self.role.value}' does not belong to a team")
        if self.role != Role.tech_lead and self.managed_teams:
            raise ValueError("Only tech-leads manage teams")
        return self


class UserCreate(ProfileFields):
    email: EmailStr
    password: str


class User(CamelModel):
    id: int
    email: EmailStr
    emp_id: str
    emp_name: Optional[str] = None
    role: Role
    team_name: Optional[str] = None
    managed_teams: List[str] = []
    reports_to: Optional[str] = None


class UserUpdate(CamelModel):
    emp_name: Optional[str] = None
    role: Optional[Role] = None
    team_name: Optional[str] = None
    managed_teams: Optional[List[str]] = None
    reports_to: Optional[str] = None
