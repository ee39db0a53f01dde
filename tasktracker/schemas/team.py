# backend-server/tasktracker/schemas/team.py
from typing import List, Optional

from tasktracker.schemas.user import CamelModel


class DropdownOption(CamelModel):
    id: str
    name: str


class DropdownValueCreate(CamelModel):
    id: str
    name: Optional[str] = None


class TeamMember(CamelModel):
    emp_id: str
    emp_name: Optional[str] = None
    role: str
    reports_to: Optional[str] = None


class TeamDetail(CamelModel):
    name: str
    team_leader_id: Optional[str] = None
    tech_lead_id: Optional[str] = None
    member_count: int
    members: List[TeamMember]
