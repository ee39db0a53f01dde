# backend-server/tasktracker/db/models.py
from datetime import datetime
from sqlalchemy import (
    JSON, Column, Date, DateTime, Float, ForeignKey, Integer, String, Text, CheckConstraint, UniqueConstraint,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()

class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    emp_id = Column(String(50), unique=True, nullable=False, index=True)
    emp_name = Column(String(100))
    email = Column(String(100), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False)
    team_name = Column(String(100), ForeignKey("teams.name"), nullable=True, index=True)
    managed_teams = Column(JSON, nullable=False, default=list)
    reports_to = Column(String(50), nullable=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    __table_args__ = (
        CheckConstraint("role IN ('employee', 'track-lead', 'team-leader', 'tech-lead', 'admin')"),
    )

class Team(Base):
    __tablename__ = "teams"
    name = Column(String(100), primary_key=True)
    team_leader_id = Column(String(50), nullable=True)
    tech_lead_id = Column(String(50), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

class EmployeeDay(Base):
    """One employee's day within a team; locked while that day's entries are validated."""
    __tablename__ = "employee_days"
    id = Column(Integer, primary_key=True, index=True)
    team_name = Column(String(100), ForeignKey("teams.name"), nullable=False)
    date = Column(Date, nullable=False)
    emp_id = Column(String(50), nullable=False)
    emp_name = Column(String(100))
    __table_args__ = ( UniqueConstraint("team_name", "date", "emp_id"), )

class TaskEntry(Base):
    __tablename__ = "task_entries"
    id = Column(String(36), primary_key=True, index=True)
    team_name = Column(String(100), ForeignKey("teams.name"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    emp_id = Column(String(50), nullable=False, index=True)
    emp_name = Column(String(100))
    work_type = Column(String(50), nullable=False)
    time_spent = Column(String(5), nullable=False)
    status = Column(String(20), nullable=False)
    percentage_completion = Column(String(3), nullable=True)
    client_id = Column(String(100), nullable=True)
    client_name = Column(String(200), nullable=True)
    project_id = Column(String(100), nullable=True)
    project_name = Column(String(200), nullable=True)
    phase = Column(String(100), nullable=True)
    task_description = Column(Text, nullable=True)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    remarks = Column(Text, nullable=True)
    normal_hours = Column(Float, nullable=False, default=0)
    extra_hours = Column(Float, nullable=False, default=0)
    total_daily_hours = Column(Float, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    created_by = Column(String(50), nullable=True)
    updated_at = Column(DateTime, nullable=True)
    updated_by = Column(String(50), nullable=True)

class DropdownValue(Base):
    __tablename__ = "dropdown_values"
    id = Column(Integer, primary_key=True, index=True)
    team_name = Column(String(100), ForeignKey("teams.name"), nullable=False, index=True)
    field = Column(String(30), nullable=False)
    value_id = Column(String(100), nullable=False)
    value_name = Column(String(200), nullable=False)
    __table_args__ = (
        UniqueConstraint("team_name", "field", "value_id"),
        CheckConstraint("field IN ('employees', 'clients', 'projects', 'workType')"),
    )
