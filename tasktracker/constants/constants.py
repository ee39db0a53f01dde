"""Constants for user roles, work types, task statuses and the daily hour budget."""

from enum import Enum


class Role(str, Enum):
    """Enumeration of user roles within the tracker."""

    employee = "employee"
    track_lead = "track-lead"
    team_leader = "team-leader"
    tech_lead = "tech-lead"
    admin = "admin"


class TaskStatus(str, Enum):
    """Enumeration of task statuses."""

    completed = "Completed"
    in_progress = "In Progress"
    on_hold = "On Hold"


class WorkType(str, Enum):
    """Built-in work types. Teams may register further custom values."""

    full_day = "Full-day"
    half_day = "Half-day"
    relaxation = "Relaxation"
    over_time = "Over Time"


# Virtual team holding every tech-lead's personal entries
TECH_LEADS_TEAM = "techLeads"

# Roles that belong to exactly one team
TEAM_SCOPED_ROLES = (Role.employee, Role.track_lead, Role.team_leader)

DAILY_LIMIT_MINUTES = 9 * 60

# Per-entry (min, max) in minutes keyed by lower-cased work type; None is unbounded
WORK_TYPE_LIMITS = {
    "full-day": (0, 9 * 60),
    "half-day": (0, 270),
    "relaxation": (0, 7 * 60),
    "over time": (0, None),
}

# Form auto-fill when a work type is picked with no time entered yet
DEFAULT_TIME_SPENT = {
    WorkType.full_day.value: "9:00",
    WorkType.half_day.value: "4:30",
    WorkType.relaxation.value: "7:00",
    WorkType.over_time.value: "10:00",
}

PERCENTAGE_COMPLETION_VALUES = ["5", "10", "25", "40", "50", "65", "75", "85", "90", "100"]

# Dropdown fields whose values are fixed for every team
PREDEFINED_VALUES = {
    "percentageCompletion": PERCENTAGE_COMPLETION_VALUES,
    "status": [status.value for status in TaskStatus],
}
