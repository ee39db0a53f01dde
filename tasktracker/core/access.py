# backend-server/tasktracker/core/access.py
# Pure permission checks over an explicit caller profile.
import logging
from typing import Callable, Iterable, List, Optional

from tasktracker.constants.constants import Role, TECH_LEADS_TEAM
from tasktracker.core.errors import CollaboratorUnavailable, ReadOnlyRole
from tasktracker.schemas.user import TargetProfile, UserProfile

logger = logging.getLogger(__name__)

RoleLookup = Callable[[str], Optional[TargetProfile]]


def can_access_team(caller: UserProfile, team_name: str) -> bool:
    """Whether the caller may see data for ``team_name`` at all."""
    if caller.role == Role.admin:
        return True
    if caller.role == Role.tech_lead:
        return team_name in caller.managed_teams or team_name == TECH_LEADS_TEAM
    if caller.role in (Role.team_leader, Role.track_lead, Role.employee):
        return team_name == caller.team_name
    return False


def can_access_employee(caller: UserProfile, team_name: str, target_emp_id: str, lookup: RoleLookup) -> bool:
    """
    Whether the caller may read or write ``target_emp_id``'s entries in ``team_name``.

    ``lookup`` resolves the target's role and manager for the team-leader and
    track-lead rules. A target that cannot be resolved is denied.
    """
    if caller.role == Role.admin:
        return True
    if caller.emp_id == target_emp_id:
        return True

    if caller.role == Role.tech_lead:
        # Other tech-leads' personal entries stay private
        if team_name == TECH_LEADS_TEAM:
            return False
        return team_name in caller.managed_teams

    if caller.role == Role.team_leader:
        if team_name != caller.team_name:
            return False
        target = _resolve_target(target_emp_id, lookup)
        return target is not None and target.role in (Role.track_lead, Role.employee)

    if caller.role == Role.track_lead:
        if team_name != caller.team_name:
            return False
        target = _resolve_target(target_emp_id, lookup)
        return target is not None and target.role == Role.employee and target.reports_to == caller.emp_id

    if caller.role == Role.employee:
        return False

    logger.info("Unknown role %r denied access to %s/%s", caller.role, team_name, target_emp_id)
    return False


def _resolve_target(emp_id: str, lookup: RoleLookup) -> Optional[TargetProfile]:
    try:
        target = lookup(emp_id)
    except CollaboratorUnavailable as e:
        logger.warning("Hierarchy lookup for %s failed, denying access: %s", emp_id, e)
        return None
    if target is None:
        logger.info("Hierarchy lookup found no user %s, denying access", emp_id)
    return target


def ensure_can_write(caller: UserProfile) -> None:
    """Admins are read-only for task entries regardless of any other rule."""
    if caller.role == Role.admin:
        raise ReadOnlyRole("Admins have read-only access and cannot modify task entries")


def can_manage_team_data(caller: UserProfile, team_name: str) -> bool:
    """Only non-employee roles with team access may register dropdown values."""
    return caller.role != Role.employee and can_access_team(caller, team_name)


def accessible_teams(caller: UserProfile, all_teams: Iterable[str] = ()) -> List[str]:
    if caller.role == Role.admin:
        return sorted(set(all_teams))
    if caller.role == Role.tech_lead:
        teams = list(caller.managed_teams)
        if TECH_LEADS_TEAM not in teams:
            teams.append(TECH_LEADS_TEAM)
        return teams
    if caller.team_name:
        return [caller.team_name]
    return []
