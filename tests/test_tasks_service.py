import datetime as dt

import pytest

from tasktracker.constants.constants import TECH_LEADS_TEAM
from tasktracker.core.errors import (
    AccessDenied, CollaboratorUnavailable, DailyLimitExceeded, InsufficientDailyBaseline, ReadOnlyRole, TaskNotFound,
)
from tasktracker.db import models
from tasktracker.schemas.task import TaskEntryCreate, TaskEntryUpdate, TaskFilters, TaskValidationRequest
from tasktracker.services import tasks as task_service
from tasktracker.services import teams as team_service

DAY = dt.date(2024, 1, 15)


def entry(emp_id, time_spent="4:00", work_type="Full-day", team_name="alpha", day=DAY, **extra):
    return TaskEntryCreate(
        team_name=team_name, date=day, emp_id=emp_id, emp_name=f"Name {emp_id}",
        work_type=work_type, time_spent=time_spent, status="In Progress", **extra,
    )


def task_count(db):
    return db.query(models.TaskEntry).count()


def test_employee_logs_own_task(store, db, alpha_team):
    result = task_service.create_task(store, alpha_team["E1"], entry("E1", "9:00"))
    assert result.validation.normal_hours == 9
    assert result.task.normal_hours == 9
    assert result.task.created_by == "E1"
    assert result.warnings == []
    assert task_count(db) == 1
    assert db.query(models.Team).filter(models.Team.name == "alpha").count() == 1


def test_admin_cannot_create_update_or_delete(store, db, alpha_team):
    admin = alpha_team["ADMIN"]
    task = task_service.create_task(store, alpha_team["E1"], entry("E1")).task

    with pytest.raises(ReadOnlyRole):
        task_service.create_task(store, admin, entry("E1"))
    with pytest.raises(ReadOnlyRole):
        task_service.update_task(store, admin, "alpha", DAY, "E1", task.id, TaskEntryUpdate(remarks="x"))
    with pytest.raises(ReadOnlyRole):
        task_service.delete_task(store, admin, "alpha", DAY, "E1", task.id)
    assert task_count(db) == 1


def test_rejected_write_persists_nothing(store, db, alpha_team):
    task_service.create_task(store, alpha_team["E1"], entry("E1", "5:00"))
    with pytest.raises(DailyLimitExceeded):
        task_service.create_task(store, alpha_team["E1"], entry("E1", "5:00"))
    assert task_count(db) == 1


def test_over_time_requires_full_day(store, alpha_team):
    with pytest.raises(InsufficientDailyBaseline):
        task_service.create_task(store, alpha_team["E1"], entry("E1", "1:00", work_type="Over Time"))

    task_service.create_task(store, alpha_team["E1"], entry("E1", "9:00"))
    result = task_service.create_task(store, alpha_team["E1"], entry("E1", "2:00", work_type="Over Time"))
    assert (result.validation.normal_hours, result.validation.extra_hours) == (9, 2)


def test_employee_cannot_log_into_other_team_or_for_others(store, db, alpha_team):
    with pytest.raises(AccessDenied):
        task_service.create_task(store, alpha_team["E1"], entry("E1", team_name="beta"))
    with pytest.raises(AccessDenied):
        task_service.create_task(store, alpha_team["E1"], entry("E2"))
    assert task_count(db) == 0


def test_track_lead_logs_only_for_direct_reports(store, alpha_team):
    task_service.create_task(store, alpha_team["TR1"], entry("E1"))
    with pytest.raises(AccessDenied):
        task_service.create_task(store, alpha_team["TR1"], entry("E2"))


def test_tech_lead_own_entries_go_to_tech_leads_team(store, alpha_team):
    result = task_service.create_task(store, alpha_team["TECH1"], entry("TECH1", team_name="alpha"))
    assert result.task.team_name == TECH_LEADS_TEAM

    # A tech-lead may log for managed teams but not for other tech-leads
    task_service.create_task(store, alpha_team["TECH1"], entry("E2"))
    with pytest.raises(AccessDenied):
        task_service.create_task(store, alpha_team["TECH1"], entry("TECH2", team_name=TECH_LEADS_TEAM))


def test_new_values_are_registered_for_the_team(store, alpha_team):
    task_service.create_task(
        store, alpha_team["TL1"],
        entry("E1", client_id="C1", client_name="Acme", project_id="P1", project_name="Portal", work_type="Training"),
    )
    clients = team_service.get_dropdown_values(store, alpha_team["TL1"], "alpha", "clients")
    projects = team_service.get_dropdown_values(store, alpha_team["TL1"], "alpha", "projects")
    employees = team_service.get_dropdown_values(store, alpha_team["TL1"], "alpha", "employees")
    work_types = team_service.get_dropdown_values(store, alpha_team["TL1"], "alpha", "workType")
    assert [(c.id, c.name) for c in clients] == [("C1", "Acme")]
    assert [(p.id, p.name) for p in projects] == [("P1", "Portal")]
    assert [e.id for e in employees] == ["E1"]
    assert "Training" in [w.name for w in work_types]


def test_employees_do_not_register_values(store, alpha_team):
    result = task_service.create_task(store, alpha_team["E1"], entry("E1", client_id="C1", client_name="Acme"))
    assert result.warnings == []
    assert team_service.get_dropdown_values(store, alpha_team["TL1"], "alpha", "clients") == []


def test_failed_value_registration_keeps_the_task(store, db, alpha_team, monkeypatch):
    def broken(*args, **kwargs):
        raise CollaboratorUnavailable("dropdown store down")

    monkeypatch.setattr(store, "add_dropdown_value", broken)
    result = task_service.create_task(store, alpha_team["TL1"], entry("E1", client_id="C1", client_name="Acme"))
    assert task_count(db) == 1
    assert any("Acme" in warning for warning in result.warnings)


def test_unreadable_day_refuses_the_write(store, db, alpha_team, monkeypatch):
    def broken(*args, **kwargs):
        raise CollaboratorUnavailable("task store down")

    monkeypatch.setattr(store, "list_task_entries", broken)
    with pytest.raises(CollaboratorUnavailable):
        task_service.create_task(store, alpha_team["E1"], entry("E1"))
    assert task_count(db) == 0


def test_update_excludes_the_edited_entry(store, alpha_team):
    employee = alpha_team["E1"]
    task_service.create_task(store, employee, entry("E1", "5:00"))
    task = task_service.create_task(store, employee, entry("E1", "4:00")).task

    result = task_service.update_task(
        store, employee, "alpha", DAY, "E1", task.id, TaskEntryUpdate(time_spent="4:00", remarks="done"),
    )
    assert result.validation.message.startswith("[EDIT MODE]")
    assert result.task.remarks == "done"
    assert result.task.updated_by == "E1"

    with pytest.raises(DailyLimitExceeded):
        task_service.update_task(store, employee, "alpha", DAY, "E1", task.id, TaskEntryUpdate(time_spent="4:30"))
    unchanged = store.get_task_entry("alpha", DAY, "E1", task.id)
    assert unchanged.time_spent == "4:00"


def test_update_and_delete_missing_task(store, alpha_team):
    with pytest.raises(TaskNotFound):
        task_service.update_task(store, alpha_team["E1"], "alpha", DAY, "E1", "missing", TaskEntryUpdate())
    with pytest.raises(TaskNotFound):
        task_service.delete_task(store, alpha_team["E1"], "alpha", DAY, "E1", "missing")


def test_delete_task(store, db, alpha_team):
    task = task_service.create_task(store, alpha_team["E1"], entry("E1")).task
    with pytest.raises(AccessDenied):
        task_service.delete_task(store, alpha_team["E2"], "alpha", DAY, "E1", task.id)
    task_service.delete_task(store, alpha_team["TL1"], "alpha", DAY, "E1", task.id)
    assert task_count(db) == 0


def test_preview_validation_writes_nothing(store, db, alpha_team):
    request = TaskValidationRequest(team_name="alpha", date=DAY, emp_id="E1", work_type="Full-day", time_spent="3:00")
    result = task_service.preview_validation(store, alpha_team["E1"], request)
    assert result.message == "3.0/9h used. 6:00 remaining"
    assert task_count(db) == 0


def test_list_tasks_respects_hierarchy(store, alpha_team):
    for emp_id in ("E1", "E2", "TR1", "TR2", "TL1"):
        task_service.create_task(store, alpha_team[emp_id], entry(emp_id))
    task_service.create_task(store, alpha_team["E1"], entry("E1", day=dt.date(2024, 1, 16)))

    def seen(caller, **filters):
        return sorted({task.emp_id for task in task_service.list_tasks(store, caller, TaskFilters(**filters))})

    assert seen(alpha_team["E1"]) == ["E1"]
    assert seen(alpha_team["TR1"]) == ["E1", "TR1"]
    assert seen(alpha_team["TL1"]) == ["E1", "E2", "TL1", "TR1", "TR2"]
    assert seen(alpha_team["ADMIN"]) == ["E1", "E2", "TL1", "TR1", "TR2"]
    assert seen(alpha_team["TECH2"]) == []
    assert seen(alpha_team["TL1"], employee="E2") == ["E2"]

    later = task_service.list_tasks(store, alpha_team["TL1"], TaskFilters(date_from=dt.date(2024, 1, 16)))
    assert [(task.emp_id, task.date) for task in later] == [("E1", dt.date(2024, 1, 16))]


def test_built_in_work_types_keep_their_spelling(store, alpha_team):
    result = task_service.create_task(store, alpha_team["TL1"], entry("E1", work_type="full-day"))
    assert result.task.work_type == "Full-day"

    work_types = team_service.get_dropdown_values(store, alpha_team["TL1"], "alpha", "workType")
    assert [w.name for w in work_types] == ["Full-day", "Half-day", "Relaxation", "Over Time"]
    assert team_service.add_dropdown_value(store, alpha_team["TL1"], "alpha", "workType", "over time", "over time") is False


def test_deleting_the_last_entry_releases_the_day(store, db, alpha_team):
    first = task_service.create_task(store, alpha_team["E1"], entry("E1")).task
    second = task_service.create_task(store, alpha_team["E1"], entry("E1")).task

    task_service.delete_task(store, alpha_team["E1"], "alpha", DAY, "E1", first.id)
    assert db.query(models.EmployeeDay).count() == 1
    task_service.delete_task(store, alpha_team["E1"], "alpha", DAY, "E1", second.id)
    assert db.query(models.EmployeeDay).count() == 0


def test_team_leader_filter(store, db, alpha_team):
    for emp_id in ("E1", "TL1"):
        task_service.create_task(store, alpha_team[emp_id], entry(emp_id))
    task_service.create_task(store, alpha_team["TECH1"], entry("TECH1"))
    store.ensure_team("alpha").team_leader_id = "TL1"
    db.commit()

    def seen(team_leader):
        tasks = task_service.list_tasks(store, alpha_team["TECH1"], TaskFilters(team_leader=team_leader))
        return sorted(task.emp_id for task in tasks)

    assert seen("TL1") == ["E1", "TL1"]
    assert seen("TECH1") == ["TECH1"]
    assert seen("nobody") == []


def test_filter_options_by_role(store, alpha_team):
    options = task_service.get_filter_options(store, alpha_team["TECH1"])
    assert options.teams == ["alpha"]
    assert [leader.emp_id for leader in options.team_leaders] == ["TL1"]
    assert [employee.emp_id for employee in options.employees] == ["E1", "E2"]

    options = task_service.get_filter_options(store, alpha_team["TL1"])
    assert options.teams == []
    assert [(e.emp_id, e.is_current_user) for e in options.employees] == [("TL1", True), ("E1", False), ("E2", False)]

    options = task_service.get_filter_options(store, alpha_team["E1"])
    assert (options.teams, options.team_leaders, options.employees) == ([], [], [])
