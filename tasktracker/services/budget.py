# backend-server/tasktracker/services/budget.py
"""
Daily time-budget validation for task entries.

An employee's entries for one team and date share a 9-hour standard day.
Each entry is checked against its work type's per-entry cap, and the day as
a whole may only go past 9 hours through "Over Time" entries. All arithmetic
runs on whole minutes; hours are only produced for display and storage.
"""
import logging
import re
from typing import Iterable, Optional

from tasktracker.constants.constants import DAILY_LIMIT_MINUTES, DEFAULT_TIME_SPENT, WORK_TYPE_LIMITS, WorkType
from tasktracker.core.errors import (
    BelowMinimum, CollaboratorUnavailable, DailyLimitExceeded, ExceedsMaximum,
    InsufficientDailyBaseline, InvalidFormat,
)
from tasktracker.schemas.task import DailySummary, ValidationResult

logger = logging.getLogger(__name__)

TIME_PATTERN = re.compile(r"(\d{1,2}):([0-5]\d)")
OVER_TIME = WorkType.over_time.value.lower()
DAILY_LIMIT_HOURS = DAILY_LIMIT_MINUTES // 60
BUILT_IN_SPELLINGS = {work_type.value.lower(): work_type.value for work_type in WorkType}


def parse_time_spent(time_spent: Optional[str]) -> int:
    """Parse ``H:MM`` or ``HH:MM`` into minutes."""
    match = TIME_PATTERN.fullmatch((time_spent or "").strip())
    if not match:
        raise InvalidFormat("Invalid time format (HH:MM)", timeSpent=time_spent)
    return int(match.group(1)) * 60 + int(match.group(2))


def time_format_to_hours(time_spent: str) -> float:
    return parse_time_spent(time_spent) / 60


def hours_to_time_format(hours: float, pad: bool = False) -> str:
    # Round to whole minutes before splitting so 59.94 minutes become the next hour
    whole_hours, minutes = divmod(max(round(hours * 60), 0), 60)
    if pad:
        return f"{whole_hours:02d}:{minutes:02d}"
    return f"{whole_hours}:{minutes:02d}"


def _hm(minutes: int) -> str:
    return hours_to_time_format(minutes / 60)


def canonical_work_type(work_type: str) -> str:
    """Built-in work types keep their standard spelling whatever case was typed."""
    work_type = work_type.strip()
    return BUILT_IN_SPELLINGS.get(work_type.lower(), work_type)


def is_built_in_work_type(work_type: str) -> bool:
    return work_type.strip().lower() in BUILT_IN_SPELLINGS


def default_time_for(work_type: str) -> Optional[str]:
    return DEFAULT_TIME_SPENT.get(canonical_work_type(work_type))


def sum_entry_minutes(entries: Iterable, exclude_entry_id: Optional[str] = None) -> int:
    total = 0
    for entry in entries:
        if exclude_entry_id is not None and entry.id == exclude_entry_id:
            continue
        try:
            total += parse_time_spent(entry.time_spent)
        except InvalidFormat:
            logger.warning("Skipping entry %s with unparseable timeSpent %r", entry.id, entry.time_spent)
    return total


def validate(
    work_type: str,
    time_spent: str,
    existing_entries: Optional[Iterable],
    exclude_entry_id: Optional[str] = None,
    is_edit: bool = False,
) -> ValidationResult:
    """
    Check one entry against the employee's other entries for the same day.

    ``existing_entries`` are the employee's persisted entries for the team and
    date; ``None`` means they could not be read and the entry is refused.
    Raises one of the budget errors, otherwise returns the normal/extra split.
    """
    if existing_entries is None:
        raise CollaboratorUnavailable("Existing entries for the day are unknown; the entry cannot be approved")

    current = parse_time_spent(time_spent)
    prior = sum_entry_minutes(existing_entries, exclude_entry_id)
    projected = prior + current
    kind = work_type.strip().lower()

    if kind == OVER_TIME:
        if projected < DAILY_LIMIT_MINUTES:
            shortfall = DAILY_LIMIT_MINUTES - projected
            raise InsufficientDailyBaseline(
                f"Over Time requires daily total ≥ {DAILY_LIMIT_HOURS}h. "
                f"Current: {prior / 60:.1f}h + {current / 60:.1f}h = {projected / 60:.1f}h. "
                f"Need {_hm(shortfall)} more.",
                shortfall=_hm(shortfall),
                shortfallHours=shortfall / 60,
            )
    else:
        # Custom team work types carry no per-entry bounds
        min_minutes, max_minutes = WORK_TYPE_LIMITS.get(kind, (0, None))
        if current < min_minutes:
            deficit = min_minutes - current
            raise BelowMinimum(
                f"{work_type} requires minimum {min_minutes / 60:g}h. You are short by {_hm(deficit)} hours.",
                shortfall=_hm(deficit),
                shortfallHours=deficit / 60,
            )
        if max_minutes is not None and current > max_minutes:
            excess = current - max_minutes
            raise ExceedsMaximum(
                f"{work_type} allows maximum {max_minutes / 60:g}h. "
                f"Exceeded by {_hm(excess)} hours. Task cannot be saved.",
                excess=_hm(excess),
                excessHours=excess / 60,
            )

    normal = min(projected, DAILY_LIMIT_MINUTES)
    extra = projected - normal

    if extra > 0 and kind != OVER_TIME:
        raise DailyLimitExceeded(
            f"Daily {DAILY_LIMIT_HOURS}-hour limit exceeded. "
            "Please use 'Over Time' work type for additional hours or reduce time.",
            excess=_hm(extra),
            excessHours=extra / 60,
            normalHours=normal / 60,
        )

    message = "[EDIT MODE] " if is_edit else ""
    if extra > 0:
        message += f"Daily: {DAILY_LIMIT_HOURS}h normal + {_hm(extra)} over time"
    elif normal < DAILY_LIMIT_MINUTES:
        message += f"{normal / 60:.1f}/{DAILY_LIMIT_HOURS}h used. {_hm(DAILY_LIMIT_MINUTES - normal)} remaining"
    else:
        message += f'{DAILY_LIMIT_HOURS}/{DAILY_LIMIT_HOURS}h normal time used. Use "Over Time" work type for additional hours.'

    return ValidationResult(
        normal_hours=normal / 60,
        extra_hours=extra / 60,
        total_daily_hours=projected / 60,
        message=message,
    )


def summarize_day(entries: Iterable) -> DailySummary:
    """Used, remaining and overtime hours for a day's entries."""
    total = sum_entry_minutes(entries)
    return DailySummary(
        total_hours=total // 60,
        total_minutes=total % 60,
        used_hours=min(total, DAILY_LIMIT_MINUTES) / 60,
        remaining_hours=max(DAILY_LIMIT_MINUTES - total, 0) / 60,
        over_time_hours=max(total - DAILY_LIMIT_MINUTES, 0) / 60,
    )
