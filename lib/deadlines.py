# =============================================================================
# lib/deadlines.py - Deadline Option Resolution
# =============================================================================
# Maps the symbolic deadline options offered when creating a task
# ("3d", "1w", ..., "flexible") to concrete due dates, and back.
#
# All functions take the current time as an argument so they stay pure.
# =============================================================================

from __future__ import annotations

import math
from datetime import datetime, timedelta
from enum import Enum


class DeadlineOption(str, Enum):
    """How soon the buyer needs the promised views delivered."""
    THREE_DAYS = "3d"
    ONE_WEEK = "1w"
    TWO_WEEKS = "2w"
    ONE_MONTH = "1m"
    TWO_MONTHS = "2m"
    THREE_MONTHS = "3m"
    SIX_MONTHS = "6m"
    FLEXIBLE = "flexible"


# Days added to "now" for each option. FLEXIBLE has no concrete date.
DEADLINE_DAYS: dict[DeadlineOption, int | None] = {
    DeadlineOption.THREE_DAYS: 3,
    DeadlineOption.ONE_WEEK: 7,
    DeadlineOption.TWO_WEEKS: 14,
    DeadlineOption.ONE_MONTH: 30,
    DeadlineOption.TWO_MONTHS: 60,
    DeadlineOption.THREE_MONTHS: 90,
    DeadlineOption.SIX_MONTHS: 180,
    DeadlineOption.FLEXIBLE: None,
}

DEADLINE_LABELS: dict[DeadlineOption, str] = {
    DeadlineOption.THREE_DAYS: "3 Days",
    DeadlineOption.ONE_WEEK: "1 Week",
    DeadlineOption.TWO_WEEKS: "2 Weeks",
    DeadlineOption.ONE_MONTH: "1 Month",
    DeadlineOption.TWO_MONTHS: "2 Months",
    DeadlineOption.THREE_MONTHS: "3 Months",
    DeadlineOption.SIX_MONTHS: "6 Months",
    DeadlineOption.FLEXIBLE: "Flexible",
}


def resolve_deadline(option: DeadlineOption | str, now: datetime) -> datetime | None:
    """
    Resolve a deadline option to a concrete due date.

    Args:
        option: A DeadlineOption or its string value ("1w")
        now: The reference time (caller supplied)

    Returns:
        now + offset, or None for the flexible option

    Raises:
        ValueError: If option is not a known deadline option
    """
    days = DEADLINE_DAYS[DeadlineOption(option)]
    if days is None:
        return None
    return now + timedelta(days=days)


def infer_deadline_option(due_date: datetime | None, now: datetime) -> DeadlineOption:
    """
    Pick the deadline option that a stored due date falls into.

    The days remaining are rounded up, then matched against the smallest
    option that still covers them. Dates already past count as the most
    urgent option. No due date, or more than 180 days out, is flexible.
    """
    if due_date is None:
        return DeadlineOption.FLEXIBLE

    days_left = math.ceil((due_date - now).total_seconds() / 86400)

    for option, days in DEADLINE_DAYS.items():
        if days is not None and days_left <= days:
            return option

    return DeadlineOption.FLEXIBLE
