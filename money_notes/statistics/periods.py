"""
Calendar buckets for trend statistics.

Buckets follow the calendar, not fixed-length windows: weeks start on
Monday and are labelled with their ISO week, months run from the 1st to
the last day of the month, years from January 1st to December 31st.
"""

import calendar
from datetime import date, timedelta

from money_notes.models.statistics import GroupBy


def bucket_start(day: date, group_by: GroupBy) -> date:
    """First day of the bucket containing `day`."""
    if group_by == GroupBy.DAY:
        return day
    if group_by == GroupBy.WEEK:
        return day - timedelta(days=day.weekday())
    if group_by == GroupBy.MONTH:
        return day.replace(day=1)
    return date(day.year, 1, 1)


def bucket_end(start: date, group_by: GroupBy) -> date:
    """Last day (inclusive) of the bucket starting at `start`."""
    if group_by == GroupBy.DAY:
        return start
    if group_by == GroupBy.WEEK:
        return start + timedelta(days=6)
    if group_by == GroupBy.MONTH:
        last_day = calendar.monthrange(start.year, start.month)[1]
        return start.replace(day=last_day)
    return date(start.year, 12, 31)


def next_bucket(start: date, group_by: GroupBy) -> date:
    return bucket_end(start, group_by) + timedelta(days=1)


def bucket_label(start: date, group_by: GroupBy) -> str:
    """Period label: 2024-03-01, 2024-W09, 2024-03 or 2024."""
    if group_by == GroupBy.DAY:
        return start.isoformat()
    if group_by == GroupBy.WEEK:
        iso_year, iso_week, _ = start.isocalendar()
        return f"{iso_year}-W{iso_week:02d}"
    if group_by == GroupBy.MONTH:
        return start.strftime("%Y-%m")
    return f"{start.year:04d}"


def iter_days(start: date, end: date):
    """Every calendar day in [start, end], ascending."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
