"""Turns a batch's schedule configuration into BatchSession rows.

`generate_sessions` only ever appends. Replacing an existing schedule goes
through `regenerate_sessions`, which deletes and recreates in one
transaction so readers never see a batch with its sessions half gone.
"""
import datetime
import logging
from typing import Iterable, List, Optional

from django.db import transaction
from django.utils.dateparse import parse_date, parse_time

from batches import models as batch_models

logger = logging.getLogger(__name__)

# Fields whose change invalidates every generated session.
SCHEDULE_FIELDS = (
    'start_date',
    'end_date',
    'session_start_time',
    'session_end_time',
    'no_of_sessions',
    'schedule_pattern',
    'type',
)

WEEKDAY_NAMES = ('MONDAY', 'TUESDAY', 'WEDNESDAY', 'THURSDAY', 'FRIDAY', 'SATURDAY', 'SUNDAY')

PATTERN_WEEKDAYS = {
    'MWF': frozenset({0, 2, 4}),
    'TTS': frozenset({1, 3, 5}),
    'WEEKEND': frozenset({5, 6}),
    'DAILY': frozenset(range(7)),
}


def pattern_weekdays(pattern: Optional[str]) -> frozenset:
    """Weekdays (Monday=0) selected by a schedule pattern.

    Matching is case-insensitive: "mwf" behaves like "MWF" and "monday"
    like "Monday". Anything unrecognised selects no day at all.
    """
    key = (pattern or '').strip().upper()
    if key in PATTERN_WEEKDAYS:
        return PATTERN_WEEKDAYS[key]
    if key in WEEKDAY_NAMES:
        return frozenset({WEEKDAY_NAMES.index(key)})
    return frozenset()


def _as_date(value) -> Optional[datetime.date]:
    if value in (None, ''):
        return None
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    return parse_date(str(value).strip()[:10])


def _as_time(value) -> Optional[datetime.time]:
    if value in (None, ''):
        return None
    if isinstance(value, datetime.datetime):
        return value.time().replace(microsecond=0)
    if isinstance(value, datetime.time):
        return value.replace(microsecond=0)
    parsed = parse_time(str(value).strip())
    return parsed.replace(microsecond=0) if parsed is not None else None


def iter_pattern_dates(start_date: datetime.date, end_date: Optional[datetime.date],
                       count: int, weekdays: Iterable[int]) -> List[datetime.date]:
    """Walk forward from start_date collecting at most `count` matching days.

    The walk stops early when it passes end_date. With no end date the
    caller must supply at least one weekday, otherwise nothing ever matches.
    """
    weekdays = frozenset(weekdays)
    dates = []
    if not weekdays:
        return dates
    current = start_date
    while len(dates) < count and (end_date is None or current <= end_date):
        if current.weekday() in weekdays:
            dates.append(current)
        current += datetime.timedelta(days=1)
    return dates


def _manual_dates(batch: batch_models.Batch) -> List[datetime.date]:
    dates = []
    for raw in batch.selected_session_dates or []:
        day = _as_date(raw)
        if day is None:
            logger.warning('Ignoring unparseable manual session date %r for batch %s', raw, batch.pk)
            continue
        dates.append(day)
    return dates


def planned_dates(batch: batch_models.Batch) -> List[datetime.date]:
    """Dates the generator would create for `batch`, without touching the DB."""
    start_date = _as_date(batch.start_date)
    if start_date is None:
        logger.warning('Session generation skipped for batch %s: missing start date', batch.pk)
        return []

    count = batch.no_of_sessions
    if count is None or count <= 0 or not batch.session_start_time or not batch.session_end_time:
        logger.info(
            'Session generation skipped for batch %s: missing required parameters '
            '(no_of_sessions, session_start_time or session_end_time)',
            batch.pk,
        )
        return []

    pattern = batch.schedule_pattern
    if pattern == batch_models.Batch.MANUAL_PATTERN and batch.selected_session_dates:
        return _manual_dates(batch)

    weekdays = pattern_weekdays(pattern)
    if not weekdays:
        logger.warning('Session generation skipped for batch %s: pattern %r selects no weekday', batch.pk, pattern)
        return []

    end_date = _as_date(batch.end_date)
    dates = iter_pattern_dates(start_date, end_date, count, weekdays)
    if len(dates) < count:
        logger.warning(
            'Could not create the requested number of sessions for batch %s. Requested: %s, Created: %s. '
            'End date: %s, Pattern: %s. Check start/end dates and pattern.',
            batch.pk, count, len(dates), end_date.isoformat() if end_date else 'N/A', pattern,
        )
    return dates


@transaction.atomic
def generate_sessions(batch: batch_models.Batch) -> List[batch_models.BatchSession]:
    """Append one scheduled session per planned date, in date order."""
    start_time = _as_time(batch.session_start_time)
    end_time = _as_time(batch.session_end_time)
    sessions = [
        batch_models.BatchSession(
            batch=batch,
            date=day,
            start_time=start_time,
            end_time=end_time,
            status=batch_models.BatchSession.Status.SCHEDULED,
        )
        for day in planned_dates(batch)
    ]
    if not sessions:
        return []
    batch_models.BatchSession.objects.bulk_create(sessions)
    logger.info('Generated %s sessions for batch %s', len(sessions), batch.pk)
    return sessions


@transaction.atomic
def regenerate_sessions(batch: batch_models.Batch) -> List[batch_models.BatchSession]:
    """Replace every session of `batch` with a freshly generated set.

    Attendance recorded against the old sessions goes with them.
    """
    deleted, _ = batch.sessions.all().delete()
    logger.info('Deleted sessions of batch %s before regeneration (%s rows)', batch.pk, deleted)
    return generate_sessions(batch)


def normalize_schedule_value(field: str, value):
    """Canonical form used to decide whether a schedule field really changed.

    Dates compare as Y-m-d, times as H:M:S, the session count as an int
    and everything else as a string.
    """
    if value is None:
        return None
    if field in ('start_date', 'end_date'):
        day = _as_date(value)
        return day.isoformat() if day is not None else str(value)
    if field in ('session_start_time', 'session_end_time'):
        moment = _as_time(value)
        return moment.strftime('%H:%M:%S') if moment is not None else str(value)
    if field == 'no_of_sessions':
        try:
            return int(value)
        except (TypeError, ValueError):
            return str(value)
    return str(value)


def should_regenerate(batch: batch_models.Batch, incoming: dict) -> bool:
    """True when a schedule field present in `incoming` differs from the stored one."""
    for field in SCHEDULE_FIELDS:
        if field not in incoming:
            continue
        old = normalize_schedule_value(field, getattr(batch, field))
        new = normalize_schedule_value(field, incoming[field])
        if old != new:
            return True
    return False
