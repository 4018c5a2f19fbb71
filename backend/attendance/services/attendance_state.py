"""Attendance state machine.

States are present, absent, excused and "not marked". A missing row means
"not marked". Rows for sessions up to today are created lazily the first
time a batch's attendance is read. The one transition rule: while a
person's `excused_until` covers the date, only "excused" may be recorded.
"""
import datetime
import logging
from typing import List, Optional, Tuple

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from activity.services import activity_log
from attendance.models import AttendanceStatus, PersonType
from batches import models as batch_models
from coaching.clock import system_clock
from coaching.exceptions import Conflict, InvalidRequest, NotFound
from people.models import PersonStatus

logger = logging.getLogger(__name__)

RECENT_LIMIT = 10
PARTNER_INACTIVE = 'Partner is not active'
RECENT_RETRIEVED = 'Recent attendance retrieved successfully'


def person_payload(person) -> dict:
    return {
        'id': person.id,
        'name': person.name,
        'email': person.email,
        'excused_until': person.excused_until.isoformat() if person.excused_until else None,
        'excuse_reason': person.excuse_reason,
    }


def _iso(moment: Optional[datetime.datetime]) -> Optional[str]:
    if moment is None:
        return None
    return timezone.localtime(moment).isoformat()


def session_payload(session: batch_models.BatchSession, batch: batch_models.Batch) -> dict:
    return {
        'id': session.id,
        'date': session.date.isoformat(),
        'batch': {'id': batch.id, 'name': batch.name},
    }


def format_record(person_type: PersonType, session, batch, person, record=None, editable: bool = True) -> dict:
    """Wire shape of one (session, person) attendance entry.

    The embedded person carries their current excusal, not the one in
    force on the session date.
    """
    state = record.status if record is not None else AttendanceStatus.NOT_MARKED
    return {
        'id': record.id if record is not None else None,
        'status': str(state),
        'display_status': str(state),
        'marked_at': _iso(record.marked_at) if record is not None else None,
        'notes': record.notes if record is not None else None,
        'is_editable': editable,
        'batch_session': session_payload(session, batch),
        person_type.value: person_payload(person),
    }


def _batch_or_404(batch_id) -> batch_models.Batch:
    batch = batch_models.Batch.objects.filter(pk=batch_id).first()
    if batch is None:
        raise NotFound('Batch not found.')
    return batch


@transaction.atomic
def get_all_attendance(batch_id: int, person_type, clock=None) -> List[dict]:
    """Every (session, active person) pair of a batch, in session order.

    Missing rows for sessions dated today or earlier are inserted as
    "not marked" first. Future sessions are reported but never stored.
    """
    clock = clock or system_clock
    person_type = PersonType(person_type)
    today = clock.today()

    batch = _batch_or_404(batch_id)
    sessions = list(batch.sessions.order_by('date', 'start_time', 'id'))
    persons = list(
        person_type.person_model.objects
        .filter(status=PersonStatus.ACTIVE, batches=batch)
        .order_by('id')
    )

    if not persons:
        raise NotFound(f'No active {person_type.value}s found for this batch.', data=[])
    if not sessions:
        raise NotFound('No sessions found for this batch.', data=[])

    due = [s for s in sessions if s.date <= today]
    attendance_model = person_type.attendance_model
    field = person_type.person_field

    if due:
        # The unique (session, person) constraint turns this into insert-if-absent.
        attendance_model.objects.bulk_create(
            [
                attendance_model(batch_session=session, status=AttendanceStatus.NOT_MARKED, **{field: person})
                for session in due
                for person in persons
            ],
            ignore_conflicts=True,
            batch_size=500,
        )

    existing = {
        (row.batch_session_id, getattr(row, f'{field}_id')): row
        for row in attendance_model.objects.filter(batch_session__in=due, **{f'{field}__in': persons})
    }

    records = []
    for session in sessions:
        editable = session.date <= today
        for person in persons:
            row = existing.get((session.id, person.id)) if editable else None
            records.append(format_record(person_type, session, batch, person, row, editable=editable))
    return records


@transaction.atomic
def mark_attendance(person_type, person_id: int, batch_id: int, date: datetime.date, status: str,
                    notes: Optional[str] = None, actor=None, request=None, clock=None) -> dict:
    """Record `status` for one person at the batch's session on `date`.

    Checks run in a fixed order: no future dates, then the excusal window,
    then the session must exist. Marking the same key again updates the
    existing row.
    """
    clock = clock or system_clock
    person_type = PersonType(person_type)

    if date > clock.today():
        raise InvalidRequest('Cannot mark attendance for future dates', error='Future date restriction')

    person = person_type.person_model.objects.filter(pk=person_id).first()
    if person is None:
        raise NotFound(f'{person_type.label} not found.')

    if person.is_excused_on(date) and status != AttendanceStatus.EXCUSED:
        excused_until = person.excused_until.isoformat()
        raise Conflict(
            f'Cannot mark attendance as {status}. {person_type.label} is excused until {excused_until}. '
            'Can only mark as excused during excused period.',
            excused_until=excused_until,
        )

    session = (
        batch_models.BatchSession.objects
        .select_related('batch')
        .filter(batch_id=batch_id, date=date)
        .order_by('start_time', 'id')
        .first()
    )
    if session is None:
        raise NotFound('No session found for the given date.')

    if actor is None and request is not None:
        actor = request.user
    marked_by = actor if actor is not None and getattr(actor, 'is_authenticated', False) else None

    attendance_model = person_type.attendance_model
    field = person_type.person_field
    previous = (
        attendance_model.objects
        .filter(batch_session=session, **{field: person})
        .values_list('status', flat=True)
        .first()
    )

    record, created = attendance_model.objects.update_or_create(
        batch_session=session,
        **{field: person},
        defaults={
            'status': status,
            'notes': notes,
            'marked_at': clock.now(),
            'marked_by': marked_by,
        },
    )
    logger.info('%s attendance %s: %s %s on %s -> %s',
                person_type.value, 'created' if created else 'updated', person.pk, session.batch_id, date, status)

    activity_log.log_attendance_action(
        'Attendance Marked',
        person,
        f'Attendance for {person.name} on {date.isoformat()} for batch "{session.batch.name}" marked as {status}.',
        {'status': previous} if previous is not None else None,
        {'status': record.status},
        request=request,
        actor=actor,
    )
    return format_record(person_type, session, session.batch, person, record, editable=True)


def attendance_by_date(batch_id: int, date: datetime.date, person_type, clock=None) -> List[dict]:
    """Stored rows for the batch's session on `date`; nothing is materialized."""
    clock = clock or system_clock
    person_type = PersonType(person_type)
    field = person_type.person_field

    session = (
        batch_models.BatchSession.objects
        .select_related('batch')
        .filter(batch_id=batch_id, date=date)
        .order_by('start_time', 'id')
        .first()
    )
    if session is None:
        raise NotFound('No session found for this batch on the specified date.', data=[])

    editable = session.date <= clock.today()
    rows = (
        person_type.attendance_model.objects
        .filter(batch_session=session)
        .select_related(field)
        .order_by('id')
    )
    return [
        format_record(person_type, session, session.batch, getattr(row, field), row, editable=editable)
        for row in rows
    ]


def recent_partner_attendance(partner, clock=None, limit: int = RECENT_LIMIT) -> Tuple[str, List[dict]]:
    """Latest attendance of one partner for sessions dated today or earlier.

    Returns the response message with the records. Newest session date
    first; rows on the same date by `marked_at`, newest first. Inactive
    partners have no recent attendance.
    """
    if not partner.is_active:
        return PARTNER_INACTIVE, []
    clock = clock or system_clock
    rows = (
        PersonType.PARTNER.attendance_model.objects
        .filter(partner=partner, batch_session__date__lte=clock.today())
        .select_related('batch_session__batch')
        .order_by('-batch_session__date', F('marked_at').desc(nulls_last=True), '-id')[:limit]
    )
    return RECENT_RETRIEVED, [
        {
            'id': row.id,
            'status': row.status or str(AttendanceStatus.NOT_MARKED),
            'marked_at': _iso(row.marked_at),
            'notes': row.notes,
            'batch_session': session_payload(row.batch_session, row.batch_session.batch),
        }
        for row in rows
    ]
