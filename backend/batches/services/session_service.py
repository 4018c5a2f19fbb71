"""Single-session mutations, including reschedule with overlap detection."""
import datetime
import logging
from typing import Optional

from django.db import transaction

from activity.services import activity_log
from batches import models as batch_models
from coaching.exceptions import Conflict

logger = logging.getLogger(__name__)


def _window(session) -> str:
    return f'{session.date} ({_hms(session.start_time)} - {_hms(session.end_time)})'


def _hms(value) -> str:
    if isinstance(value, datetime.time):
        return value.strftime('%H:%M:%S')
    return str(value)


def find_conflict(session: batch_models.BatchSession, date: datetime.date, start_time: datetime.time,
                  end_time: datetime.time) -> Optional[batch_models.BatchSession]:
    """Another session of the same batch and day whose window overlaps.

    Windows are half-open, so one ending at 11:00 and another starting at
    11:00 do not overlap.
    """
    return (
        batch_models.BatchSession.objects
        .filter(batch_id=session.batch_id, date=date, start_time__lt=end_time, end_time__gt=start_time)
        .exclude(pk=session.pk)
        .order_by('id')
        .first()
    )


def session_number(session: batch_models.BatchSession) -> int:
    """1-based position of `session` within its batch, in creation order."""
    return batch_models.BatchSession.objects.filter(batch_id=session.batch_id, id__lte=session.id).count()


@transaction.atomic
def create_session(batch: batch_models.Batch, data: dict, request=None) -> batch_models.BatchSession:
    session = batch_models.BatchSession.objects.create(batch=batch, **data)
    activity_log.log_session_action(
        'Session Created',
        session,
        f'Session on {_window(session)} was created for batch "{batch.name}"',
        None,
        activity_log.snapshot(session),
        request=request,
    )
    return session


@transaction.atomic
def update_session(session: batch_models.BatchSession, changes: dict, request=None) -> batch_models.BatchSession:
    original = activity_log.snapshot(session)
    for field, value in changes.items():
        setattr(session, field, value)
    session.save()
    activity_log.log_session_action(
        'Session Updated',
        session,
        f'Session #{session.pk} of batch "{session.batch.name}" was updated',
        original,
        activity_log.snapshot(session),
        request=request,
    )
    return session


@transaction.atomic
def delete_session(session: batch_models.BatchSession, request=None) -> None:
    activity_log.log_session_action(
        'Session Deleted',
        session,
        f'Session on {_window(session)} of batch "{session.batch.name}" was deleted',
        activity_log.snapshot(session),
        None,
        request=request,
    )
    session.delete()


@transaction.atomic
def reschedule_session(session: batch_models.BatchSession, date: datetime.date, start_time: datetime.time,
                       end_time: datetime.time, notes: str, status: Optional[str] = None,
                       request=None) -> batch_models.BatchSession:
    conflicting = find_conflict(session, date, start_time, end_time)
    if conflicting is not None:
        number = session_number(conflicting)
        raise Conflict(
            'Time conflict detected',
            description=(
                f'This time conflicts with Session {number} '
                f'({_hms(conflicting.start_time)} - {_hms(conflicting.end_time)}) on the same day. '
                'Please choose a different time.'
            ),
            conflicting_session={
                'id': conflicting.id,
                'session_number': number,
                'start_time': _hms(conflicting.start_time),
                'end_time': _hms(conflicting.end_time),
            },
        )

    original = activity_log.snapshot(session)
    previous = _window(session)

    session.date = date
    session.start_time = start_time
    session.end_time = end_time
    session.notes = notes
    session.status = status or batch_models.BatchSession.Status.RESCHEDULED
    session.save()

    activity_log.log_session_action(
        'Session Rescheduled',
        session,
        f'Session #{session.pk} of batch "{session.batch.name}" was rescheduled. '
        f'Previous schedule: {previous} New schedule: {_window(session)}. Reason: {notes}',
        original,
        activity_log.snapshot(session),
        request=request,
    )
    return session
