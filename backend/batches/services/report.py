from django.db.models import Count, Q

from batches import models as batch_models
from coaching.clock import system_clock


def _rate(part: int, whole) -> float:
    if not whole:
        return 0.0
    return round(part / whole * 100, 2)


def batch_report(batch: batch_models.Batch, clock=None) -> dict:
    clock = clock or system_clock
    today = clock.today()

    sessions = batch.sessions.all()
    session_count = sessions.count()
    completed = sessions.filter(status=batch_models.BatchSession.Status.COMPLETED).count()
    upcoming = sessions.filter(date__gte=today, status=batch_models.BatchSession.Status.SCHEDULED).count()
    member_count = batch.members.count()

    return {
        'batch_id': batch.id,
        'batch_name': batch.name,
        'status': batch.status,
        'start_date': batch.start_date,
        'end_date': batch.end_date,
        'capacity': batch.capacity,
        'member_count': member_count,
        'occupancy_rate': _rate(member_count, batch.capacity),
        'session_count': session_count,
        'completed_sessions': completed,
        'completion_rate': _rate(completed, session_count),
        'upcoming_sessions': upcoming,
    }


def batches_summary() -> list:
    """Session completion of every batch, computed in a single query."""
    completed = batch_models.BatchSession.Status.COMPLETED
    batches = (
        batch_models.Batch.objects
        .annotate(
            session_count=Count('sessions'),
            completed_sessions=Count('sessions', filter=Q(sessions__status=completed)),
        )
        .order_by('name', 'id')
    )
    return [
        {
            'id': batch.id,
            'name': batch.name,
            'status': batch.status,
            'session_count': batch.session_count,
            'completed_sessions': batch.completed_sessions,
            'completion_rate': _rate(batch.completed_sessions, batch.session_count),
            'start_date': batch.start_date,
            'end_date': batch.end_date,
        }
        for batch in batches
    ]
