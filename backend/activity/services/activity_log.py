"""Audit trail writer.

Entries are queued with `transaction.on_commit` so a rolled back mutation
leaves no trace. A failing insert is logged and dropped; it never turns a
successful request into an error.
"""
import json
import logging
from typing import Optional

from django.core.serializers.json import DjangoJSONEncoder
from django.db import transaction

from activity import models as activity_models

logger = logging.getLogger(__name__)

Category = activity_models.ActionLog.Category


def to_json_safe(value):
    if value is None:
        return None
    return json.loads(json.dumps(value, cls=DjangoJSONEncoder))


def snapshot(instance, fields=None) -> dict:
    """Plain dict of an instance's concrete field values (FKs as ids)."""
    data = {}
    for field in instance._meta.concrete_fields:
        if fields is not None and field.name not in fields:
            continue
        data[field.attname if field.is_relation else field.name] = field.value_from_object(instance)
    return to_json_safe(data)


def client_ip(request) -> Optional[str]:
    if request is None:
        return None
    forwarded = (request.META.get('HTTP_X_FORWARDED_FOR') or '').split(',')[0].strip()
    if forwarded:
        return forwarded
    return request.META.get('REMOTE_ADDR')


def actor_name(user) -> str:
    if user is None or not getattr(user, 'is_authenticated', False):
        return 'System'
    return user.get_full_name().strip() or user.get_username()


def _write(entry: dict):
    try:
        activity_models.ActionLog.objects.create(**entry)
    except Exception:
        logger.exception('Could not write activity log entry "%s" for %s', entry.get('action'), entry.get('target'))


def log_activity(action: str, target: str, category: str, details: str,
                 old_values=None, new_values=None, entity=None, actor=None, request=None):
    if request is not None and actor is None:
        actor = getattr(request, 'user', None)
    performed_by = actor if actor is not None and getattr(actor, 'is_authenticated', False) else None

    entry = {
        'action': action,
        'user': actor_name(actor),
        'target': (target or '')[:255],
        'category': category,
        'details': details,
        'ip_address': client_ip(request),
        'old_values': to_json_safe(old_values),
        'new_values': to_json_safe(new_values),
        'performed_by': performed_by,
        'entity_type': entity._meta.label if entity is not None else None,
        'entity_id': entity.pk if entity is not None else None,
    }
    transaction.on_commit(lambda: _write(entry))


def log_batch_action(action, batch, details, old_values=None, new_values=None, request=None, actor=None):
    log_activity(action, batch.name, Category.BATCH, details, old_values, new_values,
                 entity=batch, actor=actor, request=request)


def log_session_action(action, session, details, old_values=None, new_values=None, request=None, actor=None):
    log_activity(action, f'Session #{session.pk}', Category.BATCH_SESSION, details, old_values, new_values,
                 entity=session, actor=actor, request=request)


def log_attendance_action(action, person, details, old_values=None, new_values=None, request=None, actor=None):
    # person is a Member or a Partner
    log_activity(action, person.name, Category.ATTENDANCE, details, old_values, new_values,
                 entity=person, actor=actor, request=request)
