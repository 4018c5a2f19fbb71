"""Batch lifecycle: create, update with schedule regeneration, delete."""
import logging
from typing import Iterable, Optional

from django.db import transaction
from django.db.models import Prefetch

from activity.services import activity_log
from batches import models as batch_models
from batches.services import session_generator
from people import models as people_models

logger = logging.getLogger(__name__)

# Bookkeeping columns never reported in an update diff.
_DIFF_IGNORED = ('created_at', 'updated_at')


def batch_snapshot(batch: batch_models.Batch) -> dict:
    data = activity_log.snapshot(batch)
    data['partner_ids'] = sorted(batch.partners.values_list('id', flat=True))
    data['member_ids'] = sorted(batch.members.values_list('id', flat=True))
    return data


def _names(people) -> str:
    return ', '.join(p.name for p in people) or 'N/A'


def _display(value) -> str:
    if value is None:
        return ''
    return str(value)


@transaction.atomic
def create_batch(data: dict, partners: Optional[Iterable] = None, members: Optional[Iterable] = None,
                 request=None) -> batch_models.Batch:
    batch = batch_models.Batch.objects.create(**data)
    if partners is not None:
        batch.partners.set(partners)
    if members is not None:
        batch.members.set(members)

    session_generator.generate_sessions(batch)

    activity_log.log_batch_action(
        'Batch Created',
        batch,
        f'Batch "{batch.name}" was created',
        None,
        batch_snapshot(batch),
        request=request,
    )
    return batch


@transaction.atomic
def update_batch(batch: batch_models.Batch, changes: dict, partners: Optional[Iterable] = None,
                 members: Optional[Iterable] = None, request=None) -> batch_models.Batch:
    """Apply `changes` and regenerate sessions if a schedule field changed.

    Only keys present in `changes` are considered for regeneration, so a
    partial update that leaves the schedule alone keeps existing sessions
    (and their attendance).
    """
    original = activity_log.snapshot(batch)
    original_partners = list(batch.partners.all())
    original_members = list(batch.members.all())

    regenerate = session_generator.should_regenerate(batch, changes)

    for field, value in changes.items():
        setattr(batch, field, value)
    batch.save()

    if regenerate:
        session_generator.regenerate_sessions(batch)

    if partners is not None:
        batch.partners.set(partners)
    if members is not None:
        batch.members.set(members)

    current = activity_log.snapshot(batch)
    old_values, new_values, parts = {}, {}, []
    for key, new in current.items():
        if key in _DIFF_IGNORED:
            continue
        old = original.get(key)
        if old == new:
            continue
        old_values[key] = old
        new_values[key] = new
        parts.append(f'{key} changed from "{_display(old)}" to "{_display(new)}"')

    for label, key, relation, before, supplied in (
        ('Partners', 'partner_ids', batch.partners, original_partners, partners),
        ('Members', 'member_ids', batch.members, original_members, members),
    ):
        if supplied is None:
            continue
        after = list(relation.all())
        before_ids = sorted(p.pk for p in before)
        after_ids = sorted(p.pk for p in after)
        if before_ids != after_ids:
            parts.append(f'{label} changed from [{_names(before)}] to [{_names(after)}]')
            old_values[key] = before_ids
            new_values[key] = after_ids

    if old_values or regenerate:
        details = f'Batch "{batch.name}" was updated'
        if parts:
            details += ': ' + ', '.join(parts)
        if regenerate:
            details += '. Sessions were regenerated due to schedule changes.'
        activity_log.log_batch_action('Batch Updated', batch, details, old_values, new_values, request=request)

    return batch


@transaction.atomic
def delete_batch(batch: batch_models.Batch, request=None) -> None:
    """Delete a batch together with its sessions and their attendance."""
    activity_log.log_batch_action(
        'Batch Deleted',
        batch,
        f'Batch "{batch.name}" was deleted',
        batch_snapshot(batch),
        None,
        request=request,
    )
    batch.delete()


def batches_with_people():
    """Active batches with their active members and partners, by name."""
    active = people_models.PersonStatus.ACTIVE
    return (
        batch_models.Batch.objects
        .filter(status=batch_models.Batch.Status.ACTIVE)
        .prefetch_related(
            Prefetch('members', queryset=people_models.Member.objects.filter(status=active).order_by('name')),
            Prefetch('partners', queryset=people_models.Partner.objects.filter(status=active).order_by('name')),
        )
        .order_by('name')
    )
