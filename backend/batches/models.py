from django.db import models

from people.models import Member, Partner


class Batch(models.Model):
    """A course offering and the schedule its sessions are generated from.

    `schedule_pattern` is one of MWF, TTS, WEEKEND, DAILY, a weekday name
    such as "Monday", or "manual". In manual mode the sessions are exactly
    `selected_session_dates` (ISO date strings).
    """

    class Type(models.TextChoices):
        FIXED = 'fixed', 'Fixed'
        RECURRING = 'recurring', 'Recurring'

    class Status(models.TextChoices):
        ACTIVE = 'active', 'Active'
        INACTIVE = 'inactive', 'Inactive'
        COMPLETED = 'completed', 'Completed'
        CANCELLED = 'cancelled', 'Cancelled'

    MANUAL_PATTERN = 'manual'

    name = models.CharField(max_length=255)
    type = models.CharField(max_length=16, choices=Type.choices, default=Type.FIXED)
    description = models.TextField(blank=True, null=True)
    capacity = models.PositiveIntegerField(null=True, blank=True)
    start_date = models.DateField(null=True, blank=True)
    end_date = models.DateField(null=True, blank=True)
    session_start_time = models.TimeField(null=True, blank=True)
    session_end_time = models.TimeField(null=True, blank=True)
    no_of_sessions = models.PositiveIntegerField(null=True, blank=True)
    schedule_pattern = models.CharField(max_length=32, null=True, blank=True)
    selected_session_dates = models.JSONField(default=list, blank=True)
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.ACTIVE)
    members = models.ManyToManyField(Member, related_name='batches', blank=True)
    partners = models.ManyToManyField(Partner, related_name='batches', blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ('-created_at',)
        verbose_name = 'Batch'
        verbose_name_plural = 'Batches'

    def __str__(self):
        return self.name


class BatchSession(models.Model):
    class Status(models.TextChoices):
        SCHEDULED = 'scheduled', 'Scheduled'
        COMPLETED = 'completed', 'Completed'
        CANCELLED = 'cancelled', 'Cancelled'
        RESCHEDULED = 'rescheduled', 'Rescheduled'

    batch = models.ForeignKey(Batch, on_delete=models.CASCADE, related_name='sessions')
    date = models.DateField()
    start_time = models.TimeField()
    end_time = models.TimeField()
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.SCHEDULED)
    notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ('date', 'start_time', 'id')
        indexes = [models.Index(fields=['batch', 'date'], name='batch_session_date_idx')]
        verbose_name = 'Batch Session'
        verbose_name_plural = 'Batch Sessions'

    def __str__(self):
        return f'{self.batch_id} @ {self.date} {self.start_time}-{self.end_time}'
