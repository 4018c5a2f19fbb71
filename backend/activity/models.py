from django.conf import settings
from django.db import models


class ActionLog(models.Model):
    """Human-readable audit entry written after a mutation commits."""

    class Category(models.TextChoices):
        BATCH = 'batch_management', 'Batch management'
        BATCH_SESSION = 'batch_session_management', 'Batch session management'
        ATTENDANCE = 'attendance_management', 'Attendance management'

    action = models.CharField(max_length=128)
    user = models.CharField(max_length=255, default='System')
    target = models.CharField(max_length=255, blank=True)
    category = models.CharField(max_length=64, choices=Category.choices)
    details = models.TextField(blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    old_values = models.JSONField(null=True, blank=True)
    new_values = models.JSONField(null=True, blank=True)
    performed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='action_logs',
    )
    entity_type = models.CharField(max_length=128, null=True, blank=True)
    entity_id = models.BigIntegerField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ('-created_at', '-id')
        verbose_name = 'Action Log'
        verbose_name_plural = 'Action Logs'

    def __str__(self):
        return f'{self.action}: {self.target}'
