from django.conf import settings
from django.db import models

from batches.models import BatchSession
from people.models import Member, Partner


class AttendanceStatus(models.TextChoices):
    PRESENT = 'present', 'Present'
    ABSENT = 'absent', 'Absent'
    EXCUSED = 'excused', 'Excused'
    NOT_MARKED = 'not marked', 'Not marked'


class AttendanceRecord(models.Model):
    """One person's attendance at one session.

    Rows only exist for sessions dated today or earlier. Future sessions are
    reported as "not marked" without touching the table.
    """
    status = models.CharField(max_length=16, choices=AttendanceStatus.choices, default=AttendanceStatus.NOT_MARKED)
    notes = models.CharField(max_length=500, null=True, blank=True)
    marked_at = models.DateTimeField(null=True, blank=True)
    marked_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class MemberAttendance(AttendanceRecord):
    batch_session = models.ForeignKey(BatchSession, on_delete=models.CASCADE, related_name='member_attendance')
    member = models.ForeignKey(Member, on_delete=models.CASCADE, related_name='attendance')

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['batch_session', 'member'], name='uniq_member_attendance_per_session'),
        ]
        verbose_name = 'Member Attendance'
        verbose_name_plural = 'Member Attendance'

    def __str__(self):
        return f'{self.member_id}@{self.batch_session_id}: {self.status}'


class PartnerAttendance(AttendanceRecord):
    batch_session = models.ForeignKey(BatchSession, on_delete=models.CASCADE, related_name='partner_attendance')
    partner = models.ForeignKey(Partner, on_delete=models.CASCADE, related_name='attendance')

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['batch_session', 'partner'], name='uniq_partner_attendance_per_session'),
        ]
        verbose_name = 'Partner Attendance'
        verbose_name_plural = 'Partner Attendance'

    def __str__(self):
        return f'{self.partner_id}@{self.batch_session_id}: {self.status}'


class PersonType(models.TextChoices):
    """Which kind of person an attendance request is about.

    Each variant knows its person model, its attendance model and the name
    of the foreign key that joins them.
    """
    MEMBER = 'member', 'Member'
    PARTNER = 'partner', 'Partner'

    @property
    def person_model(self):
        return Member if self is PersonType.MEMBER else Partner

    @property
    def attendance_model(self):
        return MemberAttendance if self is PersonType.MEMBER else PartnerAttendance

    @property
    def person_field(self) -> str:
        return self.value
