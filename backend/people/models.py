from django.db import models


class PersonStatus(models.TextChoices):
    ACTIVE = 'active', 'Active'
    INACTIVE = 'inactive', 'Inactive'
    PENDING = 'pending', 'Pending'
    BLACKLISTED = 'blacklisted', 'Blacklisted'


class Person(models.Model):
    """Fields shared by everyone who can be marked in attendance.

    While `excused_until` is on or after a session date the only status
    that may be recorded for that date is "excused".
    """
    name = models.CharField(max_length=255)
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=32, blank=True)
    status = models.CharField(max_length=16, choices=PersonStatus.choices, default=PersonStatus.ACTIVE)
    excused_until = models.DateField(null=True, blank=True)
    excuse_reason = models.CharField(max_length=255, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ('name',)

    def __str__(self):
        return self.name

    @property
    def is_active(self) -> bool:
        return self.status == PersonStatus.ACTIVE

    def is_excused_on(self, day) -> bool:
        return self.excused_until is not None and self.excused_until >= day


class Member(Person):
    class Meta(Person.Meta):
        verbose_name = 'Member'
        verbose_name_plural = 'Members'


class Partner(Person):
    """An instructor running one or more batches."""
    specialization = models.CharField(max_length=255, blank=True)

    class Meta(Person.Meta):
        verbose_name = 'Partner'
        verbose_name_plural = 'Partners'
