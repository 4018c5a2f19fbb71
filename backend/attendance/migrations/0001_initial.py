"""Initial MemberAttendance and PartnerAttendance tables

One row per (session, person); the unique constraints make lazy
"not marked" materialization safe to run concurrently.

Generated manually. Run `python manage.py migrate` to apply.
"""
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


STATUS_CHOICES = [
    ('present', 'Present'),
    ('absent', 'Absent'),
    ('excused', 'Excused'),
    ('not marked', 'Not marked'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('batches', '0001_initial'),
        ('people', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='MemberAttendance',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('status', models.CharField(choices=STATUS_CHOICES, default='not marked', max_length=16)),
                ('notes', models.CharField(blank=True, max_length=500, null=True)),
                ('marked_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('marked_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('batch_session', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='member_attendance', to='batches.batchsession')),
                ('member', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='attendance', to='people.member')),
            ],
            options={
                'verbose_name': 'Member Attendance',
                'verbose_name_plural': 'Member Attendance',
            },
        ),
        migrations.CreateModel(
            name='PartnerAttendance',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('status', models.CharField(choices=STATUS_CHOICES, default='not marked', max_length=16)),
                ('notes', models.CharField(blank=True, max_length=500, null=True)),
                ('marked_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('marked_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('batch_session', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='partner_attendance', to='batches.batchsession')),
                ('partner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='attendance', to='people.partner')),
            ],
            options={
                'verbose_name': 'Partner Attendance',
                'verbose_name_plural': 'Partner Attendance',
            },
        ),
        migrations.AddConstraint(
            model_name='memberattendance',
            constraint=models.UniqueConstraint(fields=('batch_session', 'member'), name='uniq_member_attendance_per_session'),
        ),
        migrations.AddConstraint(
            model_name='partnerattendance',
            constraint=models.UniqueConstraint(fields=('batch_session', 'partner'), name='uniq_partner_attendance_per_session'),
        ),
    ]
