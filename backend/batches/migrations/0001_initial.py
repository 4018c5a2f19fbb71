"""Initial Batch and BatchSession tables

Generated manually. Run `python manage.py migrate` to apply.
"""
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('people', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Batch',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('type', models.CharField(choices=[('fixed', 'Fixed'), ('recurring', 'Recurring')], default='fixed', max_length=16)),
                ('description', models.TextField(blank=True, null=True)),
                ('capacity', models.PositiveIntegerField(blank=True, null=True)),
                ('start_date', models.DateField(blank=True, null=True)),
                ('end_date', models.DateField(blank=True, null=True)),
                ('session_start_time', models.TimeField(blank=True, null=True)),
                ('session_end_time', models.TimeField(blank=True, null=True)),
                ('no_of_sessions', models.PositiveIntegerField(blank=True, null=True)),
                ('schedule_pattern', models.CharField(blank=True, max_length=32, null=True)),
                ('selected_session_dates', models.JSONField(blank=True, default=list)),
                ('status', models.CharField(choices=[('active', 'Active'), ('inactive', 'Inactive'), ('completed', 'Completed'), ('cancelled', 'Cancelled')], default='active', max_length=16)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('members', models.ManyToManyField(blank=True, related_name='batches', to='people.member')),
                ('partners', models.ManyToManyField(blank=True, related_name='batches', to='people.partner')),
            ],
            options={
                'verbose_name': 'Batch',
                'verbose_name_plural': 'Batches',
                'ordering': ('-created_at',),
            },
        ),
        migrations.CreateModel(
            name='BatchSession',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date', models.DateField()),
                ('start_time', models.TimeField()),
                ('end_time', models.TimeField()),
                ('status', models.CharField(choices=[('scheduled', 'Scheduled'), ('completed', 'Completed'), ('cancelled', 'Cancelled'), ('rescheduled', 'Rescheduled')], default='scheduled', max_length=16)),
                ('notes', models.TextField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('batch', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='sessions', to='batches.batch')),
            ],
            options={
                'verbose_name': 'Batch Session',
                'verbose_name_plural': 'Batch Sessions',
                'ordering': ('date', 'start_time', 'id'),
                'indexes': [models.Index(fields=['batch', 'date'], name='batch_session_date_idx')],
            },
        ),
    ]
