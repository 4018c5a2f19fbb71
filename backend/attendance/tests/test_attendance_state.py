import datetime

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.test import TestCase

from activity.models import ActionLog
from attendance.models import MemberAttendance, PartnerAttendance, PersonType
from attendance.services import attendance_state
from batches import models as batch_models
from coaching.clock import FixedClock
from coaching.exceptions import Conflict, InvalidRequest, NotFound
from people import models as people_models

TODAY = datetime.date(2025, 6, 5)


class AttendanceStateTests(TestCase):
    def setUp(self):
        self.clock = FixedClock.on(TODAY)
        self.user = get_user_model().objects.create_user(username='coach', password='pw')
        self.batch = batch_models.Batch.objects.create(name='Junior Football')
        self.sessions = [
            batch_models.BatchSession.objects.create(
                batch=self.batch, date=TODAY + datetime.timedelta(days=offset),
                start_time=datetime.time(17, 0), end_time=datetime.time(18, 0),
            )
            for offset in (-2, 0, 2)
        ]
        self.asha = people_models.Member.objects.create(name='Asha', email='asha@example.com')
        self.kiran = people_models.Member.objects.create(name='Kiran', email='kiran@example.com')
        self.gone = people_models.Member.objects.create(name='Gone', status=people_models.PersonStatus.INACTIVE)
        self.batch.members.add(self.asha, self.kiran, self.gone)

    def test_bulk_read_materializes_past_and_current_only(self):
        records = attendance_state.get_all_attendance(self.batch.id, PersonType.MEMBER, clock=self.clock)
        # three sessions for two active members
        self.assertEqual(len(records), 6)
        self.assertEqual(MemberAttendance.objects.count(), 4)
        self.assertFalse(MemberAttendance.objects.filter(batch_session=self.sessions[2]).exists())

        future = [r for r in records if r['batch_session']['id'] == self.sessions[2].id]
        self.assertTrue(all(r['id'] is None and not r['is_editable'] for r in future))
        self.assertTrue(all(r['status'] == 'not marked' for r in future))

        past = [r for r in records if r['batch_session']['id'] != self.sessions[2].id]
        self.assertTrue(all(r['id'] is not None and r['is_editable'] for r in past))
        self.assertEqual(past[0]['member']['name'], 'Asha')
        self.assertEqual(past[0]['batch_session']['batch'], {'id': self.batch.id, 'name': 'Junior Football'})

    def test_bulk_read_is_additive_only(self):
        first = attendance_state.get_all_attendance(self.batch.id, 'member', clock=self.clock)
        second = attendance_state.get_all_attendance(self.batch.id, 'member', clock=self.clock)
        self.assertEqual(len(first), len(second))
        self.assertEqual(MemberAttendance.objects.count(), 4)
        self.assertEqual([r['id'] for r in first], [r['id'] for r in second])

    def test_bulk_read_keeps_marked_status(self):
        MemberAttendance.objects.create(batch_session=self.sessions[0], member=self.asha, status='present')
        records = attendance_state.get_all_attendance(self.batch.id, 'member', clock=self.clock)
        asha_first = next(
            r for r in records
            if r['batch_session']['id'] == self.sessions[0].id and r['member']['id'] == self.asha.id
        )
        self.assertEqual(asha_first['status'], 'present')
        self.assertEqual(asha_first['display_status'], 'present')

    def test_bulk_read_shows_current_excusal(self):
        self.asha.excused_until = datetime.date(2025, 6, 30)
        self.asha.excuse_reason = 'Travel'
        self.asha.save()
        records = attendance_state.get_all_attendance(self.batch.id, 'member', clock=self.clock)
        entry = next(r for r in records if r['member']['id'] == self.asha.id)
        self.assertEqual(entry['member']['excused_until'], '2025-06-30')
        self.assertEqual(entry['member']['excuse_reason'], 'Travel')
        self.assertEqual(entry['status'], 'not marked')

    def test_bulk_read_without_active_people(self):
        with self.assertRaises(NotFound) as ctx:
            attendance_state.get_all_attendance(self.batch.id, 'partner', clock=self.clock)
        self.assertEqual(ctx.exception.message, 'No active partners found for this batch.')

    def test_bulk_read_without_sessions(self):
        empty = batch_models.Batch.objects.create(name='Empty')
        empty.members.add(self.asha)
        with self.assertRaises(NotFound) as ctx:
            attendance_state.get_all_attendance(empty.id, 'member', clock=self.clock)
        self.assertEqual(ctx.exception.message, 'No sessions found for this batch.')

    def test_unknown_batch(self):
        with self.assertRaises(NotFound):
            attendance_state.get_all_attendance(9999, 'member', clock=self.clock)

    def test_mark_rejects_future_dates(self):
        with self.assertRaises(InvalidRequest) as ctx:
            attendance_state.mark_attendance(
                'member', self.asha.id, self.batch.id, self.sessions[2].date, 'present', clock=self.clock,
            )
        self.assertEqual(ctx.exception.message, 'Cannot mark attendance for future dates')

    def test_future_check_precedes_everything(self):
        with self.assertRaises(InvalidRequest):
            attendance_state.mark_attendance('member', 9999, 9999, TODAY + datetime.timedelta(days=1), 'present',
                                             clock=self.clock)

    def test_excusal_gate(self):
        self.asha.excused_until = datetime.date(2025, 6, 10)
        self.asha.save()
        with self.assertRaises(Conflict) as ctx:
            attendance_state.mark_attendance('member', self.asha.id, self.batch.id, TODAY, 'present', clock=self.clock)
        self.assertIn('Member is excused until 2025-06-10', ctx.exception.message)
        self.assertEqual(ctx.exception.extra['excused_until'], '2025-06-10')
        self.assertFalse(MemberAttendance.objects.exists())

        record = attendance_state.mark_attendance('member', self.asha.id, self.batch.id, TODAY, 'excused',
                                                  clock=self.clock)
        self.assertEqual(record['status'], 'excused')

    def test_lapsed_excusal_allows_any_status(self):
        self.asha.excused_until = datetime.date(2025, 6, 1)
        self.asha.save()
        record = attendance_state.mark_attendance('member', self.asha.id, self.batch.id, TODAY, 'present',
                                                  clock=self.clock)
        self.assertEqual(record['status'], 'present')

    def test_mark_without_session(self):
        with self.assertRaises(NotFound) as ctx:
            attendance_state.mark_attendance('member', self.asha.id, self.batch.id, TODAY - datetime.timedelta(days=1),
                                             'present', clock=self.clock)
        self.assertEqual(ctx.exception.message, 'No session found for the given date.')

    def test_mark_is_an_upsert(self):
        with self.captureOnCommitCallbacks(execute=True):
            attendance_state.mark_attendance('member', self.asha.id, self.batch.id, TODAY, 'present',
                                             actor=self.user, clock=self.clock)
            record = attendance_state.mark_attendance('member', self.asha.id, self.batch.id, TODAY, 'absent',
                                                      notes='Sick', actor=self.user, clock=self.clock)
        rows = MemberAttendance.objects.filter(member=self.asha, batch_session=self.sessions[1])
        self.assertEqual(rows.count(), 1)
        row = rows.get()
        self.assertEqual(row.status, 'absent')
        self.assertEqual(row.notes, 'Sick')
        self.assertEqual(row.marked_by, self.user)
        self.assertEqual(row.marked_at, self.clock.now())
        self.assertEqual(record['id'], row.id)
        self.assertTrue(record['is_editable'])

        logs = ActionLog.objects.filter(action='Attendance Marked').order_by('id')
        self.assertEqual(logs.count(), 2)
        self.assertIsNone(logs[0].old_values)
        self.assertEqual(logs[1].old_values, {'status': 'present'})
        self.assertEqual(logs[1].new_values, {'status': 'absent'})
        self.assertEqual(
            logs[1].details,
            'Attendance for Asha on 2025-06-05 for batch "Junior Football" marked as absent.',
        )

    def test_mark_updates_materialized_row(self):
        attendance_state.get_all_attendance(self.batch.id, 'member', clock=self.clock)
        attendance_state.mark_attendance('member', self.kiran.id, self.batch.id, TODAY, 'present', clock=self.clock)
        self.assertEqual(MemberAttendance.objects.count(), 4)
        self.assertEqual(
            MemberAttendance.objects.get(member=self.kiran, batch_session=self.sessions[1]).status, 'present',
        )

    def test_attendance_by_date(self):
        attendance_state.mark_attendance('member', self.asha.id, self.batch.id, TODAY, 'present', clock=self.clock)
        records = attendance_state.attendance_by_date(self.batch.id, TODAY, 'member', clock=self.clock)
        self.assertEqual(len(records), 1)
        self.assertEqual(records[0]['member']['id'], self.asha.id)
        with self.assertRaises(NotFound):
            attendance_state.attendance_by_date(self.batch.id, datetime.date(2025, 1, 1), 'member', clock=self.clock)

    def test_one_row_per_session_and_person(self):
        MemberAttendance.objects.create(batch_session=self.sessions[0], member=self.asha, status='present')
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                MemberAttendance.objects.create(batch_session=self.sessions[0], member=self.asha, status='absent')
        self.assertEqual(MemberAttendance.objects.get(member=self.asha).status, 'present')


class RecentPartnerAttendanceTests(TestCase):
    def setUp(self):
        self.clock = FixedClock.on(TODAY)
        self.partner = people_models.Partner.objects.create(name='Ravi')
        self.batch = batch_models.Batch.objects.create(name='Senior Football')

    def add(self, offset, marked_hour=None, start_hour=9):
        session = batch_models.BatchSession.objects.create(
            batch=self.batch, date=TODAY + datetime.timedelta(days=offset),
            start_time=datetime.time(start_hour, 0), end_time=datetime.time(start_hour + 1, 0),
        )
        marked_at = None
        if marked_hour is not None:
            marked_at = FixedClock.on(session.date, hour=marked_hour).now()
        return PartnerAttendance.objects.create(
            batch_session=session, partner=self.partner, status='present', marked_at=marked_at,
        )

    def test_orders_by_date_then_marked_at(self):
        older = self.add(-3, marked_hour=9)
        early = self.add(-1, marked_hour=8, start_hour=7)
        late = self.add(-1, marked_hour=20, start_hour=18)
        current = self.add(0, marked_hour=10)
        self.add(1, marked_hour=10)  # future, excluded
        _, records = attendance_state.recent_partner_attendance(self.partner, clock=self.clock)
        self.assertEqual([r['id'] for r in records], [current.id, late.id, early.id, older.id])

    def test_limits_to_ten(self):
        for offset in range(12):
            self.add(-offset, marked_hour=9)
        _, records = attendance_state.recent_partner_attendance(self.partner, clock=self.clock)
        self.assertEqual(len(records), 10)
        self.assertEqual(records[0]['batch_session']['date'], TODAY.isoformat())

    def test_inactive_partner_has_none(self):
        self.add(-1, marked_hour=9)
        self.partner.status = people_models.PersonStatus.INACTIVE
        self.partner.save()
        self.assertEqual(
            attendance_state.recent_partner_attendance(self.partner, clock=self.clock),
            ('Partner is not active', []),
        )
