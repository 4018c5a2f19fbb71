import datetime

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from activity.models import ActionLog
from attendance.models import MemberAttendance, PartnerAttendance
from batches import models as batch_models
from people import models as people_models


class AttendanceApiTests(TestCase):
    def setUp(self):
        self.today = timezone.localdate()
        self.user = get_user_model().objects.create_user(username='coach', password='pw')
        self.client = APIClient()
        self.client.force_authenticate(self.user)

        self.batch = batch_models.Batch.objects.create(name='Swim Basics')
        self.past = self.session(-1)
        self.current = self.session(0)
        self.future = self.session(3)
        self.member = people_models.Member.objects.create(name='Asha', email='asha@example.com')
        self.partner = people_models.Partner.objects.create(name='Ravi', email='ravi@example.com')
        self.batch.members.add(self.member)
        self.batch.partners.add(self.partner)

    def session(self, offset):
        return batch_models.BatchSession.objects.create(
            batch=self.batch, date=self.today + datetime.timedelta(days=offset),
            start_time=datetime.time(7, 0), end_time=datetime.time(8, 0),
        )

    def test_batch_attendance(self):
        resp = self.client.get(f'/api/attendance/batches/{self.batch.id}/', {'type': 'member'})
        self.assertEqual(resp.status_code, 200, resp.data)
        self.assertEqual(resp.data['current_date'], self.today.isoformat())
        self.assertEqual(len(resp.data['data']), 3)
        self.assertEqual([r['is_editable'] for r in resp.data['data']], [True, True, False])
        self.assertEqual(MemberAttendance.objects.count(), 2)

    def test_batch_attendance_requires_valid_type(self):
        resp = self.client.get(f'/api/attendance/batches/{self.batch.id}/', {'type': 'coach'})
        self.assertEqual(resp.status_code, 422)
        self.assertIn('type', resp.data['errors'])

    def test_batch_attendance_not_found_cases(self):
        resp = self.client.get('/api/attendance/batches/9999/', {'type': 'member'})
        self.assertEqual(resp.status_code, 404)

        self.batch.members.clear()
        resp = self.client.get(f'/api/attendance/batches/{self.batch.id}/', {'type': 'member'})
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.data['message'], 'No active members found for this batch.')
        self.assertEqual(resp.data['data'], [])

    def test_mark_attendance(self):
        with self.captureOnCommitCallbacks(execute=True):
            resp = self.client.post('/api/attendance/mark/', {
                'type': 'partner',
                'person_id': self.partner.id,
                'batch_id': self.batch.id,
                'date': self.today.isoformat(),
                'status': 'present',
            }, format='json')
        self.assertEqual(resp.status_code, 200, resp.data)
        self.assertEqual(resp.data['message'], 'Attendance marked successfully')
        self.assertEqual(resp.data['data']['partner']['id'], self.partner.id)
        row = PartnerAttendance.objects.get()
        self.assertEqual(row.marked_by, self.user)
        log = ActionLog.objects.get(action='Attendance Marked')
        self.assertEqual(log.category, 'attendance_management')
        self.assertEqual(log.performed_by, self.user)
        self.assertEqual(log.entity_id, self.partner.id)

    def test_mark_future_date(self):
        resp = self.client.post('/api/attendance/mark/', {
            'type': 'member',
            'person_id': self.member.id,
            'batch_id': self.batch.id,
            'date': self.future.date.isoformat(),
            'status': 'present',
        }, format='json')
        self.assertEqual(resp.status_code, 422)
        self.assertEqual(resp.data['message'], 'Cannot mark attendance for future dates')
        self.assertEqual(resp.data['error'], 'Future date restriction')

    def test_mark_excused_member(self):
        self.member.excused_until = self.today + datetime.timedelta(days=5)
        self.member.save()
        resp = self.client.post('/api/attendance/mark/', {
            'type': 'member',
            'person_id': self.member.id,
            'batch_id': self.batch.id,
            'date': self.past.date.isoformat(),
            'status': 'absent',
        }, format='json')
        self.assertEqual(resp.status_code, 422)
        self.assertEqual(resp.data['excused_until'], self.member.excused_until.isoformat())
        self.assertFalse(MemberAttendance.objects.exists())

    def test_mark_validation(self):
        resp = self.client.post('/api/attendance/mark/', {
            'type': 'member',
            'person_id': self.member.id,
            'batch_id': self.batch.id,
            'date': '05/06/2025',
            'status': 'late',
            'notes': 'x' * 501,
        }, format='json')
        self.assertEqual(resp.status_code, 422)
        self.assertEqual(set(resp.data['errors']), {'date', 'status', 'notes'})

    def test_mark_unknown_person(self):
        resp = self.client.post('/api/attendance/mark/', {
            'type': 'member',
            'person_id': 9999,
            'batch_id': self.batch.id,
            'date': self.today.isoformat(),
            'status': 'present',
        }, format='json')
        self.assertEqual(resp.status_code, 404)

    def test_by_date(self):
        MemberAttendance.objects.create(batch_session=self.past, member=self.member, status='absent')
        resp = self.client.get('/api/attendance/by-date/', {
            'batch_id': self.batch.id, 'date': self.past.date.isoformat(), 'type': 'member',
        })
        self.assertEqual(resp.status_code, 200, resp.data)
        self.assertEqual([r['status'] for r in resp.data['data']], ['absent'])

        resp = self.client.get('/api/attendance/by-date/', {
            'batch_id': self.batch.id, 'date': (self.today - datetime.timedelta(days=30)).isoformat(), 'type': 'member',
        })
        self.assertEqual(resp.status_code, 404)

    def test_partner_recent(self):
        PartnerAttendance.objects.create(batch_session=self.past, partner=self.partner, status='present')
        resp = self.client.get(f'/api/attendance/partners/{self.partner.id}/recent/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(len(resp.data['data']), 1)
        self.assertEqual(resp.data['data'][0]['batch_session']['date'], self.past.date.isoformat())

        self.partner.status = people_models.PersonStatus.INACTIVE
        self.partner.save()
        resp = self.client.get(f'/api/attendance/partners/{self.partner.id}/recent/')
        self.assertEqual(resp.data, {'message': 'Partner is not active', 'data': []})

        resp = self.client.get('/api/attendance/partners/9999/recent/')
        self.assertEqual(resp.status_code, 404)

    def test_attendance_batches(self):
        resp = self.client.get('/api/attendance/batches/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['data'][0]['members'][0]['email'], 'asha@example.com')
