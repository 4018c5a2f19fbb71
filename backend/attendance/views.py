import logging

from django.shortcuts import get_object_or_404
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from attendance.serializers import (
    AttendanceByDateQuerySerializer,
    MarkAttendanceSerializer,
    PersonTypeQuerySerializer,
)
from attendance.services import attendance_state
from batches.serializers import BatchWithPeopleSerializer
from batches.services import batch_service
from coaching.clock import system_clock
from people.models import Partner

logger = logging.getLogger(__name__)


class AttendanceBatchesView(APIView):
    permission_classes = (IsAuthenticated,)

    def get(self, request, *args, **kwargs):
        serializer = BatchWithPeopleSerializer(batch_service.batches_with_people(), many=True)
        return Response({'message': 'Batches retrieved successfully', 'data': serializer.data})


class BatchAttendanceView(APIView):
    permission_classes = (IsAuthenticated,)
    clock = system_clock

    def get(self, request, batch_id: int, *args, **kwargs):
        query = PersonTypeQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        records = attendance_state.get_all_attendance(batch_id, query.validated_data['type'], clock=self.clock)
        return Response({
            'message': 'Attendance data retrieved successfully.',
            'data': records,
            'current_date': self.clock.today().isoformat(),
        })


class MarkAttendanceView(APIView):
    permission_classes = (IsAuthenticated,)
    clock = system_clock

    def post(self, request, *args, **kwargs):
        serializer = MarkAttendanceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        record = attendance_state.mark_attendance(
            data['type'],
            data['person_id'],
            data['batch_id'].id,
            data['date'],
            data['status'],
            notes=data.get('notes'),
            actor=request.user,
            request=request,
            clock=self.clock,
        )
        return Response({'message': 'Attendance marked successfully', 'data': record})


class AttendanceByDateView(APIView):
    permission_classes = (IsAuthenticated,)
    clock = system_clock

    def get(self, request, *args, **kwargs):
        query = AttendanceByDateQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        data = query.validated_data
        records = attendance_state.attendance_by_date(data['batch_id'].id, data['date'], data['type'], clock=self.clock)
        return Response({'message': 'Attendance retrieved successfully', 'data': records})


class PartnerRecentAttendanceView(APIView):
    permission_classes = (IsAuthenticated,)
    clock = system_clock

    def get(self, request, partner_id: int, *args, **kwargs):
        partner = get_object_or_404(Partner, pk=partner_id)
        message, records = attendance_state.recent_partner_attendance(partner, clock=self.clock)
        return Response({'message': message, 'data': records})
