from django.urls import path

from attendance.views import (
    AttendanceBatchesView,
    AttendanceByDateView,
    BatchAttendanceView,
    MarkAttendanceView,
    PartnerRecentAttendanceView,
)

urlpatterns = [
    path('batches/', AttendanceBatchesView.as_view(), name='attendance-batches'),
    path('batches/<int:batch_id>/', BatchAttendanceView.as_view(), name='attendance-batch'),
    path('mark/', MarkAttendanceView.as_view(), name='attendance-mark'),
    path('by-date/', AttendanceByDateView.as_view(), name='attendance-by-date'),
    path('partners/<int:partner_id>/recent/', PartnerRecentAttendanceView.as_view(), name='attendance-partner-recent'),
]
