from django.urls import path

from batches.views import SessionCreateView, SessionDetailView, SessionRescheduleView

urlpatterns = [
    path('', SessionCreateView.as_view(), name='session-create'),
    path('<int:session_id>/', SessionDetailView.as_view(), name='session-detail'),
    path('<int:session_id>/reschedule/', SessionRescheduleView.as_view(), name='session-reschedule'),
]
