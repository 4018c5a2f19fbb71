from django.urls import path

from batches.views import (
    BatchDetailView,
    BatchListCreateView,
    BatchReportView,
    BatchSessionsView,
    BatchesSummaryView,
    BatchesWithPeopleView,
)

urlpatterns = [
    path('', BatchListCreateView.as_view(), name='batch-list'),
    path('summary/', BatchesSummaryView.as_view(), name='batch-summary'),
    path('with-people/', BatchesWithPeopleView.as_view(), name='batch-with-people'),
    path('<int:batch_id>/', BatchDetailView.as_view(), name='batch-detail'),
    path('<int:batch_id>/sessions/', BatchSessionsView.as_view(), name='batch-sessions'),
    path('<int:batch_id>/report/', BatchReportView.as_view(), name='batch-report'),
]
