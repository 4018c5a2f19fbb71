from django.urls import path

from activity.views import ActionLogListView

urlpatterns = [
    path('', ActionLogListView.as_view(), name='activity-log-list'),
]
