from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from activity.models import ActionLog
from activity.serializers import ActionLogSerializer

MAX_RESULTS = 100


class ActionLogListView(APIView):
    permission_classes = (IsAuthenticated,)

    def get(self, request, *args, **kwargs):
        qs = ActionLog.objects.select_related('performed_by')
        category = request.query_params.get('category')
        if category and category != 'all':
            qs = qs.filter(category=category)
        entity_type = request.query_params.get('entity_type')
        if entity_type:
            qs = qs.filter(entity_type=entity_type)
        entity_id = request.query_params.get('entity_id')
        if entity_id and entity_id.isdigit():
            qs = qs.filter(entity_id=int(entity_id))
        serializer = ActionLogSerializer(qs.order_by('-created_at', '-id')[:MAX_RESULTS], many=True)
        return Response({'data': serializer.data})
