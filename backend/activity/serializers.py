from rest_framework import serializers

from activity.models import ActionLog


class ActionLogSerializer(serializers.ModelSerializer):
    performed_by_username = serializers.CharField(source='performed_by.username', read_only=True, default=None)

    class Meta:
        model = ActionLog
        fields = (
            'id', 'action', 'user', 'target', 'category', 'details', 'ip_address',
            'old_values', 'new_values', 'performed_by', 'performed_by_username',
            'entity_type', 'entity_id', 'created_at',
        )
        read_only_fields = fields
