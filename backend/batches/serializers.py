from rest_framework import serializers

from batches.models import Batch, BatchSession
from people.models import Member, Partner

# Clients send either HH:MM or HH:MM:SS; both are stored as HH:MM:SS.
TIME_INPUT_FORMATS = ['%H:%M:%S', '%H:%M']


class ClockTimeField(serializers.TimeField):
    def __init__(self, **kwargs):
        kwargs.setdefault('input_formats', TIME_INPUT_FORMATS)
        kwargs.setdefault('format', '%H:%M:%S')
        super().__init__(**kwargs)


class PersonSummarySerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()


class PersonEligibilitySerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    email = serializers.CharField()
    status = serializers.CharField()
    excused_until = serializers.DateField(allow_null=True)
    excuse_reason = serializers.CharField(allow_null=True)


class BatchSessionSerializer(serializers.ModelSerializer):
    start_time = ClockTimeField()
    end_time = ClockTimeField()

    class Meta:
        model = BatchSession
        fields = ('id', 'batch', 'date', 'start_time', 'end_time', 'status', 'notes', 'created_at', 'updated_at')
        read_only_fields = ('batch', 'created_at', 'updated_at')


class BatchSerializer(serializers.ModelSerializer):
    session_start_time = ClockTimeField(allow_null=True)
    session_end_time = ClockTimeField(allow_null=True)
    partners = PersonSummarySerializer(many=True, read_only=True)
    member_count = serializers.SerializerMethodField()

    class Meta:
        model = Batch
        fields = (
            'id', 'name', 'type', 'description', 'capacity', 'start_date', 'end_date',
            'session_start_time', 'session_end_time', 'no_of_sessions', 'schedule_pattern',
            'selected_session_dates', 'status', 'partners', 'member_count', 'created_at', 'updated_at',
        )

    def get_member_count(self, obj):
        annotated = getattr(obj, 'member_count', None)
        if annotated is not None:
            return annotated
        return obj.members.count()


class BatchDetailSerializer(BatchSerializer):
    sessions = BatchSessionSerializer(many=True, read_only=True)

    class Meta(BatchSerializer.Meta):
        fields = BatchSerializer.Meta.fields + ('sessions',)


class BatchWithPeopleSerializer(serializers.ModelSerializer):
    members = PersonEligibilitySerializer(many=True, read_only=True)
    partners = PersonEligibilitySerializer(many=True, read_only=True)

    class Meta:
        model = Batch
        fields = ('id', 'name', 'start_date', 'end_date', 'status', 'members', 'partners')


class BatchWriteSerializer(serializers.ModelSerializer):
    """Input for batch create and (partial) update.

    Cross-field rules are checked against the stored batch when a partial
    update only sends one side of a pair.
    """
    session_start_time = ClockTimeField(required=False, allow_null=True)
    session_end_time = ClockTimeField(required=False, allow_null=True)
    selected_session_dates = serializers.ListField(
        child=serializers.DateField(), required=False, allow_null=True, allow_empty=True,
    )
    partner_ids = serializers.PrimaryKeyRelatedField(
        queryset=Partner.objects.all(), many=True, required=False, write_only=True,
    )
    member_ids = serializers.PrimaryKeyRelatedField(
        queryset=Member.objects.all(), many=True, required=False, write_only=True,
    )

    class Meta:
        model = Batch
        fields = (
            'name', 'type', 'description', 'capacity', 'start_date', 'end_date',
            'session_start_time', 'session_end_time', 'no_of_sessions', 'schedule_pattern',
            'selected_session_dates', 'status', 'partner_ids', 'member_ids',
        )

    def _current(self, attrs, field):
        if field in attrs:
            return attrs[field]
        if self.instance is not None:
            return getattr(self.instance, field)
        return None

    def validate(self, attrs):
        errors = {}
        start_date = self._current(attrs, 'start_date')
        end_date = self._current(attrs, 'end_date')
        if start_date and end_date and end_date < start_date:
            errors['end_date'] = ['The end date must be a date after or equal to start date.']

        start_time = self._current(attrs, 'session_start_time')
        end_time = self._current(attrs, 'session_end_time')
        if start_time and end_time and end_time <= start_time:
            errors['session_end_time'] = ['The session end time must be after session start time.']

        if 'selected_session_dates' in attrs:
            dates = attrs['selected_session_dates'] or []
            outside = [
                d.isoformat() for d in dates
                if (start_date and d < start_date) or (end_date and d > end_date)
            ]
            if outside:
                errors['selected_session_dates'] = [
                    'Each selected date must fall between start date and end date: ' + ', '.join(outside)
                ]
            attrs['selected_session_dates'] = [d.isoformat() for d in dates]

        if errors:
            raise serializers.ValidationError(errors)
        return attrs


class SessionWriteSerializer(serializers.ModelSerializer):
    batch_id = serializers.PrimaryKeyRelatedField(queryset=Batch.objects.all(), source='batch', required=False)
    start_time = ClockTimeField()
    end_time = ClockTimeField()
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    class Meta:
        model = BatchSession
        fields = ('batch_id', 'date', 'start_time', 'end_time', 'status', 'notes')

    def validate(self, attrs):
        if self.instance is None and 'batch' not in attrs:
            raise serializers.ValidationError({'batch_id': ['This field is required.']})
        start_time = attrs.get('start_time', getattr(self.instance, 'start_time', None))
        end_time = attrs.get('end_time', getattr(self.instance, 'end_time', None))
        if start_time and end_time and end_time <= start_time:
            raise serializers.ValidationError({'end_time': ['The end time must be after start time.']})
        return attrs


class RescheduleSerializer(serializers.Serializer):
    date = serializers.DateField()
    start_time = ClockTimeField()
    end_time = ClockTimeField()
    notes = serializers.CharField(allow_blank=False, trim_whitespace=True)
    status = serializers.ChoiceField(choices=BatchSession.Status.choices, required=False)

    def validate(self, attrs):
        if attrs['end_time'] <= attrs['start_time']:
            raise serializers.ValidationError({'end_time': ['The end time must be after start time.']})
        return attrs
