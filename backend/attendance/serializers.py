from rest_framework import serializers

from attendance.models import AttendanceStatus, PersonType
from batches.models import Batch


class PersonTypeQuerySerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=PersonType.choices)


class MarkAttendanceSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=PersonType.choices)
    person_id = serializers.IntegerField()
    batch_id = serializers.PrimaryKeyRelatedField(queryset=Batch.objects.all())
    date = serializers.DateField(input_formats=['%Y-%m-%d'])
    status = serializers.ChoiceField(choices=AttendanceStatus.choices)
    notes = serializers.CharField(max_length=500, required=False, allow_blank=True, allow_null=True)


class AttendanceByDateQuerySerializer(serializers.Serializer):
    batch_id = serializers.PrimaryKeyRelatedField(queryset=Batch.objects.all())
    date = serializers.DateField(input_formats=['%Y-%m-%d'])
    type = serializers.ChoiceField(choices=PersonType.choices)
