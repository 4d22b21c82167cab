from rest_framework import serializers

from .domain import DurationClass
from .errors import InvalidDurationClass
from .services.slot_utils import parse_local_date


class PackageField(serializers.CharField):
    """Package code -> DurationClass (enum value or legacy package code)."""

    def to_internal_value(self, data):
        raw = super().to_internal_value(data)
        try:
            return DurationClass.parse(raw)
        except InvalidDurationClass as e:
            raise serializers.ValidationError(str(e))

    def to_representation(self, value):
        return DurationClass.parse(value).value


class AvailabilityQuerySerializer(serializers.Serializer):
    date = serializers.CharField()
    package = PackageField()

    def validate_date(self, value):
        try:
            return parse_local_date(value)
        except ValueError as e:
            raise serializers.ValidationError(str(e))


class CommitBookingSerializer(serializers.Serializer):
    start = serializers.DateTimeField()
    package = PackageField()
    idempotency_key = serializers.CharField(max_length=255, trim_whitespace=True)
    metadata = serializers.DictField(child=serializers.CharField(allow_blank=True), required=False)


class CommitmentSerializer(serializers.Serializer):
    id = serializers.CharField()
    start = serializers.DateTimeField()
    end = serializers.DateTimeField()
    status = serializers.SerializerMethodField()
    idempotency_key = serializers.CharField(allow_null=True)

    def get_status(self, obj):
        return obj.status.value


def candidate_to_dict(candidate) -> dict:
    return {
        "start": candidate.start.isoformat(),
        "admissible": candidate.admissible,
        "reason": candidate.reason.value if candidate.reason else None,
    }
