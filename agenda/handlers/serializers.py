"""Serializers for transforming domain models to API responses."""

from rest_framework import serializers


class EventSerializer(serializers.Serializer):
    """Serializer for Event domain model.

    Field names follow the public JSON document, not the Python attributes.
    """

    id = serializers.CharField(source="id.value")
    title = serializers.CharField()
    start = serializers.DateTimeField()
    end = serializers.DateTimeField(allow_null=True)
    location = serializers.CharField(allow_null=True)
    image = serializers.CharField(allow_null=True)
    url = serializers.CharField(allow_null=True)
    description = serializers.CharField(allow_null=True)
    tags = serializers.ListField(child=serializers.CharField())
    createdAt = serializers.DateTimeField(source="created_at")
    updatedAt = serializers.DateTimeField(source="updated_at", allow_null=True)
