"""
Core app serializers.
"""

from rest_framework import serializers


class HealthSerializer(serializers.Serializer):
    status = serializers.CharField(read_only=True, help_text='Always "ok".')
    message = serializers.CharField(read_only=True, help_text="Human-readable status.")
