from rest_framework import serializers

from modules.audit.models import ActivityLog


class ActivityLogSerializer(serializers.ModelSerializer):
    actor_username = serializers.CharField(
        source="actor.username", read_only=True, default=None
    )

    class Meta:
        model = ActivityLog
        fields = [
            "id",
            "actor_id",
            "actor_username",
            "actor_role",
            "action",
            "table_affected",
            "record_id",
            "description",
            "changes",
            "created_at",
        ]
        read_only_fields = fields
