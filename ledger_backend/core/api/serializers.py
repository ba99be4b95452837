# core/api/serializers.py

from rest_framework import serializers

from core.models import ActivityLog, Branch, Customer


class BranchSerializer(serializers.ModelSerializer):
    class Meta:
        model = Branch
        fields = "__all__"
        read_only_fields = ("id", "created_at")


class CustomerSerializer(serializers.ModelSerializer):
    class Meta:
        model = Customer
        fields = "__all__"
        read_only_fields = ("id", "created_at")


class ActivityLogSerializer(serializers.ModelSerializer):
    username = serializers.CharField(
        source="user.username", read_only=True, default=None
    )

    class Meta:
        model = ActivityLog
        fields = (
            "id",
            "user",
            "username",
            "action",
            "module",
            "entity_ref",
            "details",
            "created_at",
        )
        read_only_fields = fields
