"""Serializers for the projects API."""

from rest_framework import serializers

from accounts.serializers import UserSummarySerializer
from .models import Fabricator, Project


class FabricatorSerializer(serializers.ModelSerializer):
    class Meta:
        model = Fabricator
        fields = ("id", "name", "contact_email", "phone", "address", "created_at")
        read_only_fields = fields


class ProjectSerializer(serializers.ModelSerializer):
    team_leader = UserSummarySerializer(read_only=True)
    fabricator = FabricatorSerializer(read_only=True)

    class Meta:
        model = Project
        fields = (
            "id", "company", "name", "description", "team_leader", "fabricator",
            "start_date", "end_date", "created_at", "updated_at",
        )
        read_only_fields = fields


class ProjectCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    teamLeader = serializers.IntegerField(source="team_leader_id")
    fabricator = serializers.IntegerField(source="fabricator_id", required=False, allow_null=True)
    startDate = serializers.DateField(source="start_date", required=False, allow_null=True)
    endDate = serializers.DateField(source="end_date", required=False, allow_null=True)


class FabricatorCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150)
    contactEmail = serializers.EmailField(source="contact_email", required=False, allow_blank=True, default="")
    phone = serializers.CharField(required=False, allow_blank=True, default="")
    address = serializers.CharField(required=False, allow_blank=True, default="")
