"""
Serializers for the accounts API.

Input serializers only check shape; business rules (uniqueness, access
levels, field schemas) are enforced in accounts.commands.
"""

from rest_framework import serializers

from .models import Company, User, UserGroup


class CompanySerializer(serializers.ModelSerializer):
    class Meta:
        model = Company
        fields = (
            "id", "company_id", "name", "email", "phone", "logo",
            "address", "primary_color", "secondary_color", "website",
            "established", "company_type", "size", "country",
            "created_at", "updated_at",
        )
        read_only_fields = fields


class UserGroupSerializer(serializers.ModelSerializer):
    company = CompanySerializer(read_only=True)

    class Meta:
        model = UserGroup
        fields = ("id", "company", "name", "description", "access_level", "field_schema", "created_at")
        read_only_fields = fields


class UserGroupSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = UserGroup
        fields = ("id", "name", "access_level")


class UserSerializer(serializers.ModelSerializer):
    """Full user representation (group and company included, no secrets)."""
    user_group = UserGroupSerializer(read_only=True)

    class Meta:
        model = User
        fields = ("id", "username", "email", "verified", "extras", "profile_image", "user_group")
        read_only_fields = fields


class UserSummarySerializer(serializers.ModelSerializer):
    """Compact representation used when users are embedded in other resources."""

    class Meta:
        model = User
        fields = ("id", "username", "email", "profile_image")


# =============================================================================
# Input serializers
# =============================================================================

class CompanyRegistrationSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150)
    id = serializers.CharField(max_length=20)
    email = serializers.EmailField()
    phone = serializers.CharField(max_length=30)
    username = serializers.CharField(max_length=100)
    password = serializers.CharField(write_only=True)
    logo = serializers.FileField()

    address = serializers.CharField(required=False, allow_blank=True)
    colorCode = serializers.JSONField(required=False)
    website = serializers.URLField(required=False, allow_blank=True)
    established = serializers.CharField(required=False, allow_blank=True)
    type = serializers.CharField(required=False, allow_blank=True)
    size = serializers.CharField(required=False, allow_blank=True)
    country = serializers.CharField(required=False, allow_blank=True)

    def validate_id(self, value: str):
        value = value.strip()
        if not value.isalnum():
            raise serializers.ValidationError("Only letters and numbers are allowed.")
        return value.upper()

    def validate_username(self, value: str):
        value = value.strip()
        if not value or " " in value:
            raise serializers.ValidationError("Use one word without spaces.")
        return value


class UserGroupCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    access_level = serializers.ChoiceField(choices=UserGroup.AccessLevel.choices)
    field_schema = serializers.JSONField(required=False, default=list)


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField(write_only=True)


class OTPSerializer(serializers.Serializer):
    otp = serializers.CharField()


class UserUpdateSerializer(serializers.Serializer):
    email = serializers.EmailField(required=False)
    extras = serializers.JSONField(required=False)
    profileImage = serializers.FileField(required=False)


class UserRegistrationSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=100)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)
