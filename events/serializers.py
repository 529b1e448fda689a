# events/serializers.py
from rest_framework import serializers

from .models import Attendee, Event
from .sanitizers import sanitize_description, sanitize_string_list, sanitize_title


class EventSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Event
        fields = [
            'id', 'title', 'slug', 'event_type', 'color',
            'start_date', 'end_date', 'requirements',
        ]
        read_only_fields = fields


class AttendeeSummarySerializer(serializers.ModelSerializer):
    """Minimal public card used inside team and submission payloads."""

    class Meta:
        model = Attendee
        fields = ['id', 'name', 'avatar_url', 'skills', 'company']
        read_only_fields = fields


class AttendeeDirectorySerializer(serializers.ModelSerializer):
    """Public directory entry. Never exposes email, phone or credentials."""

    class Meta:
        model = Attendee
        fields = [
            'id', 'name', 'company', 'job_title', 'avatar_url', 'skills',
            'bio', 'social_links', 'looking_for_team', 'registered_at',
        ]
        read_only_fields = fields


class AttendeeSelfSerializer(serializers.ModelSerializer):
    """The attendee's own profile, as returned to them."""

    class Meta:
        model = Attendee
        fields = [
            'id', 'email', 'name', 'phone', 'company', 'job_title', 'avatar_url',
            'skills', 'bio', 'social_links', 'looking_for_team', 'status',
            'registered_at', 'last_login_at',
        ]
        read_only_fields = fields


class ProfileFieldsSerializer(serializers.Serializer):
    """Editable profile fields shared by registration and profile updates."""
    phone = serializers.CharField(max_length=40, required=False, allow_blank=True, allow_null=True)
    company = serializers.CharField(max_length=150, required=False, allow_blank=True, allow_null=True)
    job_title = serializers.CharField(max_length=150, required=False, allow_blank=True, allow_null=True)
    avatar_url = serializers.URLField(max_length=1024, required=False, allow_blank=True, allow_null=True)
    skills = serializers.ListField(
        child=serializers.CharField(max_length=100),
        required=False,
        max_length=50,
    )
    bio = serializers.CharField(max_length=5000, required=False, allow_blank=True, allow_null=True)
    social_links = serializers.DictField(
        child=serializers.CharField(max_length=1024, allow_blank=True),
        required=False,
    )

    def validate_skills(self, value):
        return sanitize_string_list(value)

    def validate_bio(self, value):
        return sanitize_description(value) if value else value

    def validate_company(self, value):
        return sanitize_title(value, max_length=150) if value else value

    def validate_job_title(self, value):
        return sanitize_title(value, max_length=150) if value else value


class RegisterSerializer(ProfileFieldsSerializer):
    email = serializers.EmailField(max_length=254)
    password = serializers.CharField(min_length=8, max_length=128, write_only=True, trim_whitespace=False)
    name = serializers.CharField(max_length=150)

    def validate_email(self, value):
        return value.strip().lower()

    def validate_name(self, value):
        name = sanitize_title(value, max_length=150)
        if not name:
            raise serializers.ValidationError("Name is required")
        return name


class LoginSerializer(serializers.Serializer):
    email = serializers.CharField(max_length=254)
    password = serializers.CharField(max_length=128, write_only=True, trim_whitespace=False)


class ProfileUpdateSerializer(ProfileFieldsSerializer):
    name = serializers.CharField(max_length=150, required=False)
    looking_for_team = serializers.BooleanField(required=False)

    def validate_name(self, value):
        name = sanitize_title(value, max_length=150)
        if not name:
            raise serializers.ValidationError("Name cannot be empty")
        return name
