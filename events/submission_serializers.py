# events/submission_serializers.py
from rest_framework import serializers

from .models import Submission, SubmissionFile
from .sanitizers import sanitize_description, sanitize_string_list, sanitize_title
from .serializers import AttendeeSummarySerializer
from .team_serializers import TeamMemberSerializer, active_members_of


class SubmissionFileSerializer(serializers.ModelSerializer):
    class Meta:
        model = SubmissionFile
        fields = ['id', 'file_name', 'file_url', 'file_size', 'file_type', 'uploaded_at']
        read_only_fields = fields


class SubmissionFileInputSerializer(serializers.Serializer):
    """Metadata of a file previously stored through the upload endpoint."""
    file_name = serializers.CharField(max_length=255)
    file_url = serializers.CharField(max_length=2048)
    file_size = serializers.IntegerField(min_value=0, required=False)
    file_type = serializers.CharField(max_length=150, required=False, allow_blank=True)


class SubmissionWriteSerializer(serializers.Serializer):
    """Fields an owner may set while the submission is a draft."""
    title = serializers.CharField(max_length=255, required=False, allow_blank=True)
    description = serializers.CharField(max_length=20000, required=False, allow_blank=True, allow_null=True)
    project_url = serializers.URLField(max_length=1024, required=False, allow_blank=True, allow_null=True)
    demo_url = serializers.URLField(max_length=1024, required=False, allow_blank=True, allow_null=True)
    video_url = serializers.URLField(max_length=1024, required=False, allow_blank=True, allow_null=True)
    repository_url = serializers.URLField(max_length=1024, required=False, allow_blank=True, allow_null=True)
    presentation_url = serializers.URLField(max_length=1024, required=False, allow_blank=True, allow_null=True)
    technologies = serializers.ListField(child=serializers.CharField(max_length=100), required=False)
    categories = serializers.ListField(child=serializers.CharField(max_length=100), required=False)
    screenshots = serializers.ListField(child=serializers.CharField(max_length=2048), required=False, max_length=20)
    files = SubmissionFileInputSerializer(many=True, required=False)

    def validate_title(self, value):
        return sanitize_title(value)

    def validate_description(self, value):
        return sanitize_description(value) if value else value

    def validate_technologies(self, value):
        return sanitize_string_list(value)

    def validate_categories(self, value):
        return sanitize_string_list(value)


class SubmissionTeamSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    description = serializers.CharField(allow_null=True)
    logo_url = serializers.CharField(allow_null=True)
    members = serializers.SerializerMethodField()

    def get_members(self, team):
        if not self.context.get("with_members"):
            return None
        return TeamMemberSerializer(active_members_of(team), many=True).data


class SubmissionSerializer(serializers.ModelSerializer):
    team = serializers.SerializerMethodField()
    attendee = AttendeeSummarySerializer(read_only=True)

    class Meta:
        model = Submission
        fields = [
            'id', 'title', 'description', 'project_url', 'demo_url', 'video_url',
            'repository_url', 'presentation_url', 'technologies', 'categories',
            'screenshots', 'status', 'submitted_at', 'created_at', 'updated_at',
            'team', 'attendee',
        ]
        read_only_fields = fields

    def get_team(self, submission):
        if submission.team is None:
            return None
        data = SubmissionTeamSerializer(submission.team, context=self.context).data
        if data.get("members") is None:
            data.pop("members", None)
        return data


class SubmissionDetailSerializer(SubmissionSerializer):
    files = SubmissionFileSerializer(many=True, read_only=True)

    class Meta(SubmissionSerializer.Meta):
        fields = SubmissionSerializer.Meta.fields + ['files']
        read_only_fields = fields

    def get_team(self, submission):
        if submission.team is None:
            return None
        return SubmissionTeamSerializer(submission.team, context={"with_members": True}).data


class SubmissionUploadSerializer(serializers.Serializer):
    """Non-file fields of the multipart upload; the file itself is read from request.FILES."""
    submission_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)
