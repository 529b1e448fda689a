from rest_framework import status
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response

from events.services import submissions as submission_service
from events.services import uploads
from events.submission_serializers import (
    SubmissionDetailSerializer,
    SubmissionSerializer,
    SubmissionUploadSerializer,
    SubmissionWriteSerializer,
)
from events.throttles import SubmissionUploadThrottle
from .generics import PortalAPIView


class SubmissionListCreateView(PortalAPIView):
    """
    GET  /api/events/public/<slug>/submissions/   public + caller's own
    POST /api/events/public/<slug>/submissions/   start a draft
    """

    def get(self, request, slug):
        event = self.get_accessible_event()
        viewer = self.optional_attendee(event)

        submissions = submission_service.list_submissions(event, viewer)
        return Response({"submissions": SubmissionSerializer(submissions, many=True).data})

    def post(self, request, slug):
        attendee = self.require_attendee()

        serializer = SubmissionWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        submission = submission_service.create_submission(attendee.event, attendee, serializer.validated_data)

        return Response(
            {"submission": SubmissionDetailSerializer(submission).data},
            status=status.HTTP_201_CREATED,
        )


class SubmissionDetailView(PortalAPIView):
    """
    GET    /api/events/public/<slug>/submissions/<submission_id>/
    PATCH  /api/events/public/<slug>/submissions/<submission_id>/   edit draft, or {"action": "submit"}
    DELETE /api/events/public/<slug>/submissions/<submission_id>/   drafts only
    """

    def get(self, request, slug, submission_id):
        event = self.get_accessible_event()
        viewer = self.optional_attendee(event)

        submission = submission_service.get_submission(event, submission_id, viewer)
        return Response({"submission": SubmissionDetailSerializer(submission).data})

    def patch(self, request, slug, submission_id):
        attendee = self.require_attendee()
        action = self.get_action()

        serializer = SubmissionWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        submission = submission_service.update_submission(
            attendee.event,
            attendee,
            submission_id,
            serializer.validated_data,
            action=action,
        )

        submission = submission_service.get_submission(attendee.event, submission.pk, attendee)
        payload = {"submission": SubmissionDetailSerializer(submission).data}
        if action == submission_service.ACTION_SUBMIT:
            payload["message"] = "Submission successful!"
        return Response(payload)

    def delete(self, request, slug, submission_id):
        attendee = self.require_attendee()
        submission_service.delete_submission(attendee.event, attendee, submission_id)
        return Response({"success": True})


class SubmissionUploadView(PortalAPIView):
    """
    POST /api/events/public/<slug>/submissions/upload/   multipart "file"
    Optional "submission_id" attaches the file to that draft immediately.
    """
    parser_classes = [MultiPartParser, FormParser]
    throttle_classes = [SubmissionUploadThrottle]
    throttle_scope = "submission-upload"

    def post(self, request, slug):
        attendee = self.require_attendee()

        serializer = SubmissionUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = uploads.upload_attachment(
            attendee.event,
            attendee,
            request.FILES.get("file"),
            submission_id=serializer.validated_data.get("submission_id"),
        )
        return Response(result, status=status.HTTP_201_CREATED)
