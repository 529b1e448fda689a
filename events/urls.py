# Mounted under api/events/public/<slug:slug>/ (see config/urls.py)
from django.urls import path
from .views import (
    AttendeeAuthView,
    AttendeeDirectoryView,
    TeamListCreateView,
    TeamDetailView,
    TeamJoinWithCodeView,
    SubmissionListCreateView,
    SubmissionDetailView,
    SubmissionUploadView,
)

urlpatterns = [
    path("auth/", AttendeeAuthView.as_view(), name="portal-auth"),
    path("attendees/", AttendeeDirectoryView.as_view(), name="portal-attendees"),

    path("teams/", TeamListCreateView.as_view(), name="portal-teams"),
    path("teams/join-with-code/", TeamJoinWithCodeView.as_view(), name="portal-team-join-code"),
    path("teams/<int:team_id>/", TeamDetailView.as_view(), name="portal-team-detail"),

    path("submissions/", SubmissionListCreateView.as_view(), name="portal-submissions"),
    path("submissions/upload/", SubmissionUploadView.as_view(), name="portal-submission-upload"),
    path(
        "submissions/<int:submission_id>/",
        SubmissionDetailView.as_view(),
        name="portal-submission-detail",
    ),
]
