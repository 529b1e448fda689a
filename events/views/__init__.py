from .auth import AttendeeAuthView
from .attendees import AttendeeDirectoryView
from .teams import TeamListCreateView, TeamDetailView, TeamJoinWithCodeView
from .submissions import SubmissionListCreateView, SubmissionDetailView, SubmissionUploadView
