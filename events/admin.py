from django.contrib import admin, messages

from . import submission_states
from .models import Attendee, Event, Submission, SubmissionFile, Team, TeamMembership


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ('title', 'slug', 'event_type', 'is_public', 'is_published', 'start_date')
    list_filter = ('event_type', 'is_public', 'is_published')
    search_fields = ('title', 'slug', 'description')
    prepopulated_fields = {'slug': ('title',)}
    date_hierarchy = 'start_date'


@admin.register(Attendee)
class AttendeeAdmin(admin.ModelAdmin):
    list_display = ('email', 'name', 'event', 'status', 'looking_for_team', 'registered_at')
    list_filter = ('status', 'looking_for_team', 'event')
    search_fields = ('email', 'name', 'company')
    exclude = ('password',)


class TeamMembershipInline(admin.TabularInline):
    model = TeamMembership
    extra = 0
    readonly_fields = ('joined_at', 'left_at')


@admin.register(Team)
class TeamAdmin(admin.ModelAdmin):
    list_display = ('name', 'event', 'join_type', 'max_members', 'looking_for_members', 'created_at')
    list_filter = ('join_type', 'event')
    search_fields = ('name', 'description')
    inlines = [TeamMembershipInline]


class SubmissionFileInline(admin.TabularInline):
    model = SubmissionFile
    extra = 0


@admin.register(Submission)
class SubmissionAdmin(admin.ModelAdmin):
    list_display = ('title', 'event', 'team', 'attendee', 'status', 'submitted_at')
    list_filter = ('status', 'event')
    search_fields = ('title', 'description', 'team__name', 'attendee__email')
    # Status moves only through the transition actions below
    readonly_fields = ('status', 'submitted_at')
    inlines = [SubmissionFileInline]
    actions = ['mark_accepted', 'mark_rejected', 'mark_winner']

    def _move(self, request, queryset, new_status):
        moved = 0
        for submission in queryset:
            ok, reason = submission_states.transition(
                submission, new_status, actor=request.user, by_operator=True,
            )
            if ok:
                submission.save(update_fields=['status', 'updated_at'])
                moved += 1
            else:
                self.message_user(request, f"{submission}: {reason}", level=messages.WARNING)
        if moved:
            self.message_user(request, f"{moved} submission(s) moved to '{new_status}'.")

    @admin.action(description="Accept selected submissions")
    def mark_accepted(self, request, queryset):
        self._move(request, queryset, Submission.STATUS_ACCEPTED)

    @admin.action(description="Reject selected submissions")
    def mark_rejected(self, request, queryset):
        self._move(request, queryset, Submission.STATUS_REJECTED)

    @admin.action(description="Mark selected submissions as winners")
    def mark_winner(self, request, queryset):
        self._move(request, queryset, Submission.STATUS_WINNER)


@admin.register(TeamMembership)
class TeamMembershipAdmin(admin.ModelAdmin):
    list_display = ('attendee', 'team', 'role', 'status', 'joined_at', 'left_at')
    list_filter = ('role', 'status')
    search_fields = ('attendee__email', 'team__name')


@admin.register(SubmissionFile)
class SubmissionFileAdmin(admin.ModelAdmin):
    list_display = ('file_name', 'submission', 'file_type', 'file_size', 'uploaded_at')
    search_fields = ('file_name', 'submission__title')
