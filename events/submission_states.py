# events/submission_states.py
"""
Submission state machine.

Enforces valid status transitions for project submissions:
draft -> submitted -> accepted -> winner
                   └-> rejected
                   └-> winner

Attendees can only ever move draft -> submitted; everything after that is
an operator decision (admin). Any transition not in VALID_TRANSITIONS is
rejected.
"""
from typing import Tuple
import logging

from .models import Submission

logger = logging.getLogger('portal.submissions')


VALID_TRANSITIONS = {
    Submission.STATUS_DRAFT: [Submission.STATUS_SUBMITTED],
    Submission.STATUS_SUBMITTED: [
        Submission.STATUS_ACCEPTED,
        Submission.STATUS_REJECTED,
        Submission.STATUS_WINNER,
    ],
    Submission.STATUS_ACCEPTED: [Submission.STATUS_WINNER, Submission.STATUS_REJECTED],
    Submission.STATUS_REJECTED: [Submission.STATUS_ACCEPTED],
    Submission.STATUS_WINNER: [Submission.STATUS_ACCEPTED],
}

# Transitions an attendee may trigger through the public API
ATTENDEE_TRANSITIONS = {
    Submission.STATUS_DRAFT: [Submission.STATUS_SUBMITTED],
}


def can_transition(submission: Submission, new_status: str, by_operator: bool = False) -> Tuple[bool, str]:
    """
    Check if a submission can move to a new status.

    Returns (can_transition: bool, reason: str)
    """
    current_status = submission.status

    if new_status not in dict(Submission.STATUS_CHOICES):
        return False, f"Invalid status: {new_status}"

    if new_status == current_status:
        return True, "Same status"

    table = VALID_TRANSITIONS if by_operator else ATTENDEE_TRANSITIONS
    if new_status not in table.get(current_status, []):
        return False, f"Cannot transition from '{current_status}' to '{new_status}'"

    return True, ""


def transition(submission: Submission, new_status: str, actor=None, by_operator: bool = False) -> Tuple[bool, str]:
    """
    Move a submission to a new status in memory. The caller saves.

    Returns (success: bool, message: str)
    """
    can, reason = can_transition(submission, new_status, by_operator=by_operator)

    if not can:
        logger.warning(
            f"Invalid submission transition attempted: submission={submission.id}, "
            f"from={submission.status}, to={new_status}, actor={getattr(actor, 'id', 'unknown')}. "
            f"Reason: {reason}"
        )
        return False, reason

    old_status = submission.status
    submission.status = new_status

    logger.info(
        f"Submission state transition: submission={submission.id}, "
        f"from={old_status}, to={new_status}, actor={getattr(actor, 'id', 'unknown')}"
    )

    return True, f"Transitioned from '{old_status}' to '{new_status}'"


def get_allowed_transitions(submission: Submission, by_operator: bool = True) -> list:
    table = VALID_TRANSITIONS if by_operator else ATTENDEE_TRANSITIONS
    return table.get(submission.status, [])
