"""Status workflow for complaints, student/milestone verification and
recruiter messages.

The ``decide_*`` functions are pure: given the acting user, the current record
and the requested change they return a :class:`Decision` (the fields to write
plus the notification to fan out) or raise ``Unauthorized`` /
``ValidationError`` / ``TransitionRejected`` without touching the database.

:func:`commit` is the only place that writes a decision. Writing the entity
and emitting its notification are two separate round trips with no
transaction around them; a failed notification is logged and reported on the
:class:`Outcome` but never undoes the primary write.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel

from showcase.schemas.auth import Actor
from showcase.schemas.complaint import COMPLAINT_STATUSES, Complaint, ComplaintCreate
from showcase.schemas.message import RecruiterMessage, RecruiterMessageCreate
from showcase.schemas.milestone import Milestone, MilestoneCreate
from showcase.schemas.notification import NotificationDraft
from showcase.schemas.student import StudentProfile, StudentProfileUpdate
from showcase.services.errors import ShowcaseError, TransitionRejected, Unauthorized, ValidationError
from showcase.services.notifications import emit_draft

logger = logging.getLogger(__name__)

PROFILE_VERIFIED_MESSAGE = "Your profile has been verified by admin"
MILESTONE_VERIFIED_MESSAGE = "Your milestone has been verified by admin"


class Decision(BaseModel):
    changes: Dict[str, Any] = {}
    notification: Optional[NotificationDraft] = None
    # the requested state is already current; nothing to write or announce
    noop: bool = False


class Outcome(BaseModel):
    record: Optional[Any] = None
    changed: bool = False
    notified: bool = False
    notification_error: Optional[str] = None


NO_CHANGE = Decision(noop=True)


def require_admin(actor: Actor, action: str):
    if not actor.is_admin:
        raise Unauthorized(f"Only admins can {action}")


def require_owner(actor: Actor, user_id: str, action: str):
    if not actor.owns(user_id):
        raise Unauthorized(f"Only the owning student can {action}")


def require_text(value: Optional[str], field: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{field} is required")
    return value


# -------- Complaints --------

def complaint_status_message(title: str, status: str) -> str:
    return f'Your complaint "{title}" status has been updated to {status}'


def decide_complaint_create(actor: Actor, draft: ComplaintCreate) -> Decision:
    if actor.is_anonymous:
        raise Unauthorized("Sign in to submit a complaint")
    return Decision(changes={
        "student_id": actor.id,
        "title": require_text(draft.title, "title"),
        "description": require_text(draft.description, "description"),
        "status": "pending",
    })


def decide_complaint_status(actor: Actor, complaint: Complaint, status: str, admin_notes: Optional[str] = None) -> Decision:
    require_admin(actor, "update complaint status")
    if status not in COMPLAINT_STATUSES:
        raise ValidationError(f"Invalid complaint status: {status}")

    changes = {"status": status}
    if admin_notes is not None:
        changes["admin_notes"] = admin_notes

    # Re-saving the same status is allowed (admins add notes) and still notifies
    return Decision(
        changes=changes,
        notification=NotificationDraft(
            user_id=complaint.student_id,
            type="complaint",
            message=complaint_status_message(complaint.title, status),
            complaint_id=complaint.id,
        ),
    )


def check_complaint_delete(actor: Actor, complaint: Complaint):
    require_admin(actor, "delete complaints")
    if complaint.status != "resolved":
        raise TransitionRejected(f"Only resolved complaints can be deleted (status is {complaint.status})")


# -------- Students --------

def decide_profile_upsert(actor: Actor, student_id: str, update: StudentProfileUpdate) -> Decision:
    require_owner(actor, student_id, "edit this profile")
    changes = update.model_dump()
    changes["id"] = student_id
    return Decision(changes=changes)


def decide_student_verification(actor: Actor, student: StudentProfile, verified: bool, now: Optional[datetime] = None) -> Decision:
    require_admin(actor, "verify students")
    if student.verified == verified:
        return NO_CHANGE

    if verified:
        return Decision(
            changes={"verified": True, "verified_at": now or datetime.now(timezone.utc)},
            notification=NotificationDraft(user_id=student.id, type="system", message=PROFILE_VERIFIED_MESSAGE),
        )
    # unverifying is intentionally not announced
    return Decision(changes={"verified": False, "verified_at": None})


def check_student_delete(actor: Actor):
    require_admin(actor, "delete students")


# -------- Milestones --------

def decide_milestone_create(actor: Actor, draft: MilestoneCreate) -> Decision:
    if actor.is_anonymous:
        raise Unauthorized("Sign in to record a milestone")
    return Decision(changes={
        "student_id": actor.id,
        "title": require_text(draft.title, "title"),
        "description": draft.description or None,
        "date_completed": draft.date_completed,
        "verified_by_admin": False,
    })


def decide_milestone_verification(actor: Actor, milestone: Milestone) -> Decision:
    # One-way: there is no path back to unverified.
    require_admin(actor, "verify milestones")
    if milestone.verified_by_admin:
        return NO_CHANGE
    return Decision(
        changes={"verified_by_admin": True},
        notification=NotificationDraft(user_id=milestone.student_id, type="milestone", message=MILESTONE_VERIFIED_MESSAGE),
    )


# -------- Recruiter messages --------

def recruiter_message_notice(sender_name: str, sender_company: Optional[str] = None) -> str:
    message = f"New message from {sender_name}"
    if sender_company:
        message += f" at {sender_company}"
    return message


def decide_message_create(student: StudentProfile, draft: RecruiterMessageCreate) -> Decision:
    # Any caller may contact any student, signed in or not, verified or not
    return Decision(
        changes={
            "student_id": student.id,
            "sender_name": require_text(draft.sender_name, "sender_name"),
            "sender_email": require_text(draft.sender_email, "sender_email"),
            "sender_company": draft.sender_company,
            "message": require_text(draft.message, "message"),
            "is_read": False,
        },
        notification=NotificationDraft(
            user_id=student.id,
            type="recruiter_message",
            message=recruiter_message_notice(draft.sender_name, draft.sender_company),
        ),
    )


def decide_message_read(actor: Actor, message: RecruiterMessage) -> Decision:
    require_owner(actor, message.student_id, "mark this message as read")
    if message.is_read:
        return NO_CHANGE
    return Decision(changes={"is_read": True})


# -------- Commit --------

def commit(
    store,
    table,
    decision: Decision,
    record_id: Optional[str] = None,
    current=None,
    upsert: bool = False,
    minimal: bool = False,
) -> Outcome:
    """Write ``decision`` to ``table`` and then fan out its notification.

    With ``record_id`` the decision updates that row, with ``upsert`` it is
    upserted, otherwise a new row is created (``minimal`` skips reading it
    back). Errors from the primary write propagate; notification errors are
    reported on the outcome.
    """
    if decision.noop:
        logger.info(f"No change on {table.name} {record_id}; skipping write and notification")
        return Outcome(record=current, changed=False)

    if upsert:
        record = table.upsert(decision.changes)
    elif record_id is not None:
        record = table.update(record_id, decision.changes)
    else:
        record = table.create(decision.changes, minimal=minimal)
    logger.info(f"Committed {table.name} {getattr(record, 'id', record_id)}: {sorted(decision.changes)}")

    outcome = Outcome(record=record, changed=True)
    if decision.notification is None:
        return outcome

    try:
        emit_draft(store, decision.notification)
        outcome.notified = True
    except ShowcaseError as e:
        logger.warning(
            f"{table.name} {getattr(record, 'id', record_id)} committed but notifying "
            f"{decision.notification.user_id} failed: {e.detail}"
        )
        outcome.notification_error = e.detail
    return outcome
