# tasks/policies.py
"""
Business policy functions for the task workflow.

Policies answer: "Is this actor allowed to do this to this task?"
They do NOT perform the action, that's the command's job.

Usage:
    from tasks.policies import can_accept_task

    allowed, reason = can_accept_task(actor, task)
    if not allowed:
        return CommandResult.forbidden(reason)

Assignment and approval rules come in two versions:

- intended: the rule the workflow is meant to enforce
- literal: the rule the legacy system actually enforced, where each
  check was written as an OR of inequalities and therefore only lets
  through an actor who holds every role at once

``settings.TASK_AUTHZ_MODE`` ("intended" or "literal") selects which
version ``can_request_assignment`` and ``can_approve_assignment`` apply.
Every predicate is pure: it only looks at ids already loaded on the
actor, the task and the project.
"""

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

INTENDED = "intended"
LITERAL = "literal"

NOT_ALLOWED = "You are not allowed to perform this action"


def _is_assignee(actor, task) -> bool:
    return task.current_user_id == actor.user_id


def _is_creator(actor, task) -> bool:
    return task.created_by_id == actor.user_id


def _is_team_leader(actor, project) -> bool:
    return project.team_leader_id == actor.user_id


def authz_mode() -> str:
    mode = getattr(settings, "TASK_AUTHZ_MODE", INTENDED)
    if mode not in (INTENDED, LITERAL):
        raise ImproperlyConfigured(
            f"TASK_AUTHZ_MODE must be '{INTENDED}' or '{LITERAL}', got {mode!r}"
        )
    return mode


# =============================================================================
# Assignment requests
# =============================================================================

def intended_can_request_assignment(actor, task, project) -> tuple[bool, str]:
    """
    Rules:
    - The current assignee may hand the task on
    - The task creator may reassign it
    - The project's team leader may reassign it
    """
    if _is_assignee(actor, task) or _is_creator(actor, task) or _is_team_leader(actor, project):
        return True, ""
    return False, NOT_ALLOWED


def literal_can_request_assignment(actor, task, project) -> tuple[bool, str]:
    """Denies unless the actor is assignee, creator and team leader at once."""
    if not _is_assignee(actor, task) or not _is_creator(actor, task) or not _is_team_leader(actor, project):
        return False, NOT_ALLOWED
    return True, ""


def can_request_assignment(actor, task, project) -> tuple[bool, str]:
    if authz_mode() == LITERAL:
        return literal_can_request_assignment(actor, task, project)
    return intended_can_request_assignment(actor, task, project)


# =============================================================================
# Assignment approval
# =============================================================================

def intended_can_approve_assignment(actor, task, project) -> tuple[bool, str]:
    """
    Rules:
    - The task creator may approve a pending assignment
    - The project's team leader may approve a pending assignment
    """
    if _is_creator(actor, task) or _is_team_leader(actor, project):
        return True, ""
    return False, NOT_ALLOWED


def literal_can_approve_assignment(actor, task, project) -> tuple[bool, str]:
    """Denies unless the actor is both creator and team leader."""
    if not _is_creator(actor, task) or not _is_team_leader(actor, project):
        return False, NOT_ALLOWED
    return True, ""


def can_approve_assignment(actor, task, project) -> tuple[bool, str]:
    if authz_mode() == LITERAL:
        return literal_can_approve_assignment(actor, task, project)
    return intended_can_approve_assignment(actor, task, project)


# =============================================================================
# Acceptance and comments
# =============================================================================

def can_accept_task(actor, task) -> tuple[bool, str]:
    """Only the current assignee can accept a task."""
    if not _is_assignee(actor, task):
        return False, NOT_ALLOWED
    return True, ""


def can_comment_task(actor, task) -> tuple[bool, str]:
    # Any authenticated user may comment, whatever their relation to the task.
    return True, ""
