# tasks/commands.py
"""
Command layer for the task workflow.

Each command loads the task, inside the actor's company for everything but
comments, asks tasks.policies whether the actor may act on it, applies the
change in one transaction and returns a CommandResult. Expected failures
never raise; the view maps the result's ErrorKind to the response status.
"""

import logging

from django.db import DatabaseError, transaction

from accounts.authz import ActorContext
from accounts.models import User
from ops.results import CommandResult
from ops.uploads import delete_uploads, save_uploads
from projects.models import Project
from .models import Task, TaskAssignment, TaskComment, priority_from_keyword
from .policies import (
    can_accept_task,
    can_approve_assignment,
    can_comment_task,
    can_request_assignment,
)

logger = logging.getLogger(__name__)


def _blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _company_user(actor: ActorContext, user_id):
    return User.objects.filter(pk=user_id, user_group__company=actor.company).first()


def _locked_task(actor: ActorContext, task_id):
    return (
        Task.objects.select_for_update()
        .select_related("project")
        .filter(pk=task_id, project__company=actor.company)
        .first()
    )


@transaction.atomic
def create_task(
    actor: ActorContext,
    project_id,
    assigned_user_id,
    title: str,
    description: str,
    start_date,
    due_date,
    priority=None,
) -> CommandResult:
    """
    Create a task and its initial, already approved, assignment.

    Args:
        actor: The actor context (becomes the task's creator)
        project_id: Project in the actor's company
        assigned_user_id: First assignee, becomes the current user
        title, description: Trimmed before saving
        start_date, due_date: Dates
        priority: Optional keyword ("critical", "high", "medium", ...)

    Returns:
        CommandResult with the created Task
    """
    required = (project_id, assigned_user_id, title, description, start_date, due_date)
    if any(_blank(value) for value in required):
        return CommandResult.invalid("All fields are required")

    project = Project.objects.filter(pk=project_id, company=actor.company).first()
    if project is None:
        return CommandResult.not_found("Project not found")

    assignee = _company_user(actor, assigned_user_id)
    if assignee is None:
        return CommandResult.not_found("Assigned user not found")

    task = Task.objects.create(
        project=project,
        created_by=actor.user,
        current_user=assignee,
        title=title.strip(),
        description=description.strip(),
        start_date=start_date,
        due_date=due_date,
        priority=priority_from_keyword(priority),
    )
    TaskAssignment.objects.create(
        task=task,
        assigned_to=assignee,
        assigned_by=actor.user,
        approved=True,
    )

    logger.info(
        "Task created",
        extra={"task_id": task.pk, "project_id": project.pk, "assignee_id": assignee.pk, "actor_id": actor.user_id},
    )
    return CommandResult.ok(task)


@transaction.atomic
def assign_task(actor: ActorContext, task_id, assigned_user_id) -> CommandResult:
    """
    Request a new assignee for a task.

    The request is recorded as an unapproved assignment; the current
    assignee stays until the request is approved.
    """
    task = _locked_task(actor, task_id)
    if task is None:
        return CommandResult.not_found("Task not found")

    allowed, reason = can_request_assignment(actor, task, task.project)
    if not allowed:
        return CommandResult.forbidden(reason)

    if _blank(assigned_user_id):
        return CommandResult.invalid("Please provide the user to assign")

    user = _company_user(actor, assigned_user_id)
    if user is None:
        return CommandResult.not_found("User not found")

    assignment = TaskAssignment.objects.create(
        task=task,
        assigned_to=user,
        assigned_by=actor.user,
        approved=False,
    )
    task.save(update_fields=["updated_at"])

    logger.info(
        "Task assignment requested",
        extra={"task_id": task.pk, "assignment_id": assignment.pk, "assignee_id": user.pk, "actor_id": actor.user_id},
    )
    return CommandResult.ok(task)


@transaction.atomic
def approve_task(actor: ActorContext, task_id, assignment_id) -> CommandResult:
    """
    Approve a pending assignment and make its assignee the current user.

    Other assignment records are left untouched.
    """
    task = _locked_task(actor, task_id)
    if task is None:
        return CommandResult.not_found("Task not found")

    allowed, reason = can_approve_assignment(actor, task, task.project)
    if not allowed:
        return CommandResult.forbidden(reason)

    if _blank(assignment_id):
        return CommandResult.invalid("Please provide the assignment to approve")

    assignment = TaskAssignment.objects.filter(pk=assignment_id, task=task).first()
    if assignment is None:
        return CommandResult.not_found("Task assign request not found")

    assignment.approved = True
    assignment.save(update_fields=["approved"])

    task.current_user_id = assignment.assigned_to_id
    task.save(update_fields=["current_user", "updated_at"])

    logger.info(
        "Task assignment approved",
        extra={"task_id": task.pk, "assignment_id": assignment.pk, "assignee_id": assignment.assigned_to_id, "actor_id": actor.user_id},
    )
    return CommandResult.ok(task)


@transaction.atomic
def accept_task(actor: ActorContext, task_id) -> CommandResult:
    """Move the task to "in progress". Accepting twice is a no-op."""
    task = _locked_task(actor, task_id)
    if task is None:
        return CommandResult.not_found("Task not found")

    allowed, reason = can_accept_task(actor, task)
    if not allowed:
        return CommandResult.forbidden(reason)

    if task.status != Task.Status.IN_PROGRESS:
        task.status = Task.Status.IN_PROGRESS
        task.save(update_fields=["status", "updated_at"])
        logger.info("Task accepted", extra={"task_id": task.pk, "actor_id": actor.user_id})

    return CommandResult.ok(task)


@transaction.atomic
def comment_task(actor: ActorContext, task_id, text: str, files=()) -> CommandResult:
    """
    Append a comment to the task.

    Commenting is open to any authenticated user, so the task is looked up
    without the company filter the other commands apply. Files are stored
    once the comment row exists and are removed again if the command then
    fails. The comment keeps their "/uploads/<name>" paths in upload order.
    """
    task = Task.objects.select_for_update().filter(pk=task_id).first()
    if task is None:
        return CommandResult.not_found("Task not found")

    allowed, reason = can_comment_task(actor, task)
    if not allowed:
        return CommandResult.forbidden(reason)

    if _blank(text):
        return CommandResult.invalid("Comment text is required")

    comment = TaskComment.objects.create(task=task, commented_by=actor.user, text=text.strip())
    comment.files = save_uploads(files or [])
    try:
        comment.save(update_fields=["files"])
        task.save(update_fields=["updated_at"])
    except DatabaseError:
        delete_uploads(comment.files)
        raise

    logger.info(
        "Task commented",
        extra={"task_id": task.pk, "comment_id": comment.pk, "files": len(comment.files), "actor_id": actor.user_id},
    )
    return CommandResult.ok(task)
