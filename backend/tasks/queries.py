# tasks/queries.py
"""
Read side of the task workflow.

Task lists embed their project, creator, current user, assignment records
and comments. Instead of following each reference per row, the references
are resolved in one batch after the primary query: every user id and
project id across the result is collected, each collection is fetched
once and the serializers join them in memory (see TaskSerializer).
"""

from collections import defaultdict
from typing import Iterable, List, Optional

from accounts.authz import ActorContext
from accounts.models import User
from projects.models import Project
from .models import Task, TaskAssignment, TaskComment, priority_from_keyword

ORDERING = ("-priority", "id")


def task_for_actor(actor: ActorContext, task_id) -> Optional[Task]:
    """The task if it exists in the actor's company, else None."""
    return Task.objects.filter(pk=task_id, project__company=actor.company).first()


def get_tasks_for_user(actor: ActorContext) -> List[Task]:
    """Tasks currently assigned to the actor, highest priority first."""
    return list(
        Task.objects.filter(current_user_id=actor.user_id, project__company=actor.company).order_by(*ORDERING)
    )


def get_all_tasks(
    actor: ActorContext,
    project=None,
    created_by=None,
    priority=None,
    status=None,
) -> List[Task]:
    """
    Tasks of the actor's company with optional filters.

    A blank ``status`` means no status filter. ``priority`` is a keyword:
    critical, high and medium map to 4, 3 and 2; any other value, "low" and
    typos included, matches priority 1.
    """
    tasks = Task.objects.filter(project__company=actor.company)
    if project is not None:
        tasks = tasks.filter(project_id=project)
    if created_by is not None:
        tasks = tasks.filter(created_by_id=created_by)
    if priority is not None:
        tasks = tasks.filter(priority=priority_from_keyword(priority))
    if status:
        tasks = tasks.filter(status=status)
    return list(tasks.order_by(*ORDERING))


def get_task_comments(task: Task) -> List[TaskComment]:
    return list(TaskComment.objects.filter(task=task).order_by("id"))


# =============================================================================
# Batch reference resolution
# =============================================================================

def resolve_comment_references(comments: Iterable[TaskComment]) -> dict:
    """Serializer context for a list of comments: {"users": {id: User}}."""
    user_ids = {c.commented_by_id for c in comments}
    return {"users": User.objects.in_bulk(user_ids)}


def resolve_task_references(tasks: Iterable[Task]) -> dict:
    """
    Serializer context for a list of tasks.

    Returns:
        {"users": {id: User}, "projects": {id: Project},
         "assignments": {task_id: [TaskAssignment]},
         "comments": {task_id: [TaskComment]}}
    """
    tasks = list(tasks)
    task_ids = [t.pk for t in tasks]

    assignments = defaultdict(list)
    for record in TaskAssignment.objects.filter(task_id__in=task_ids).order_by("id"):
        assignments[record.task_id].append(record)

    comments = defaultdict(list)
    for comment in TaskComment.objects.filter(task_id__in=task_ids).order_by("id"):
        comments[comment.task_id].append(comment)

    user_ids = set()
    project_ids = set()
    for task in tasks:
        user_ids.update((task.created_by_id, task.current_user_id))
        project_ids.add(task.project_id)
    for records in assignments.values():
        for record in records:
            user_ids.update((record.assigned_to_id, record.assigned_by_id))
    for records in comments.values():
        user_ids.update(c.commented_by_id for c in records)

    return {
        "users": User.objects.in_bulk(user_ids),
        "projects": Project.objects.in_bulk(project_ids),
        "assignments": assignments,
        "comments": comments,
    }
