# tasks/models.py
"""
Task workflow models.

A task always has exactly one current assignee. Every change of assignee
goes through an assignment record: the record created together with the
task is approved immediately, later records wait for approval by the
task's creator or the project's team leader (see tasks.policies).
"""

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class Task(models.Model):
    class Status(models.TextChoices):
        OPEN = "open", _("Open")
        IN_PROGRESS = "in progress", _("In progress")

    class Priority(models.IntegerChoices):
        LOW = 1, _("Low")
        MEDIUM = 2, _("Medium")
        HIGH = 3, _("High")
        CRITICAL = 4, _("Critical")

    project = models.ForeignKey("projects.Project", on_delete=models.CASCADE, related_name="tasks")
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="created_tasks",
    )
    current_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="current_tasks",
    )
    title = models.CharField(max_length=255)
    description = models.TextField()
    start_date = models.DateField()
    due_date = models.DateField()
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.OPEN)
    priority = models.PositiveSmallIntegerField(choices=Priority.choices, default=Priority.LOW)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=["current_user", "priority"], name="task_assignee_priority_idx"),
            models.Index(fields=["project", "status"], name="task_project_status_idx"),
        ]

    def __str__(self):
        return self.title


class TaskAssignment(models.Model):
    task = models.ForeignKey(Task, on_delete=models.CASCADE, related_name="assignments")
    assigned_to = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="task_assignments",
    )
    assigned_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="+",
    )
    approved = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        state = "approved" if self.approved else "pending"
        return f"Task {self.task_id} -> {self.assigned_to_id} ({state})"


class TaskComment(models.Model):
    task = models.ForeignKey(Task, on_delete=models.CASCADE, related_name="comments")
    commented_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="task_comments",
    )
    text = models.TextField()
    # Relative paths of the uploaded attachments ("/uploads/<name>")
    files = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return f"Comment {self.pk} on task {self.task_id}"


PRIORITY_KEYWORDS = {
    "critical": Task.Priority.CRITICAL,
    "high": Task.Priority.HIGH,
    "medium": Task.Priority.MEDIUM,
}


def priority_from_keyword(keyword) -> int:
    """Map a priority keyword to its level; anything unknown is LOW."""
    return PRIORITY_KEYWORDS.get(str(keyword or "").strip().lower(), Task.Priority.LOW)
