"""
Serializers for the tasks API.

Output serializers read referenced users and projects from the serializer
context built by tasks.queries, so a list of tasks costs a fixed number of
queries whatever its length.
"""

from rest_framework import serializers

from accounts.serializers import UserSummarySerializer
from projects.models import Project
from .models import Task, TaskAssignment, TaskComment
from .queries import resolve_comment_references, resolve_task_references


def _user(context, user_id):
    user = context["users"].get(user_id)
    return UserSummarySerializer(user).data if user else None


class ProjectSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Project
        fields = ("id", "name", "team_leader", "start_date", "end_date")


class TaskAssignmentSerializer(serializers.ModelSerializer):
    assigned_to = serializers.SerializerMethodField()
    assigned_by = serializers.SerializerMethodField()

    class Meta:
        model = TaskAssignment
        fields = ("id", "assigned_to", "assigned_by", "approved", "created_at")

    def get_assigned_to(self, obj):
        return _user(self.context, obj.assigned_to_id)

    def get_assigned_by(self, obj):
        return _user(self.context, obj.assigned_by_id)


class TaskCommentSerializer(serializers.ModelSerializer):
    commented_by = serializers.SerializerMethodField()

    class Meta:
        model = TaskComment
        fields = ("id", "commented_by", "text", "files", "created_at")

    def get_commented_by(self, obj):
        return _user(self.context, obj.commented_by_id)


class TaskSerializer(serializers.ModelSerializer):
    project = serializers.SerializerMethodField()
    created_by = serializers.SerializerMethodField()
    current_user = serializers.SerializerMethodField()
    assignments = serializers.SerializerMethodField()
    comments = serializers.SerializerMethodField()

    class Meta:
        model = Task
        fields = (
            "id", "project", "created_by", "current_user", "title", "description",
            "start_date", "due_date", "status", "priority", "assignments", "comments",
            "created_at", "updated_at",
        )
        read_only_fields = fields

    def get_project(self, obj):
        project = self.context["projects"].get(obj.project_id)
        return ProjectSummarySerializer(project).data if project else None

    def get_created_by(self, obj):
        return _user(self.context, obj.created_by_id)

    def get_current_user(self, obj):
        return _user(self.context, obj.current_user_id)

    def get_assignments(self, obj):
        records = self.context["assignments"].get(obj.pk, [])
        return TaskAssignmentSerializer(records, many=True, context=self.context).data

    def get_comments(self, obj):
        records = self.context["comments"].get(obj.pk, [])
        return TaskCommentSerializer(records, many=True, context=self.context).data


def serialize_tasks(tasks) -> list:
    tasks = list(tasks)
    return TaskSerializer(tasks, many=True, context=resolve_task_references(tasks)).data


def serialize_task(task: Task) -> dict:
    return serialize_tasks([task])[0]


def serialize_comments(comments) -> list:
    comments = list(comments)
    return TaskCommentSerializer(comments, many=True, context=resolve_comment_references(comments)).data


# =============================================================================
# Input serializers
# =============================================================================

class TaskCreateSerializer(serializers.Serializer):
    """
    Fields are optional here so that a missing value is reported by
    create_task with its own message.
    """
    project = serializers.IntegerField(source="project_id", required=False, allow_null=True)
    assignedUser = serializers.IntegerField(source="assigned_user_id", required=False, allow_null=True)
    title = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False, default="")
    description = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False, default="")
    startDate = serializers.DateField(source="start_date", required=False, allow_null=True)
    dueDate = serializers.DateField(source="due_date", required=False, allow_null=True)
    priority = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class TaskFilterSerializer(serializers.Serializer):
    project = serializers.IntegerField(required=False)
    createdBy = serializers.IntegerField(source="created_by", required=False)
    priority = serializers.CharField(required=False, allow_blank=True)
    status = serializers.CharField(required=False, allow_blank=True)


class TaskAssignSerializer(serializers.Serializer):
    assignedUser = serializers.IntegerField(source="assigned_user_id", required=False, allow_null=True)


class TaskApproveSerializer(serializers.Serializer):
    assignId = serializers.IntegerField(source="assignment_id", required=False, allow_null=True)


class TaskCommentCreateSerializer(serializers.Serializer):
    text = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False, default="")
