from django.contrib import admin

from .models import Task, TaskAssignment, TaskComment


class TaskAssignmentInline(admin.TabularInline):
    model = TaskAssignment
    extra = 0
    raw_id_fields = ("assigned_to", "assigned_by")


class TaskCommentInline(admin.TabularInline):
    model = TaskComment
    extra = 0
    raw_id_fields = ("commented_by",)


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    list_display = ("title", "project", "current_user", "status", "priority", "due_date")
    list_filter = ("status", "priority")
    search_fields = ("title", "description")
    raw_id_fields = ("project", "created_by", "current_user")
    inlines = [TaskAssignmentInline, TaskCommentInline]
