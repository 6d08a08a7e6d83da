"""
Thin views for the task workflow.

Views parse the request, resolve the actor and hand over to
tasks.commands (mutations) or tasks.queries (reads).
"""

from django.http import Http404
from rest_framework import status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from accounts.authz import resolve_actor
from ops.responses import envelope, result_response
from .commands import accept_task, approve_task, assign_task, comment_task, create_task
from .queries import get_all_tasks, get_task_comments, get_tasks_for_user, task_for_actor
from .serializers import (
    TaskApproveSerializer,
    TaskAssignSerializer,
    TaskCommentCreateSerializer,
    TaskCreateSerializer,
    TaskFilterSerializer,
    serialize_comments,
    serialize_task,
    serialize_tasks,
)


class TaskListCreateView(APIView):
    """
    GET /api/tasks/ -> tasks currently assigned to the actor
    POST /api/tasks/ -> create task
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        actor = resolve_actor(request)
        return envelope(serialize_tasks(get_tasks_for_user(actor)), "Task fetched successfully")

    def post(self, request):
        actor = resolve_actor(request)

        serializer = TaskCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = create_task(
            actor,
            project_id=data.get("project_id"),
            assigned_user_id=data.get("assigned_user_id"),
            title=data.get("title"),
            description=data.get("description"),
            start_date=data.get("start_date"),
            due_date=data.get("due_date"),
            priority=data.get("priority"),
        )
        return result_response(result, "Task created successfully", status.HTTP_201_CREATED, serialize=serialize_task)


class TaskAllView(APIView):
    """GET /api/tasks/all/?project=&createdBy=&priority=&status="""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        actor = resolve_actor(request)

        serializer = TaskFilterSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)

        tasks = get_all_tasks(actor, **serializer.validated_data)
        return envelope(serialize_tasks(tasks), "Task fetched successfully")


class TaskAcceptView(APIView):
    """POST /api/tasks/<task_id>/accept/"""
    permission_classes = [IsAuthenticated]

    def post(self, request, task_id):
        actor = resolve_actor(request)
        result = accept_task(actor, task_id)
        return result_response(result, "Task accepted successfully", serialize=serialize_task)


class TaskApproveView(APIView):
    """POST /api/tasks/<task_id>/approve/ {"assignId": ...}"""
    permission_classes = [IsAuthenticated]

    def post(self, request, task_id):
        actor = resolve_actor(request)

        serializer = TaskApproveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = approve_task(actor, task_id, serializer.validated_data.get("assignment_id"))
        return result_response(result, "Task approved successfully", serialize=serialize_task)


class TaskAssignView(APIView):
    """POST /api/tasks/<task_id>/assign/ {"assignedUser": ...}"""
    permission_classes = [IsAuthenticated]

    def post(self, request, task_id):
        actor = resolve_actor(request)

        serializer = TaskAssignSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = assign_task(actor, task_id, serializer.validated_data.get("assigned_user_id"))
        return result_response(
            result,
            "Task assigned successfully, waiting for approval",
            serialize=serialize_task,
        )


class TaskCommentsView(APIView):
    """
    GET /api/tasks/<task_id>/comments/ -> comments in posting order
    POST /api/tasks/<task_id>/comments/ -> multipart text + files
    """
    permission_classes = [IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser, JSONParser]

    def get(self, request, task_id):
        actor = resolve_actor(request)
        task = task_for_actor(actor, task_id)
        if task is None:
            raise Http404("Task not found")
        return envelope(serialize_comments(get_task_comments(task)), "Task comments fetched successfully")

    def post(self, request, task_id):
        actor = resolve_actor(request)

        serializer = TaskCommentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = comment_task(
            actor,
            task_id,
            serializer.validated_data["text"],
            files=request.FILES.getlist("files"),
        )
        return result_response(result, "Task comment added successfully", serialize=serialize_task)
