"""
Thin views that delegate to the commands layer.

Reads are scoped to the actor's company; creations go through
projects.commands.
"""

from django.http import Http404
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from accounts.authz import resolve_actor
from ops.responses import envelope, result_response
from .commands import create_fabricator, create_project
from .models import Fabricator, Project
from .serializers import (
    FabricatorCreateSerializer,
    FabricatorSerializer,
    ProjectCreateSerializer,
    ProjectSerializer,
)


class ProjectListCreateView(APIView):
    """
    GET /api/projects/ -> projects of the actor's company
    POST /api/projects/ -> create project
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        actor = resolve_actor(request)
        projects = Project.objects.filter(company=actor.company).select_related("team_leader", "fabricator")
        return envelope(ProjectSerializer(projects, many=True).data, "Projects fetched successfully")

    def post(self, request):
        actor = resolve_actor(request)

        serializer = ProjectCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = create_project(actor, **serializer.validated_data)
        return result_response(
            result,
            "Project created successfully",
            status.HTTP_201_CREATED,
            serialize=lambda project: ProjectSerializer(project).data,
        )


class ProjectDetailView(APIView):
    """GET /api/projects/<pk>/"""
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        actor = resolve_actor(request)
        project = Project.objects.filter(
            pk=pk, company=actor.company,
        ).select_related("team_leader", "fabricator").first()
        if not project:
            raise Http404("Project not found")
        return envelope(ProjectSerializer(project).data, "Project fetched successfully")


class FabricatorListCreateView(APIView):
    """
    GET /api/projects/fabricators/
    POST /api/projects/fabricators/
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        actor = resolve_actor(request)
        fabricators = Fabricator.objects.filter(company=actor.company).order_by("name")
        return envelope(FabricatorSerializer(fabricators, many=True).data, "Fabricators fetched successfully")

    def post(self, request):
        actor = resolve_actor(request)

        serializer = FabricatorCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = create_fabricator(actor, **serializer.validated_data)
        return result_response(
            result,
            "Fabricator created successfully",
            status.HTTP_201_CREATED,
            serialize=lambda fabricator: FabricatorSerializer(fabricator).data,
        )
