"""
Project views.
"""
from rest_framework import generics, permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from django.shortcuts import get_object_or_404
from drf_spectacular.utils import extend_schema
from apps.accounts.permissions import IsClient
from apps.projects.models import Project
from apps.projects.serializers import ProjectSerializer, CreateProjectSerializer
from apps.projects.services.project_service import ProjectService
from common.pagination import NewestFirstCursorPagination


@extend_schema(tags=['Projects'])
class ProjectListCreateView(generics.ListCreateAPIView):
    """
    GET: open gigs (non-direct). POST: client posts a project.
    """
    pagination_class = NewestFirstCursorPagination

    def get_permissions(self):
        if self.request.method == 'POST':
            return [permissions.IsAuthenticated(), IsClient()]
        return [permissions.IsAuthenticated()]

    def get_serializer_class(self):
        if self.request.method == 'POST':
            return CreateProjectSerializer
        return ProjectSerializer

    def get_queryset(self):
        return ProjectService.get_open_projects(
            budget_type=self.request.query_params.get('budget_type')
        )

    def create(self, request, *args, **kwargs):
        serializer = CreateProjectSerializer(data=request.data, context={})
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        project = ProjectService.create_project(
            client=request.user,
            title=data['title'],
            description=data['description'],
            budget_type=data['budget_type'],
            budget_min=data.get('budget_min'),
            budget_max=data.get('budget_max'),
            deadline=data.get('deadline'),
            is_direct=data['is_direct'],
            target_creative=serializer.context.get('target_creative')
        )

        return Response(ProjectSerializer(project).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=['Projects'])
class ProjectDetailView(generics.RetrieveAPIView):
    serializer_class = ProjectSerializer
    permission_classes = [permissions.IsAuthenticated]
    queryset = Project.objects.select_related('client', 'client__profile')


@extend_schema(tags=['Projects'], summary='Cancel an unassigned project', request=None,
               responses=ProjectSerializer)
@api_view(['POST'])
@permission_classes([permissions.IsAuthenticated])
def cancel_project(request, pk):
    project = get_object_or_404(Project, pk=pk)
    project = ProjectService.cancel_project(project, request.user)
    return Response(ProjectSerializer(project).data)
