"""
Application views.
"""
from rest_framework import generics, permissions, status
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.response import Response
from django.shortcuts import get_object_or_404
from drf_spectacular.utils import extend_schema
from apps.accounts.permissions import IsClient, IsCreative
from apps.applications.models import Application
from apps.applications.serializers import (
    ApplicationSerializer,
    MyApplicationSerializer,
    SubmitApplicationSerializer
)
from apps.applications.services.application_service import ApplicationService
from apps.projects.models import Project
from apps.workorders.serializers import WorkOrderDetailSerializer
from common.pagination import NewestFirstCursorPagination
from common.throttling import ApplicationThrottle
from common.utils import get_client_ip


@extend_schema(tags=['Applications'], summary='Apply to a project (creative)',
               request=SubmitApplicationSerializer, responses={201: ApplicationSerializer})
@api_view(['POST'])
@permission_classes([permissions.IsAuthenticated, IsCreative])
@throttle_classes([ApplicationThrottle])
def submit_application(request):
    serializer = SubmitApplicationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    project = get_object_or_404(Project, pk=data['project_id'])

    application = ApplicationService.submit(
        project=project,
        creative=request.user,
        cover_letter=data['cover_letter'],
        proposed_rate=data.get('proposed_rate'),
        timeline=data.get('timeline')
    )
    return Response(ApplicationSerializer(application).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=['Applications'], summary='My applications (creative)')
class MyApplicationsView(generics.ListAPIView):
    serializer_class = MyApplicationSerializer
    permission_classes = [permissions.IsAuthenticated, IsCreative]
    pagination_class = NewestFirstCursorPagination

    def get_queryset(self):
        return ApplicationService.get_my_applications(self.request.user)


@extend_schema(tags=['Applications'], summary='Applications for my project (client)')
class ProjectApplicationsView(generics.ListAPIView):
    """
    Every application on a project, newest first. Owner only.
    """
    serializer_class = ApplicationSerializer
    permission_classes = [permissions.IsAuthenticated, IsClient]
    pagination_class = None

    def get_queryset(self):
        project = get_object_or_404(Project, pk=self.kwargs['project_id'])
        return ApplicationService.get_for_project(project, self.request.user)


@extend_schema(tags=['Applications'], summary='Accept an application (client)', request=None,
               responses={201: WorkOrderDetailSerializer})
@api_view(['POST'])
@permission_classes([permissions.IsAuthenticated, IsClient])
def accept_application(request, pk):
    """
    Accept one application. Rivals are declined, the project is assigned
    and the work order is returned.
    """
    application = get_object_or_404(Application.objects.select_related('project'), pk=pk)
    work_order = ApplicationService.accept(
        application=application,
        client=request.user,
        ip_address=get_client_ip(request)
    )
    return Response(WorkOrderDetailSerializer(work_order).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=['Applications'], summary='Decline an application (client)', request=None,
               responses=ApplicationSerializer)
@api_view(['POST'])
@permission_classes([permissions.IsAuthenticated, IsClient])
def decline_application(request, pk):
    application = get_object_or_404(Application.objects.select_related('project'), pk=pk)
    declined = ApplicationService.decline(application=application, client=request.user)
    return Response(ApplicationSerializer(declined).data)
