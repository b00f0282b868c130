"""
Notification views.
"""
from rest_framework import generics, permissions
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiResponse
from apps.notifications.serializers import NotificationSerializer
from apps.notifications.services.notification_service import NotificationService
from common.pagination import NotificationCursorPagination


@extend_schema(tags=['Notifications'], summary='List my notifications')
class NotificationListView(generics.ListAPIView):
    serializer_class = NotificationSerializer
    permission_classes = [permissions.IsAuthenticated]
    pagination_class = NotificationCursorPagination

    def get_queryset(self):
        return NotificationService.get_for_user(self.request.user)


@extend_schema(
    tags=['Notifications'],
    summary='Unread notification count',
    responses={200: OpenApiResponse(description='{"count": <int>}')}
)
@api_view(['GET'])
@permission_classes([permissions.IsAuthenticated])
def unread_count(request):
    return Response({'count': NotificationService.unread_count(request.user)})


@extend_schema(
    tags=['Notifications'],
    summary='Mark a notification as read',
    request=None,
    responses={200: OpenApiResponse(description='{"success": true}')}
)
@api_view(['POST'])
@permission_classes([permissions.IsAuthenticated])
def mark_as_read(request, pk):
    NotificationService.mark_as_read(request.user, pk)
    return Response({'success': True})


@extend_schema(
    tags=['Notifications'],
    summary='Mark all notifications as read',
    request=None,
    responses={200: OpenApiResponse(description='{"success": true}')}
)
@api_view(['POST'])
@permission_classes([permissions.IsAuthenticated])
def mark_all_as_read(request):
    NotificationService.mark_all_as_read(request.user)
    return Response({'success': True})
