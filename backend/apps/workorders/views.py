"""
Work order views and API endpoints.
Views translate HTTP into service calls; all rules live in the services
and their exceptions are rendered by common.exceptions.api_exception_handler.
"""
from rest_framework import status, generics, permissions
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from django.db.models import Prefetch
from django.shortcuts import get_object_or_404
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiResponse
from apps.accounts.permissions import IsClient, IsCreative
from apps.projects.models import Project
from apps.projects.serializers import ProjectSerializer
from apps.workorders.models import WorkOrder, Milestone, Delivery
from apps.workorders.serializers import (
    WorkOrderListSerializer,
    WorkOrderDetailSerializer,
    EscrowSerializer,
    MilestoneSerializer,
    DeliverySerializer,
    AddMilestoneSerializer,
    UpdateMilestoneSerializer,
    ReorderMilestonesSerializer,
    SubmitDeliverySerializer,
    RequestRevisionSerializer,
    CancelWorkOrderSerializer
)
from apps.workorders.services.workorder_service import WorkOrderService
from apps.workorders.services.milestone_service import MilestoneService
from apps.workorders.services.direct_request_service import DirectRequestService
from common.pagination import WorkOrderCursorPagination
from common.utils import get_client_ip

SUCCESS_RESPONSE = OpenApiResponse(description='{"success": true}')


@extend_schema(
    tags=['Work Orders'],
    summary='List my work orders',
    parameters=[OpenApiParameter('status', str, description='Filter by work order status')]
)
class WorkOrderListView(generics.ListAPIView):
    """
    Work orders where the user is client or creative.
    """
    serializer_class = WorkOrderListSerializer
    permission_classes = [permissions.IsAuthenticated]
    pagination_class = WorkOrderCursorPagination

    def get_queryset(self):
        return WorkOrderService.get_my_work_orders(
            self.request.user,
            status=self.request.query_params.get('status')
        )


@extend_schema(tags=['Work Orders'], summary='Work order details')
class WorkOrderDetailView(generics.RetrieveAPIView):
    """
    Work order with project, escrow, milestones, deliveries and history.
    Only participants can view.
    """
    serializer_class = WorkOrderDetailSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        return WorkOrder.objects.select_related(
            'project', 'escrow',
            'client', 'client__profile',
            'creative', 'creative__profile'
        ).prefetch_related(
            'milestones',
            Prefetch('deliveries', queryset=Delivery.objects.order_by('-created_at')),
            'state_logs'
        )

    def get_object(self):
        work_order = get_object_or_404(self.get_queryset(), pk=self.kwargs['pk'])
        return WorkOrderService.get_by_id(work_order, self.request.user)


@extend_schema(tags=['Work Orders'], summary='Accept a direct request', request=None,
               responses={201: WorkOrderDetailSerializer})
@api_view(['POST'])
@permission_classes([permissions.IsAuthenticated, IsCreative])
def accept_direct_request(request, project_id):
    project = get_object_or_404(Project, pk=project_id)
    work_order = DirectRequestService.accept_direct_request(
        project=project,
        creative=request.user,
        ip_address=get_client_ip(request)
    )
    return Response(WorkOrderDetailSerializer(work_order).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=['Work Orders'], summary='Decline a direct request', request=None,
               responses=ProjectSerializer)
@api_view(['POST'])
@permission_classes([permissions.IsAuthenticated, IsCreative])
def decline_direct_request(request, project_id):
    project = get_object_or_404(Project, pk=project_id)
    declined = DirectRequestService.decline_direct_request(project=project, creative=request.user)
    return Response(ProjectSerializer(declined).data)


@extend_schema(tags=['Work Orders'], summary='Fund escrow (client)', request=None,
               responses=EscrowSerializer)
@api_view(['POST'])
@permission_classes([permissions.IsAuthenticated, IsClient])
def fund_escrow(request, pk):
    work_order = get_object_or_404(WorkOrder, pk=pk)
    escrow = WorkOrderService.fund_escrow(work_order=work_order, client=request.user)
    return Response(EscrowSerializer(escrow).data)


@extend_schema(tags=['Work Orders'], summary='Start work (creative)', request=None,
               responses=WorkOrderDetailSerializer)
@api_view(['POST'])
@permission_classes([permissions.IsAuthenticated, IsCreative])
def start_work_order(request, pk):
    """
    Creative starts working.
    Transitions: PENDING → IN_PROGRESS
    """
    work_order = get_object_or_404(WorkOrder, pk=pk)
    updated = WorkOrderService.start(
        work_order=work_order,
        creative=request.user,
        ip_address=get_client_ip(request)
    )
    return Response(WorkOrderDetailSerializer(updated).data)


@extend_schema(tags=['Work Orders'], summary='Cancel a work order', request=CancelWorkOrderSerializer,
               responses=SUCCESS_RESPONSE)
@api_view(['POST'])
@permission_classes([permissions.IsAuthenticated])
def cancel_work_order(request, pk):
    """
    Either participant cancels. Funded escrow is refunded.
    """
    work_order = get_object_or_404(WorkOrder, pk=pk)

    serializer = CancelWorkOrderSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    WorkOrderService.cancel(
        work_order=work_order,
        user=request.user,
        reason=serializer.validated_data['reason'],
        ip_address=get_client_ip(request)
    )
    return Response({'success': True})


# ============================
# Milestones
# ============================

@extend_schema(tags=['Milestones'], summary='Add a milestone', request=AddMilestoneSerializer,
               responses={201: MilestoneSerializer})
@api_view(['POST'])
@permission_classes([permissions.IsAuthenticated])
def add_milestone(request, pk):
    work_order = get_object_or_404(WorkOrder, pk=pk)

    serializer = AddMilestoneSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    milestone = MilestoneService.add_milestone(
        work_order=work_order,
        user=request.user,
        **serializer.validated_data
    )
    return Response(MilestoneSerializer(milestone).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=['Milestones'], summary='Update a milestone', request=UpdateMilestoneSerializer,
               responses=MilestoneSerializer)
@api_view(['PATCH'])
@permission_classes([permissions.IsAuthenticated])
def update_milestone(request, milestone_id):
    milestone = get_object_or_404(Milestone.objects.select_related('work_order'), pk=milestone_id)

    serializer = UpdateMilestoneSerializer(data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)

    updated = MilestoneService.update_milestone(
        milestone,
        request.user,
        **serializer.validated_data
    )
    return Response(MilestoneSerializer(updated).data)


@extend_schema(tags=['Milestones'], summary='Reorder milestones', request=ReorderMilestonesSerializer,
               responses=MilestoneSerializer(many=True))
@api_view(['POST'])
@permission_classes([permissions.IsAuthenticated])
def reorder_milestones(request, pk):
    work_order = get_object_or_404(WorkOrder, pk=pk)

    serializer = ReorderMilestonesSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    milestones = MilestoneService.reorder_milestones(
        work_order=work_order,
        user=request.user,
        milestone_ids=serializer.validated_data['milestone_ids']
    )
    return Response(MilestoneSerializer(milestones, many=True).data)


# ============================
# Deliveries
# ============================

@extend_schema(tags=['Deliveries'], summary='Submit a delivery (creative)', request=SubmitDeliverySerializer,
               responses={201: DeliverySerializer})
@api_view(['POST'])
@permission_classes([permissions.IsAuthenticated, IsCreative])
def submit_delivery(request, pk):
    """
    Creative submits work for a milestone or for the whole order.
    Transitions: IN_PROGRESS / IN_REVISION → DELIVERED
    """
    work_order = get_object_or_404(WorkOrder, pk=pk)

    serializer = SubmitDeliverySerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    milestone = None
    if data.get('milestone_id'):
        milestone = get_object_or_404(Milestone, pk=data['milestone_id'])

    delivery = WorkOrderService.submit_delivery(
        work_order=work_order,
        creative=request.user,
        message=data['message'],
        attachments=data['attachments'],
        milestone=milestone,
        ip_address=get_client_ip(request)
    )
    return Response(DeliverySerializer(delivery).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=['Deliveries'], summary='Approve a delivery (client)', request=None,
               responses=SUCCESS_RESPONSE)
@api_view(['POST'])
@permission_classes([permissions.IsAuthenticated, IsClient])
def approve_delivery(request, delivery_id):
    delivery = get_object_or_404(Delivery.objects.select_related('work_order'), pk=delivery_id)
    WorkOrderService.approve_delivery(
        delivery=delivery,
        client=request.user,
        ip_address=get_client_ip(request)
    )
    return Response({'success': True})


@extend_schema(tags=['Deliveries'], summary='Request a revision (client)', request=RequestRevisionSerializer,
               responses=SUCCESS_RESPONSE)
@api_view(['POST'])
@permission_classes([permissions.IsAuthenticated, IsClient])
def request_revision(request, delivery_id):
    delivery = get_object_or_404(Delivery.objects.select_related('work_order'), pk=delivery_id)

    serializer = RequestRevisionSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    WorkOrderService.request_revision(
        delivery=delivery,
        client=request.user,
        revision_note=serializer.validated_data['revision_note'],
        ip_address=get_client_ip(request)
    )
    return Response({'success': True})
