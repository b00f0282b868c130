"""
Work order serializers.
Handles API input/output for work orders, escrow, milestones and deliveries.
"""
from django.conf import settings
from rest_framework import serializers
from apps.accounts.serializers import UserSummarySerializer
from apps.workorders.models import WorkOrder, WorkOrderStateLog, Escrow, Milestone, Delivery

LIMITS = settings.GIG_LIMITS


class WorkOrderStateLogSerializer(serializers.ModelSerializer):
    """Serializer for work order state change logs."""
    changed_by = serializers.UUIDField(source='changed_by_id', read_only=True)

    class Meta:
        model = WorkOrderStateLog
        fields = ['id', 'from_status', 'to_status', 'changed_by', 'reason', 'created_at']
        read_only_fields = fields


class EscrowSerializer(serializers.ModelSerializer):
    """Serializer for escrow ledger details."""
    held_balance = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = Escrow
        fields = [
            'id', 'total_amount', 'funded_amount', 'released_amount',
            'held_balance', 'status', 'funded_at', 'released_at', 'refunded_at'
        ]
        read_only_fields = fields


class MilestoneSerializer(serializers.ModelSerializer):

    class Meta:
        model = Milestone
        fields = [
            'id', 'work_order', 'title', 'description', 'amount',
            'due_date', 'order', 'status', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class DeliverySerializer(serializers.ModelSerializer):

    class Meta:
        model = Delivery
        fields = [
            'id', 'work_order', 'milestone', 'message', 'attachments',
            'status', 'revision_note', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class ProjectSummarySerializer(serializers.Serializer):
    id = serializers.UUIDField(read_only=True)
    title = serializers.CharField(read_only=True)
    budget_type = serializers.CharField(read_only=True)
    budget_min = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    budget_max = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)


class WorkOrderListSerializer(serializers.ModelSerializer):
    """Serializer for the work order list view."""
    project = ProjectSummarySerializer(read_only=True)
    client = UserSummarySerializer(read_only=True)
    creative = UserSummarySerializer(read_only=True)
    escrow_status = serializers.CharField(source='escrow.status', read_only=True, default=None)
    milestone_count = serializers.IntegerField(read_only=True, default=0)
    delivery_count = serializers.IntegerField(read_only=True, default=0)

    class Meta:
        model = WorkOrder
        fields = [
            'id', 'project', 'client', 'creative', 'agreed_rate',
            'agreed_budget_type', 'status', 'escrow_status',
            'milestone_count', 'delivery_count', 'deadline',
            'created_at', 'updated_at'
        ]
        read_only_fields = fields


class WorkOrderDetailSerializer(serializers.ModelSerializer):
    """Serializer for the detailed work order view."""
    project = ProjectSummarySerializer(read_only=True)
    client = UserSummarySerializer(read_only=True)
    creative = UserSummarySerializer(read_only=True)
    escrow = EscrowSerializer(read_only=True)
    milestones = MilestoneSerializer(many=True, read_only=True)
    deliveries = DeliverySerializer(many=True, read_only=True)
    state_logs = WorkOrderStateLogSerializer(many=True, read_only=True)

    class Meta:
        model = WorkOrder
        fields = [
            'id', 'project', 'client', 'creative', 'agreed_rate',
            'agreed_budget_type', 'status', 'start_date', 'completed_at',
            'deadline', 'created_at', 'updated_at',
            'escrow', 'milestones', 'deliveries', 'state_logs'
        ]
        read_only_fields = fields


class AddMilestoneSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=LIMITS['MILESTONE_TITLE_MAX'])
    description = serializers.CharField(
        max_length=LIMITS['MILESTONE_DESCRIPTION_MAX'],
        required=False,
        allow_blank=True,
        default=''
    )
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    due_date = serializers.DateTimeField(required=False, allow_null=True)


class UpdateMilestoneSerializer(AddMilestoneSerializer):
    """All fields optional; only the supplied ones are changed."""
    title = serializers.CharField(max_length=LIMITS['MILESTONE_TITLE_MAX'], required=False)
    description = serializers.CharField(
        max_length=LIMITS['MILESTONE_DESCRIPTION_MAX'],
        required=False,
        allow_blank=True
    )
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("Nothing to update")
        return attrs


class ReorderMilestonesSerializer(serializers.Serializer):
    milestone_ids = serializers.ListField(
        child=serializers.UUIDField(),
        allow_empty=False,
        help_text="Milestone ids in their new order"
    )


class SubmitDeliverySerializer(serializers.Serializer):
    milestone_id = serializers.UUIDField(required=False, allow_null=True)
    message = serializers.CharField(max_length=LIMITS['DELIVERY_MESSAGE_MAX'])
    attachments = serializers.ListField(
        child=serializers.URLField(),
        required=False,
        default=list,
        max_length=10,
        help_text="Links to delivered files"
    )


class RequestRevisionSerializer(serializers.Serializer):
    revision_note = serializers.CharField(max_length=LIMITS['DELIVERY_MESSAGE_MAX'])


class CancelWorkOrderSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')
