"""
Work order admin configuration.
Read-only: every change must go through the services.
"""
from django.contrib import admin
from apps.workorders.models import WorkOrder, WorkOrderStateLog, Escrow, Milestone, Delivery


class WorkOrderStateLogInline(admin.TabularInline):
    model = WorkOrderStateLog
    extra = 0
    readonly_fields = ['from_status', 'to_status', 'changed_by', 'reason', 'ip_address', 'created_at']
    can_delete = False


class MilestoneInline(admin.TabularInline):
    model = Milestone
    extra = 0
    readonly_fields = ['title', 'amount', 'order', 'status', 'due_date']
    can_delete = False


class DeliveryInline(admin.TabularInline):
    model = Delivery
    extra = 0
    readonly_fields = ['milestone', 'message', 'attachments', 'status', 'revision_note', 'created_at']
    can_delete = False


class ReadOnlyAdmin(admin.ModelAdmin):

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(WorkOrder)
class WorkOrderAdmin(ReadOnlyAdmin):
    list_display = ['id', 'client', 'creative', 'status', 'agreed_rate', 'agreed_budget_type', 'updated_at']
    list_filter = ['status', 'agreed_budget_type']
    search_fields = ['id', 'client__email', 'creative__email', 'project__title']
    readonly_fields = [
        'id', 'project', 'client', 'creative', 'agreed_rate', 'agreed_budget_type',
        'status', 'start_date', 'completed_at', 'deadline', 'created_at', 'updated_at'
    ]
    inlines = [MilestoneInline, DeliveryInline, WorkOrderStateLogInline]


@admin.register(Escrow)
class EscrowAdmin(ReadOnlyAdmin):
    list_display = ['id', 'work_order', 'status', 'total_amount', 'funded_amount', 'released_amount']
    list_filter = ['status']
    search_fields = ['work_order__id']
    readonly_fields = [
        'id', 'work_order', 'total_amount', 'funded_amount', 'released_amount',
        'status', 'created_at', 'funded_at', 'released_at', 'refunded_at'
    ]
