"""
Cursor pagination used by list endpoints (newest first).
"""
from django.conf import settings
from rest_framework.pagination import CursorPagination


class NewestFirstCursorPagination(CursorPagination):
    page_size = settings.GIG_LIMITS['GIGS_PAGE_SIZE']
    page_size_query_param = 'limit'
    max_page_size = settings.GIG_LIMITS['MAX_PAGE_SIZE']
    ordering = '-created_at'


class WorkOrderCursorPagination(NewestFirstCursorPagination):
    page_size = settings.GIG_LIMITS['WORK_ORDERS_PAGE_SIZE']
    ordering = '-updated_at'


class NotificationCursorPagination(NewestFirstCursorPagination):
    page_size = settings.GIG_LIMITS['NOTIFICATION_PAGE_SIZE']
