from rest_framework.permissions import BasePermission


class IsClient(BasePermission):
    """
    Permission check for clients (the side that posts and pays for gigs).
    """
    message = "Only clients can perform this action."

    def has_permission(self, request, view):
        return (
            request.user.is_authenticated and
            request.user.is_active and
            request.user.is_client
        )


class IsCreative(BasePermission):
    """
    Permission check for creatives (the side that applies and delivers).
    """
    message = "Only creatives can perform this action."

    def has_permission(self, request, view):
        return (
            request.user.is_authenticated and
            request.user.is_active and
            request.user.is_creative
        )
