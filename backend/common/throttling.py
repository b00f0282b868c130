"""
Custom throttle classes for write-heavy marketplace endpoints.
"""
from rest_framework.throttling import UserRateThrottle


class ApplicationThrottle(UserRateThrottle):
    """
    Throttle for application submission.
    Keeps creatives from spraying proposals across every open gig.
    Rate comes from DEFAULT_THROTTLE_RATES['applications'].
    """
    scope = 'applications'
