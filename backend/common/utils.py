"""
Request helpers shared by views.
"""


def get_client_ip(request):
    """
    Client IP address for audit rows.
    Takes the first hop of X-Forwarded-For when behind a proxy.
    """
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        return x_forwarded_for.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR')
