"""
Notification URL patterns.
"""
from django.urls import path
from apps.notifications import views

app_name = 'notifications'

urlpatterns = [
    path('', views.NotificationListView.as_view(), name='list'),
    path('unread-count/', views.unread_count, name='unread-count'),
    path('read-all/', views.mark_all_as_read, name='read-all'),
    path('<uuid:pk>/read/', views.mark_as_read, name='read'),
]
