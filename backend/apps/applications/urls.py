"""
Application URL patterns.
"""
from django.urls import path
from apps.applications import views

app_name = 'applications'

urlpatterns = [
    path('', views.submit_application, name='submit'),
    path('mine/', views.MyApplicationsView.as_view(), name='mine'),
    path('project/<uuid:project_id>/', views.ProjectApplicationsView.as_view(), name='for-project'),
    path('<uuid:pk>/accept/', views.accept_application, name='accept'),
    path('<uuid:pk>/decline/', views.decline_application, name='decline'),
]
