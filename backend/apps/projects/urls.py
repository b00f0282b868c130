"""
Project URL patterns.
"""
from django.urls import path
from apps.projects import views

app_name = 'projects'

urlpatterns = [
    path('', views.ProjectListCreateView.as_view(), name='list-create'),
    path('<uuid:pk>/', views.ProjectDetailView.as_view(), name='detail'),
    path('<uuid:pk>/cancel/', views.cancel_project, name='cancel'),
]
