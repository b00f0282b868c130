"""
Work order URL patterns.
"""
from django.urls import path
from apps.workorders import views

app_name = 'workorders'

urlpatterns = [
    path('', views.WorkOrderListView.as_view(), name='list'),
    path('<uuid:pk>/', views.WorkOrderDetailView.as_view(), name='detail'),

    # Direct requests
    path('direct-requests/<uuid:project_id>/accept/', views.accept_direct_request, name='direct-accept'),
    path('direct-requests/<uuid:project_id>/decline/', views.decline_direct_request, name='direct-decline'),

    # State transitions
    path('<uuid:pk>/fund-escrow/', views.fund_escrow, name='fund-escrow'),
    path('<uuid:pk>/start/', views.start_work_order, name='start'),
    path('<uuid:pk>/cancel/', views.cancel_work_order, name='cancel'),

    # Milestones
    path('<uuid:pk>/milestones/', views.add_milestone, name='milestone-add'),
    path('<uuid:pk>/milestones/reorder/', views.reorder_milestones, name='milestone-reorder'),
    path('milestones/<uuid:milestone_id>/', views.update_milestone, name='milestone-update'),

    # Deliveries
    path('<uuid:pk>/deliveries/', views.submit_delivery, name='delivery-submit'),
    path('deliveries/<uuid:delivery_id>/approve/', views.approve_delivery, name='delivery-approve'),
    path('deliveries/<uuid:delivery_id>/request-revision/', views.request_revision, name='delivery-revision'),
]
