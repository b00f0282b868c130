import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('projects', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='WorkOrder',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('agreed_rate', models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(0)])),
                ('agreed_budget_type', models.CharField(choices=[('FIXED', 'Fixed Price'), ('HOURLY', 'Hourly'), ('MILESTONE', 'Milestone Based')], max_length=20)),
                ('status', models.CharField(choices=[('PENDING', 'Awaiting Funding'), ('IN_PROGRESS', 'In Progress'), ('DELIVERED', 'Delivered'), ('IN_REVISION', 'In Revision'), ('COMPLETED', 'Completed'), ('CANCELLED', 'Cancelled')], db_index=True, default='PENDING', max_length=20)),
                ('start_date', models.DateTimeField(blank=True, null=True)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('deadline', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('client', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='client_work_orders', to=settings.AUTH_USER_MODEL)),
                ('creative', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='creative_work_orders', to=settings.AUTH_USER_MODEL)),
                ('project', models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, related_name='work_order', to='projects.project')),
            ],
            options={
                'verbose_name': 'Work Order',
                'verbose_name_plural': 'Work Orders',
                'ordering': ['-updated_at'],
                'indexes': [
                    models.Index(fields=['client', 'status', '-updated_at'], name='workorder_client_idx'),
                    models.Index(fields=['creative', 'status', '-updated_at'], name='workorder_creative_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='WorkOrderStateLog',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('from_status', models.CharField(blank=True, max_length=20)),
                ('to_status', models.CharField(max_length=20)),
                ('reason', models.TextField(blank=True)),
                ('ip_address', models.GenericIPAddressField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('changed_by', models.ForeignKey(blank=True, help_text='User who triggered change (null for system)', null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
                ('work_order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='state_logs', to='workorders.workorder')),
            ],
            options={
                'verbose_name': 'Work Order State Log',
                'verbose_name_plural': 'Work Order State Logs',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['work_order', '-created_at'], name='workorder_log_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Escrow',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('total_amount', models.DecimalField(decimal_places=2, help_text='Fixed at creation from the project budget', max_digits=12, validators=[django.core.validators.MinValueValidator(0)])),
                ('funded_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), help_text='Amount deposited by the client', max_digits=12)),
                ('released_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), help_text='Amount released to the creative', max_digits=12)),
                ('status', models.CharField(choices=[('PENDING', 'Awaiting Funds'), ('FUNDED', 'Funded'), ('PARTIALLY_RELEASED', 'Partially Released'), ('RELEASED', 'Released to Creative'), ('REFUNDED', 'Refunded to Client')], db_index=True, default='PENDING', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('funded_at', models.DateTimeField(blank=True, null=True)),
                ('released_at', models.DateTimeField(blank=True, null=True)),
                ('refunded_at', models.DateTimeField(blank=True, null=True)),
                ('work_order', models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, related_name='escrow', to='workorders.workorder')),
            ],
            options={
                'verbose_name': 'Escrow',
                'verbose_name_plural': 'Escrows',
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('funded_amount__lte', models.F('total_amount'))), name='escrow_funded_within_total'),
                    models.CheckConstraint(condition=models.Q(('released_amount__lte', models.F('funded_amount'))), name='escrow_released_within_funded'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Milestone',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('title', models.CharField(max_length=100)),
                ('description', models.TextField(blank=True, max_length=500)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(0)])),
                ('due_date', models.DateTimeField(blank=True, null=True)),
                ('order', models.PositiveIntegerField(default=0)),
                ('status', models.CharField(choices=[('PENDING', 'Pending'), ('DELIVERED', 'Delivered'), ('IN_REVISION', 'In Revision'), ('APPROVED', 'Approved')], db_index=True, default='PENDING', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('work_order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='milestones', to='workorders.workorder')),
            ],
            options={
                'verbose_name': 'Milestone',
                'verbose_name_plural': 'Milestones',
                'ordering': ['order', 'created_at'],
                'indexes': [
                    models.Index(fields=['work_order', 'order'], name='milestone_order_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Delivery',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('message', models.TextField(max_length=2000)),
                ('attachments', models.JSONField(blank=True, default=list)),
                ('status', models.CharField(choices=[('PENDING_REVIEW', 'Pending Review'), ('APPROVED', 'Approved'), ('REVISION_REQUESTED', 'Revision Requested')], db_index=True, default='PENDING_REVIEW', max_length=20)),
                ('revision_note', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('milestone', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='deliveries', to='workorders.milestone')),
                ('work_order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='deliveries', to='workorders.workorder')),
            ],
            options={
                'verbose_name': 'Delivery',
                'verbose_name_plural': 'Deliveries',
                'ordering': ['-created_at'],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('status', 'PENDING_REVIEW')), fields=('milestone',), name='single_pending_delivery_per_milestone'),
                ],
            },
        ),
    ]
