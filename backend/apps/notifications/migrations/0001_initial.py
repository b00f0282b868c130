import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Notification',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('type', models.CharField(choices=[('WORK_REQUEST', 'Work Request'), ('APPLICATION', 'Application'), ('WORK_ORDER_UPDATE', 'Work Order Update'), ('DELIVERY', 'Delivery'), ('MILESTONE_UPDATE', 'Milestone Update'), ('ESCROW_UPDATE', 'Escrow Update')], db_index=True, max_length=30)),
                ('entity_id', models.UUIDField(blank=True, null=True)),
                ('entity_type', models.CharField(blank=True, choices=[('project', 'Project'), ('workorder', 'Work Order')], max_length=20)),
                ('read', models.BooleanField(db_index=True, default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('actor', models.ForeignKey(help_text='User whose action triggered the notification', on_delete=django.db.models.deletion.CASCADE, related_name='notifications_sent', to=settings.AUTH_USER_MODEL)),
                ('user', models.ForeignKey(help_text='Recipient', on_delete=django.db.models.deletion.CASCADE, related_name='notifications', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Notification',
                'verbose_name_plural': 'Notifications',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['user', 'read', '-created_at'], name='notification_inbox_idx'),
                ],
            },
        ),
    ]
