from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone
import conversations.models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Conversation',
            fields=[
                ('id', models.CharField(default=conversations.models.generate_conversation_id, editable=False, max_length=50, primary_key=True, serialize=False)),
                ('listing_id', models.CharField(max_length=50)),
                ('landlord_id', models.CharField(max_length=100)),
                ('tenant_id', models.CharField(max_length=100)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ('last_message_at', models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                'db_table': 'conversations_conversation',
                'indexes': [
                    models.Index(fields=['landlord_id', '-last_message_at'], name='conv_landlord_recent_idx'),
                    models.Index(fields=['tenant_id', '-last_message_at'], name='conv_tenant_recent_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('listing_id', 'tenant_id'), name='unique_conversation_per_listing_tenant'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ConversationMessage',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('sender_id', models.CharField(max_length=100)),
                ('text', models.TextField()),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ('read', models.BooleanField(default=False)),
                ('conversation', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='messages', to='conversations.conversation')),
            ],
            options={
                'db_table': 'conversations_conversationmessage',
                'ordering': ['created_at', 'id'],
                'indexes': [
                    models.Index(fields=['conversation', 'created_at'], name='msg_conversation_created_idx'),
                    models.Index(fields=['conversation', 'read'], name='msg_conversation_read_idx'),
                ],
            },
        ),
    ]
