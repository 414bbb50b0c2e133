import re
import uuid

from django.db import models
from django.utils import timezone

# Landlord used when a listing has no owning account
SYSTEM_LANDLORD_ID = 'system'

CONVERSATION_ID_RE = re.compile(r'^[a-zA-Z0-9_-]{1,50}$')


def generate_conversation_id():
    return f"conv_{uuid.uuid4().hex}"


class Conversation(models.Model):
    """
    The thread between a listing's landlord and one tenant about that listing.

    At most one conversation exists per (listing_id, tenant_id). landlord_id is
    fixed when the conversation is created.
    """
    id = models.CharField(max_length=50, primary_key=True, default=generate_conversation_id, editable=False)
    listing_id = models.CharField(max_length=50)
    landlord_id = models.CharField(max_length=100)
    tenant_id = models.CharField(max_length=100)
    created_at = models.DateTimeField(default=timezone.now, editable=False)
    last_message_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'conversations_conversation'
        constraints = [
            models.UniqueConstraint(fields=['listing_id', 'tenant_id'], name='unique_conversation_per_listing_tenant'),
        ]
        indexes = [
            models.Index(fields=['landlord_id', '-last_message_at'], name='conv_landlord_recent_idx'),
            models.Index(fields=['tenant_id', '-last_message_at'], name='conv_tenant_recent_idx'),
        ]

    def __str__(self):
        return f"Conversation {self.id}"

    @property
    def participants(self):
        return (self.landlord_id, self.tenant_id)

    def other_participant(self, user_id):
        return self.tenant_id if user_id == self.landlord_id else self.landlord_id


class ConversationMessage(models.Model):
    conversation = models.ForeignKey(Conversation, on_delete=models.CASCADE, related_name='messages')
    sender_id = models.CharField(max_length=100)
    text = models.TextField()
    created_at = models.DateTimeField(default=timezone.now, editable=False)
    read = models.BooleanField(default=False)

    class Meta:
        db_table = 'conversations_conversationmessage'
        ordering = ['created_at', 'id']
        indexes = [
            models.Index(fields=['conversation', 'created_at'], name='msg_conversation_created_idx'),
            models.Index(fields=['conversation', 'read'], name='msg_conversation_read_idx'),
        ]

    def __str__(self):
        return f"{self.sender_id}: {self.text[:50]}..."
