from rest_framework import serializers
from .models import Conversation, ConversationMessage


class ConversationMessageSerializer(serializers.ModelSerializer):
    conversation_id = serializers.CharField(read_only=True)

    class Meta:
        model = ConversationMessage
        fields = ['id', 'conversation_id', 'sender_id', 'text', 'read', 'created_at']
        read_only_fields = fields


class ConversationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Conversation
        fields = ['id', 'listing_id', 'landlord_id', 'tenant_id', 'created_at', 'last_message_at']
        read_only_fields = fields


class ConversationCreateSerializer(serializers.Serializer):
    listing_id = serializers.CharField(max_length=50, required=False, allow_blank=True, trim_whitespace=True)
    # Spelling sent by the web client
    listingId = serializers.CharField(max_length=50, required=False, allow_blank=True, trim_whitespace=True)

    def validate(self, attrs):
        return {'listing_id': attrs.get('listing_id') or attrs.get('listingId')}


class MessageCreateSerializer(serializers.Serializer):
    # Length and emptiness are checked by MessageService so the rule lives in one place
    text = serializers.CharField(required=False, allow_blank=True, allow_null=True, trim_whitespace=False)


class MessagePreviewSerializer(serializers.Serializer):
    text = serializers.CharField()
    created_at = serializers.DateTimeField()


class EnrichedConversationSerializer(serializers.Serializer):
    """Inbox row: conversation plus listing/user metadata and unread count"""
    id = serializers.CharField()
    listing_id = serializers.CharField()
    landlord_id = serializers.CharField()
    tenant_id = serializers.CharField()
    created_at = serializers.DateTimeField()
    last_message_at = serializers.DateTimeField()
    listing_title = serializers.CharField()
    other_user_id = serializers.CharField()
    other_user_name = serializers.CharField()
    other_user_role = serializers.CharField()
    unread_count = serializers.IntegerField()
    last_message = MessagePreviewSerializer(allow_null=True)
