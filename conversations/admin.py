from django.contrib import admin
from .models import Conversation, ConversationMessage


@admin.register(Conversation)
class ConversationAdmin(admin.ModelAdmin):
    list_display = ['id', 'listing_id', 'landlord_id', 'tenant_id', 'created_at', 'last_message_at']
    list_filter = ['created_at']
    search_fields = ['id', 'listing_id', 'landlord_id', 'tenant_id']
    readonly_fields = ['id', 'listing_id', 'landlord_id', 'tenant_id', 'created_at', 'last_message_at']


@admin.register(ConversationMessage)
class ConversationMessageAdmin(admin.ModelAdmin):
    list_display = ['id', 'conversation', 'sender_id', 'text_preview', 'created_at', 'read']
    list_filter = ['read', 'created_at']
    search_fields = ['text', 'sender_id', 'conversation__id']
    readonly_fields = ['conversation', 'sender_id', 'text', 'created_at']

    @admin.display(description='Text Preview')
    def text_preview(self, obj):
        return obj.text[:50] + "..." if len(obj.text) > 50 else obj.text
