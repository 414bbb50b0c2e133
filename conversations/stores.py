"""
Persistence for conversations and their messages.

Stores only read and write rows; authorization and validation live in the
services.
"""

from typing import Dict, Iterable, List, Optional, Tuple

from django.db import IntegrityError, transaction
from django.db.models import Count, OuterRef, Q, Subquery

from .models import Conversation, ConversationMessage


class ConversationStore:

    def get(self, conversation_id: str) -> Optional[Conversation]:
        return Conversation._default_manager.filter(id=conversation_id).first()

    def find_by_listing_and_tenant(self, listing_id: str, tenant_id: str) -> Optional[Conversation]:
        return Conversation._default_manager.filter(listing_id=listing_id, tenant_id=tenant_id).first()

    def create(self, listing_id: str, landlord_id: str, tenant_id: str, now) -> Tuple[Conversation, bool]:
        """
        Insert a conversation, or return the row a concurrent request inserted
        for the same (listing_id, tenant_id) first.

        Returns the conversation and whether this call created it.
        """
        try:
            with transaction.atomic():
                conversation = Conversation._default_manager.create(
                    listing_id=listing_id,
                    landlord_id=landlord_id,
                    tenant_id=tenant_id,
                    created_at=now,
                    last_message_at=now,
                )
            return conversation, True
        except IntegrityError:
            existing = self.find_by_listing_and_tenant(listing_id, tenant_id)
            if existing is None:
                raise
            return existing, False

    def list_for_user(self, user_id: str) -> List[Conversation]:
        return list(
            Conversation._default_manager.filter(
                Q(landlord_id=user_id) | Q(tenant_id=user_id)
            ).order_by('-last_message_at', '-created_at', '-id')
        )

    def touch(self, conversation_id: str, last_message_at) -> None:
        # Last write wins; the column only drives inbox ordering.
        Conversation._default_manager.filter(id=conversation_id).update(last_message_at=last_message_at)


class MessageStore:

    def append(self, conversation_id: str, sender_id: str, text: str, now) -> ConversationMessage:
        return ConversationMessage._default_manager.create(
            conversation_id=conversation_id,
            sender_id=sender_id,
            text=text,
            created_at=now,
        )

    def list_for_conversation(self, conversation_id: str) -> List[ConversationMessage]:
        return list(
            ConversationMessage._default_manager.filter(
                conversation_id=conversation_id
            ).order_by('created_at', 'id')
        )

    def mark_read(self, conversation_id: str, reader_id: str) -> int:
        return ConversationMessage._default_manager.filter(
            conversation_id=conversation_id,
            read=False,
        ).exclude(sender_id=reader_id).update(read=True)

    def unread_for_user(self, user_id: str) -> int:
        return ConversationMessage._default_manager.filter(
            Q(conversation__landlord_id=user_id) | Q(conversation__tenant_id=user_id),
            read=False,
        ).exclude(sender_id=user_id).count()

    def unread_in_conversation(self, conversation_id: str, user_id: str) -> int:
        return ConversationMessage._default_manager.filter(
            conversation_id=conversation_id,
            read=False,
        ).exclude(sender_id=user_id).count()

    def unread_by_conversation(self, conversation_ids: Iterable[str], user_id: str) -> Dict[str, int]:
        """Grouped unread counts; conversations with none are absent."""
        ids = list(conversation_ids)
        if not ids:
            return {}
        rows = ConversationMessage._default_manager.filter(
            conversation_id__in=ids,
            read=False,
        ).exclude(sender_id=user_id).values('conversation_id').annotate(unread=Count('id')).order_by()
        return {row['conversation_id']: row['unread'] for row in rows}

    def latest_by_conversation(self, conversation_ids: Iterable[str]) -> Dict[str, ConversationMessage]:
        """Most recent message of each conversation that has one."""
        ids = list(conversation_ids)
        if not ids:
            return {}
        newest = ConversationMessage._default_manager.filter(
            conversation_id=OuterRef('conversation_id')
        ).order_by('-created_at', '-id').values('id')[:1]
        messages = ConversationMessage._default_manager.filter(
            conversation_id__in=ids,
            id=Subquery(newest),
        )
        return {message.conversation_id: message for message in messages}
