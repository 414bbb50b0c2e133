"""
Inbox view over a user's conversations.

Joins each conversation with the listing title, the other party's name and
role, the user's unread count and a preview of the latest message. Lookups are
done in bulk per call rather than per conversation; the result shape and order
are the same either way.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from listings.directory import ListingDirectory
from users.directory import UserDirectory

from .services import ConversationService
from .stores import MessageStore

logger = logging.getLogger(__name__)

DELETED_LISTING_TITLE = 'Borttagen annons'
UNKNOWN_USER_NAME = 'Okänd användare'
UNKNOWN_USER_ROLE = 'unknown'


@dataclass(frozen=True)
class MessagePreview:
    text: str
    created_at: datetime


@dataclass(frozen=True)
class EnrichedConversation:
    id: str
    listing_id: str
    landlord_id: str
    tenant_id: str
    created_at: datetime
    last_message_at: datetime
    listing_title: str
    other_user_id: str
    other_user_name: str
    other_user_role: str
    unread_count: int
    last_message: Optional[MessagePreview]


class InboxAggregator:

    def __init__(
        self,
        conversation_service: ConversationService = None,
        messages: MessageStore = None,
        listings: ListingDirectory = None,
        users: UserDirectory = None,
    ):
        self.conversation_service = conversation_service or ConversationService()
        self.messages = messages or MessageStore()
        self.listings = listings or ListingDirectory()
        self.users = users or UserDirectory()

    def list_enriched_conversations(self, user_id: Optional[str]) -> List[EnrichedConversation]:
        conversations = self.conversation_service.list_conversations_for_user(user_id)
        if not conversations:
            return []

        conversation_ids = [c.id for c in conversations]
        listings = self.listings.get_listings({c.listing_id for c in conversations})
        users = self.users.get_users({c.other_participant(user_id) for c in conversations})
        unread = self.messages.unread_by_conversation(conversation_ids, user_id)
        latest = self.messages.latest_by_conversation(conversation_ids)

        inbox = []
        for conversation in conversations:
            other_id = conversation.other_participant(user_id)
            listing = listings.get(conversation.listing_id)
            other = users.get(other_id)
            last = latest.get(conversation.id)

            inbox.append(EnrichedConversation(
                id=conversation.id,
                listing_id=conversation.listing_id,
                landlord_id=conversation.landlord_id,
                tenant_id=conversation.tenant_id,
                created_at=conversation.created_at,
                last_message_at=conversation.last_message_at,
                listing_title=listing.title if listing else DELETED_LISTING_TITLE,
                other_user_id=other_id,
                other_user_name=other.name if other else UNKNOWN_USER_NAME,
                other_user_role=other.role if other else UNKNOWN_USER_ROLE,
                unread_count=unread.get(conversation.id, 0),
                last_message=MessagePreview(text=last.text, created_at=last.created_at) if last else None,
            ))

        # Inbox order: most recently active first
        inbox.sort(key=lambda item: (item.last_message_at, item.created_at, item.id), reverse=True)
        logger.debug(f"Built inbox of {len(inbox)} conversations for {user_id}")
        return inbox
