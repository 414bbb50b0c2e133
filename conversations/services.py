"""
Service layer for conversations and messages.

Every conversation- or message-scoped operation goes through
require_participant(): only the landlord and the tenant of a conversation may
read or post to it.
"""

import logging
from typing import List, Optional, Tuple

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from listings.directory import ListingDirectory
from marketplace.exceptions import Forbidden, InvalidArgument, NotFound, RateLimited, Unauthenticated
from utils.rate_limiter import NullRateLimiter, RateLimiter

from .models import CONVERSATION_ID_RE, SYSTEM_LANDLORD_ID, Conversation, ConversationMessage
from .stores import ConversationStore, MessageStore

logger = logging.getLogger(__name__)

DEFAULT_MESSAGE_MAX_LENGTH = 2000


def require_caller(user_id: Optional[str]) -> str:
    if not user_id:
        raise Unauthenticated()
    return user_id


def authorize_participant(conversation: Conversation, user_id: Optional[str]) -> bool:
    return bool(user_id) and user_id in (conversation.landlord_id, conversation.tenant_id)


def require_participant(conversation: Conversation, user_id: Optional[str]) -> None:
    if not authorize_participant(conversation, user_id):
        logger.warning(f"User {user_id} denied access to conversation {conversation.id}")
        raise Forbidden()


class ConversationService:
    """Creates, finds and lists conversations."""

    def __init__(self, conversations: ConversationStore = None, listings: ListingDirectory = None, clock=timezone.now):
        self.conversations = conversations or ConversationStore()
        self.listings = listings or ListingDirectory()
        self.clock = clock

    def create_or_get_conversation(self, listing_id: Optional[str], requester_id: Optional[str]) -> Tuple[Conversation, bool]:
        """
        Return the requester's conversation about a listing, creating it on
        first contact.

        Returns:
            (conversation, created). An existing conversation is returned
            unchanged and nothing is written.

        Raises:
            Unauthenticated: No caller identity
            InvalidArgument: Missing listing id
            NotFound: The listing does not exist
        """
        requester_id = require_caller(requester_id)
        if not listing_id or not isinstance(listing_id, str):
            raise InvalidArgument("listing_id is required")

        listing = self.listings.get_listing(listing_id)
        if listing is None:
            raise NotFound("Listing not found")

        existing = self.conversations.find_by_listing_and_tenant(listing_id, requester_id)
        if existing is not None:
            return existing, False

        landlord_id = listing.owner_id or SYSTEM_LANDLORD_ID
        conversation, created = self.conversations.create(listing_id, landlord_id, requester_id, self.clock())
        if created:
            logger.info(f"Created conversation {conversation.id} for listing {listing_id} between {landlord_id} and {requester_id}")
        return conversation, created

    def list_conversations_for_user(self, user_id: Optional[str]) -> List[Conversation]:
        """All conversations the user takes part in, most recently active first."""
        return self.conversations.list_for_user(require_caller(user_id))

    def get_conversation(self, conversation_id: str) -> Conversation:
        if not conversation_id or not CONVERSATION_ID_RE.match(conversation_id):
            raise InvalidArgument("Invalid conversation id")
        conversation = self.conversations.get(conversation_id)
        if conversation is None:
            raise NotFound("Conversation not found")
        return conversation

    def get_conversation_for_participant(self, conversation_id: str, user_id: Optional[str]) -> Conversation:
        user_id = require_caller(user_id)
        conversation = self.get_conversation(conversation_id)
        require_participant(conversation, user_id)
        return conversation


class MessageService:
    """Appends messages and keeps read state and unread counts."""

    def __init__(
        self,
        conversation_service: ConversationService = None,
        messages: MessageStore = None,
        rate_limiter: RateLimiter = None,
        clock=timezone.now,
        max_length: int = None,
    ):
        self.conversation_service = conversation_service or ConversationService(clock=clock)
        self.messages = messages or MessageStore()
        self.rate_limiter = rate_limiter or NullRateLimiter()
        self.clock = clock
        self.max_length = max_length or getattr(settings, 'MESSAGE_MAX_LENGTH', DEFAULT_MESSAGE_MAX_LENGTH)

    def clean_text(self, text) -> str:
        if not isinstance(text, str):
            raise InvalidArgument("Message text is required")
        text = text.strip()
        if not text:
            raise InvalidArgument("Message text cannot be empty")
        if len(text) > self.max_length:
            raise InvalidArgument(f"Message text cannot exceed {self.max_length} characters")
        return text

    def append_message(self, conversation_id: str, sender_id: Optional[str], text) -> ConversationMessage:
        """
        Append a message and bump the conversation's last_message_at.

        The message and the timestamp update are written in one transaction;
        on any error nothing is written.
        """
        conversation = self.conversation_service.get_conversation_for_participant(conversation_id, sender_id)
        text = self.clean_text(text)

        result = self.rate_limiter.check(sender_id)
        if result.limited:
            raise RateLimited("Too many messages, try again later", retry_after=result.retry_after)

        with transaction.atomic():
            message = self.messages.append(conversation.id, sender_id, text, self.clock())
            self.conversation_service.conversations.touch(conversation.id, message.created_at)

        logger.debug(f"Appended message {message.id} to conversation {conversation.id}")
        return message

    def list_messages(self, conversation_id: str, reader_id: Optional[str]) -> List[ConversationMessage]:
        """All messages of the conversation, oldest first."""
        conversation = self.conversation_service.get_conversation_for_participant(conversation_id, reader_id)
        return self.messages.list_for_conversation(conversation.id)

    def mark_read(self, conversation_id: str, reader_id: Optional[str]) -> int:
        """Flip read on the counterpart's unread messages. Returns how many changed."""
        conversation = self.conversation_service.get_conversation_for_participant(conversation_id, reader_id)
        updated = self.messages.mark_read(conversation.id, reader_id)
        if updated:
            logger.debug(f"Marked {updated} messages read in {conversation.id} for {reader_id}")
        return updated

    def open_conversation(self, conversation_id: str, reader_id: Optional[str]) -> List[ConversationMessage]:
        """Viewing a thread marks the counterpart's messages read, then lists them."""
        conversation = self.conversation_service.get_conversation_for_participant(conversation_id, reader_id)
        self.messages.mark_read(conversation.id, reader_id)
        return self.messages.list_for_conversation(conversation.id)

    def unread_count_for_user(self, user_id: Optional[str]) -> int:
        return self.messages.unread_for_user(require_caller(user_id))

    def per_conversation_unread_count(self, conversation: Conversation, user_id: Optional[str]) -> int:
        require_participant(conversation, require_caller(user_id))
        return self.messages.unread_in_conversation(conversation.id, user_id)
