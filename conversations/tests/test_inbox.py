import datetime
from unittest.mock import MagicMock

from django.test import TestCase
from django.utils import timezone

from conversations.inbox import (
    DELETED_LISTING_TITLE,
    UNKNOWN_USER_NAME,
    UNKNOWN_USER_ROLE,
    InboxAggregator,
)
from conversations.models import Conversation, ConversationMessage
from conversations.serializers import EnrichedConversationSerializer
from listings.directory import ListingRef
from listings.models import Listing
from marketplace.exceptions import Unauthenticated
from users.directory import UserRef
from users.models import User


class InboxAggregatorTest(TestCase):
    def setUp(self):
        self.now = timezone.now()
        User.objects.create(user_id="tenant-1", user_name="Tove Tenant", role=User.ROLE_TENANT)
        User.objects.create(user_id="owner-1", user_name="Olle Owner", role=User.ROLE_LANDLORD)
        User.objects.create(user_id="agent-1", user_name="Agnes Agent", role=User.ROLE_AGENT)
        Listing.objects.create(id="lst_office", owner_id="owner-1", title="Kontor i Malmö")
        Listing.objects.create(id="lst_shop", owner_id="agent-1", title="Butik i Lund")

        self.office = Conversation.objects.create(
            listing_id="lst_office", landlord_id="owner-1", tenant_id="tenant-1",
            created_at=self.now, last_message_at=self.now,
        )
        self.shop = Conversation.objects.create(
            listing_id="lst_shop", landlord_id="agent-1", tenant_id="tenant-1",
            created_at=self.now, last_message_at=self.now + datetime.timedelta(minutes=5),
        )
        self.aggregator = InboxAggregator()

    def _message(self, conversation, sender_id, text, minutes, read=False):
        return ConversationMessage.objects.create(
            conversation=conversation,
            sender_id=sender_id,
            text=text,
            created_at=self.now + datetime.timedelta(minutes=minutes),
            read=read,
        )

    def test_ordered_by_last_message_at_desc(self):
        inbox = self.aggregator.list_enriched_conversations("tenant-1")
        self.assertEqual([item.id for item in inbox], [self.shop.id, self.office.id])

        Conversation.objects.filter(id=self.office.id).update(last_message_at=self.now + datetime.timedelta(hours=1))

        inbox = self.aggregator.list_enriched_conversations("tenant-1")
        self.assertEqual([item.id for item in inbox], [self.office.id, self.shop.id])

    def test_other_participant_from_tenant_side(self):
        inbox = {item.id: item for item in self.aggregator.list_enriched_conversations("tenant-1")}

        self.assertEqual(inbox[self.office.id].other_user_id, "owner-1")
        self.assertEqual(inbox[self.office.id].other_user_name, "Olle Owner")
        self.assertEqual(inbox[self.office.id].other_user_role, "landlord")
        self.assertEqual(inbox[self.shop.id].other_user_name, "Agnes Agent")
        self.assertEqual(inbox[self.shop.id].other_user_role, "agent")

    def test_other_participant_from_landlord_side(self):
        inbox = self.aggregator.list_enriched_conversations("owner-1")

        self.assertEqual(len(inbox), 1)
        self.assertEqual(inbox[0].other_user_id, "tenant-1")
        self.assertEqual(inbox[0].other_user_name, "Tove Tenant")
        self.assertEqual(inbox[0].listing_title, "Kontor i Malmö")

    def test_unread_count_and_last_message_preview(self):
        self._message(self.office, "tenant-1", "Hej, är lokalen ledig?", 1)
        self._message(self.office, "owner-1", "Ja", 2)
        self._message(self.office, "owner-1", "Välkommen på visning", 3)
        self._message(self.shop, "agent-1", "Redan läst", 1, read=True)

        inbox = {item.id: item for item in self.aggregator.list_enriched_conversations("tenant-1")}

        self.assertEqual(inbox[self.office.id].unread_count, 2)
        self.assertEqual(inbox[self.office.id].last_message.text, "Välkommen på visning")
        self.assertEqual(inbox[self.office.id].last_message.created_at, self.now + datetime.timedelta(minutes=3))
        self.assertEqual(inbox[self.shop.id].unread_count, 0)
        self.assertEqual(inbox[self.shop.id].last_message.text, "Redan läst")

    def test_conversation_without_messages_has_no_preview(self):
        inbox = self.aggregator.list_enriched_conversations("owner-1")

        self.assertIsNone(inbox[0].last_message)
        self.assertEqual(inbox[0].unread_count, 0)

    def test_placeholders_for_deleted_listing_and_user(self):
        Listing.objects.filter(id="lst_office").delete()
        User.objects.filter(user_id="owner-1").delete()

        inbox = {item.id: item for item in self.aggregator.list_enriched_conversations("tenant-1")}

        self.assertEqual(inbox[self.office.id].listing_title, DELETED_LISTING_TITLE)
        self.assertEqual(inbox[self.office.id].other_user_name, UNKNOWN_USER_NAME)
        self.assertEqual(inbox[self.office.id].other_user_role, UNKNOWN_USER_ROLE)
        self.assertEqual(inbox[self.shop.id].listing_title, "Butik i Lund")

    def test_only_users_conversations(self):
        Conversation.objects.create(listing_id="lst_shop", landlord_id="agent-1", tenant_id="tenant-2")

        inbox = self.aggregator.list_enriched_conversations("tenant-1")

        self.assertEqual({item.id for item in inbox}, {self.office.id, self.shop.id})

    def test_empty_inbox(self):
        self.assertEqual(self.aggregator.list_enriched_conversations("nobody"), [])

    def test_requires_caller(self):
        with self.assertRaises(Unauthenticated):
            self.aggregator.list_enriched_conversations(None)

    def test_uses_injected_directories(self):
        listings = MagicMock()
        listings.get_listings.return_value = {"lst_office": ListingRef("lst_office", "owner-1", "Från katalog")}
        users = MagicMock()
        users.get_users.return_value = {"tenant-1": UserRef("tenant-1", "Katalog Namn", "tenant")}
        aggregator = InboxAggregator(listings=listings, users=users)

        inbox = aggregator.list_enriched_conversations("owner-1")

        self.assertEqual(inbox[0].listing_title, "Från katalog")
        self.assertEqual(inbox[0].other_user_name, "Katalog Namn")
        users.get_users.assert_called_once_with({"tenant-1"})

    def test_serialized_shape(self):
        self._message(self.office, "owner-1", "Hej", 1)
        inbox = self.aggregator.list_enriched_conversations("tenant-1")

        data = EnrichedConversationSerializer(inbox, many=True).data

        expected_fields = [
            'id', 'listing_id', 'landlord_id', 'tenant_id', 'created_at', 'last_message_at',
            'listing_title', 'other_user_id', 'other_user_name', 'other_user_role',
            'unread_count', 'last_message',
        ]
        for field in expected_fields:
            self.assertIn(field, data[0], f"Field '{field}' should be present")
        office = next(row for row in data if row['id'] == self.office.id)
        shop = next(row for row in data if row['id'] == self.shop.id)
        self.assertEqual(set(office['last_message'].keys()), {'text', 'created_at'})
        self.assertIsNone(shop['last_message'])
