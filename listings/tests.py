from django.test import TestCase

from .directory import ListingDirectory, ListingRef
from .models import Listing


class ListingDirectoryTestCase(TestCase):
    def setUp(self):
        Listing.objects.create(id="lst_office", owner_id="owner-1", title="Kontor i Malmö")
        Listing.objects.create(id="lst_imported", owner_id="", title="Lager i Göteborg")
        self.directory = ListingDirectory()

    def test_generated_id(self):
        listing = Listing.objects.create(owner_id="owner-1", title="Butik")
        self.assertTrue(listing.id.startswith("lst_"))

    def test_get_listing(self):
        self.assertEqual(
            self.directory.get_listing("lst_office"),
            ListingRef(id="lst_office", owner_id="owner-1", title="Kontor i Malmö"),
        )

    def test_listing_without_owner(self):
        self.assertIsNone(self.directory.get_listing("lst_imported").owner_id)

    def test_missing_listing(self):
        self.assertIsNone(self.directory.get_listing("lst_missing"))

    def test_get_listings(self):
        listings = self.directory.get_listings({"lst_office", "lst_missing"})
        self.assertEqual(list(listings), ["lst_office"])
