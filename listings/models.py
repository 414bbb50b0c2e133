import uuid

from django.db import models


def generate_listing_id():
    return f"lst_{uuid.uuid4().hex}"


class Listing(models.Model):
    """
    Minimal listing record as seen by the inbox.

    Listings are managed by the listings service; only the owner and the title
    matter for messaging. ``owner_id`` is empty for listings imported without a
    landlord account.
    """
    id = models.CharField(max_length=50, primary_key=True, default=generate_listing_id, editable=False)
    owner_id = models.CharField(max_length=100, null=True, blank=True)
    title = models.CharField(max_length=255)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'listings'
        indexes = [
            models.Index(fields=['owner_id'], name='listings_owner_i_3c1e2a_idx'),
        ]

    def __str__(self):
        return self.title
