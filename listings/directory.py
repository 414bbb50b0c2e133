"""
Listing lookup boundary used by the inbox.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from .models import Listing


@dataclass(frozen=True)
class ListingRef:
    id: str
    owner_id: Optional[str]
    title: str


class ListingDirectory:
    """ORM-backed listing lookups. Deleted listings come back as None."""

    @staticmethod
    def _to_ref(listing: Listing) -> ListingRef:
        return ListingRef(id=listing.id, owner_id=listing.owner_id or None, title=listing.title)

    def get_listing(self, listing_id: str) -> Optional[ListingRef]:
        listing = Listing._default_manager.filter(id=listing_id).first()
        return self._to_ref(listing) if listing else None

    def get_listings(self, listing_ids: Iterable[str]) -> Dict[str, ListingRef]:
        ids = set(listing_ids)
        if not ids:
            return {}
        return {
            listing.id: self._to_ref(listing)
            for listing in Listing._default_manager.filter(id__in=ids)
        }
