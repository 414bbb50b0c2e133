"""
User lookup boundary used by the inbox.

The user record belongs to the account system; the inbox only needs a display
name and a role for the other party of a conversation.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from .models import User


@dataclass(frozen=True)
class UserRef:
    user_id: str
    name: str
    role: str


class UserDirectory:
    """ORM-backed user lookups. Missing users come back as None."""

    @staticmethod
    def _to_ref(user: User) -> UserRef:
        return UserRef(user_id=user.user_id, name=user.user_name, role=user.role)

    def get_user(self, user_id: str) -> Optional[UserRef]:
        user = User._default_manager.filter(user_id=user_id).first()
        return self._to_ref(user) if user else None

    def get_users(self, user_ids: Iterable[str]) -> Dict[str, UserRef]:
        """Bulk variant of get_user; ids without a record are absent from the result."""
        ids = set(user_ids)
        if not ids:
            return {}
        return {
            user.user_id: self._to_ref(user)
            for user in User._default_manager.filter(user_id__in=ids)
        }
