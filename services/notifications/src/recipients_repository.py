"""
Users table access for notification recipients.
"""
import logging
from typing import Iterator, List, Optional

from shared.database.supabase_client import page_ranges
from shared.models.user import User, UserRole

logger = logging.getLogger(__name__)


class RecipientsRepository:
    TABLE = "users"
    COLUMNS = "id, name, email, phone, role, is_verified, sms_notifications_enabled"

    def __init__(self, supabase_client):
        self.supabase = supabase_client

    def get_user(self, user_id: int) -> Optional[User]:
        result = (
            self.supabase.table(self.TABLE)
            .select(self.COLUMNS)
            .eq("id", user_id)
            .limit(1)
            .execute()
        )
        if not result.data:
            return None
        return User.model_validate(result.data[0])

    def iter_bill_followers(self, chunk_size: int = 200) -> Iterator[List[User]]:
        """
        Yield the audience of bill notifications (verified citizens) in chunks.

        Every verified citizen follows every bill; there is no per-bill opt-in.
        """
        for start, end in page_ranges(chunk_size):
            result = (
                self.supabase.table(self.TABLE)
                .select(self.COLUMNS)
                .eq("role", UserRole.CITIZEN.value)
                .eq("is_verified", True)
                .order("id")
                .range(start, end)
                .execute()
            )
            rows = result.data or []
            if rows:
                yield [User.model_validate(row) for row in rows]
            if len(rows) < chunk_size:
                return
