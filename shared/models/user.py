from typing import Optional
from enum import Enum
from pydantic import BaseModel

class UserRole(str, Enum):
    """Platform role"""
    CITIZEN = "citizen"
    LEGISLATOR = "legislator"
    CLERK = "clerk"
    ADMIN = "admin"

class User(BaseModel):
    """A notifiable platform user"""
    id: int
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    role: UserRole = UserRole.CITIZEN
    is_verified: bool = False
    sms_notifications_enabled: bool = True

    class Config:
        from_attributes = True
        use_enum_values = True

    @property
    def sms_route(self) -> Optional[str]:
        """Phone number SMS should go to, or None when the user has no phone channel."""
        if not self.sms_notifications_enabled:
            return None
        phone = (self.phone or "").strip()
        return phone or None
