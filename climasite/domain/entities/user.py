"""Authenticated principal acting on orders"""

from dataclasses import dataclass
from typing import Optional

from ..enums import UserRole
from ..exceptions import InvalidArgumentError
from ..value_objects.entity_ids import UserId


@dataclass(frozen=True)
class CurrentUser:
    subject: str
    role: UserRole = UserRole.USER

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def user_id(self) -> Optional[UserId]:
        """Owner id for customer tokens, whose subject is the user UUID"""
        try:
            return UserId.from_str(self.subject)
        except InvalidArgumentError:
            return None
