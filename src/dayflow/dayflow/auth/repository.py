from __future__ import annotations

from typing import Optional, Protocol

from ..core.enums import Role
from .model import AccountRecord, Profile, SignupMetadata


class AccountRepository(Protocol):
    """Storage for accounts and the rows provisioned alongside them.

    Note (DIP): the auth backend depends on this interface, not on a concrete DB.
    """

    def get_by_email(self, email: str) -> Optional[AccountRecord]:
        raise NotImplementedError

    def create_account(
        self,
        *,
        email: str,
        password_hash: str,
        metadata: SignupMetadata,
    ) -> str:
        """Insert the account plus its profile, role and leave-balance rows; return the new id."""

        raise NotImplementedError

    def get_profile(self, user_id: str) -> Optional[Profile]:
        raise NotImplementedError

    def get_role(self, user_id: str) -> Optional[Role]:
        raise NotImplementedError

    def update_password(self, user_id: str, *, password_hash: str) -> bool:
        raise NotImplementedError
