"""
In-memory stand-ins for the outbound collaborators of the reset flow.
"""

import asyncio
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

from src.app.services.identity_store import IIdentityStore, IdentityStoreNotFoundError
from src.app.services.notification_dispatcher import INotificationDispatcher
from src.app.services.password_hasher import PasswordHasher

# Cheap scrypt parameters; stored hashes only verify with the same instance
TEST_HASHER = PasswordHasher(n=2**10, r=8, p=1, dklen=64, salt_bytes=16)


class MutableClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class RecordingDispatcher(INotificationDispatcher):
    def __init__(self, deliver: bool = True):
        self.deliver = deliver
        self.sent: List[Tuple[str, str]] = []

    async def send(self, address: str, code: str) -> bool:
        self.sent.append((address, code))
        return self.deliver

    @property
    def last_code(self) -> str:
        return self.sent[-1][1]


class FakeIdentityStore(IIdentityStore):
    """Accounts keyed by secondary id; delay and error simulate a bad remote"""

    def __init__(self):
        self.accounts: Dict[str, Dict[str, Any]] = {}
        self.delay: float = 0.0
        self.error: Optional[Exception] = None
        self.writes: List[Tuple[str, str]] = []

    async def _account(self, secondary_id: str) -> Dict[str, Any]:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        if secondary_id not in self.accounts:
            raise IdentityStoreNotFoundError(secondary_id)
        return self.accounts[secondary_id]

    async def update_password(self, secondary_id: str, plaintext: str) -> None:
        account = await self._account(secondary_id)
        account["password"] = plaintext
        self.writes.append(("password", secondary_id))

    async def update_role(self, secondary_id: str, role: str) -> None:
        account = await self._account(secondary_id)
        account["role"] = role
        self.writes.append(("role", secondary_id))

    async def get_role(self, secondary_id: str) -> Optional[str]:
        account = await self._account(secondary_id)
        return account.get("role")
