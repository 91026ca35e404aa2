from abc import ABC, abstractmethod
from typing import Optional

from src.domain.entities import Identifier, User, UserRole


class IUserRepository(ABC):
    """User repository interface - application layer (primary store)"""

    @abstractmethod
    async def get_by_identifier(self, identifier: Identifier) -> Optional[User]:
        """Get user by email or numeric id, depending on the identifier kind"""
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address"""
        pass

    @abstractmethod
    async def get_by_id(self, user_id: int) -> Optional[User]:
        """Get user by ID"""
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """Create a new user"""
        pass

    @abstractmethod
    async def update_password_hash(self, user: User, password_hash: str) -> User:
        """Replace the stored password hash"""
        pass

    @abstractmethod
    async def update_role(self, user: User, role: UserRole) -> User:
        """Replace the user's role"""
        pass
