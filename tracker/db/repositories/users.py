"""
User repository for database operations related to users.
"""
from typing import List, Optional

from sqlalchemy import asc, select
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.core.security import get_password_hash
from tracker.db.repositories.base import BaseRepository
from tracker.models.user import User
from tracker.schemas.user import UserCreate, UserUpdate
from tracker.utils.ids import generate_prefixed_id, IDPrefix


class UserRepository(BaseRepository[User, UserCreate, UserUpdate]):
    """User repository for database operations."""

    def __init__(self, session: AsyncSession):
        """Initialize with session and User model."""
        super().__init__(session=session, model=User)

    async def get_by_email(self, email: str) -> Optional[User]:
        """
        Get a user by email, ignoring case.

        Args:
            email: User email

        Returns:
            User: Found user or None
        """
        return await self.get_by_attribute("email", email.strip().lower())

    async def create_user(
        self,
        *,
        name: str,
        email: str,
        password: str,
        role: str = "user",
        is_active: bool = True
    ) -> User:
        """
        Create a new user with a hashed password.

        Args:
            name: Display name
            email: User email (stored lower-cased)
            password: Plain text password
            role: User role
            is_active: Whether the user may sign in

        Returns:
            User: Created user
        """
        db_obj = User(
            id=generate_prefixed_id(IDPrefix.USER),
            name=name,
            email=email.strip().lower(),
            hashed_password=get_password_hash(password),
            role=role,
            is_active=is_active,
        )

        self.session.add(db_obj)
        await self.session.commit()
        await self.session.refresh(db_obj)

        return db_obj

    async def list_users(self) -> List[User]:
        """Get all users, oldest first."""
        result = await self.session.execute(select(User).order_by(asc(User.created_at)))
        return list(result.scalars().all())
