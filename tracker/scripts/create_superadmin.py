# tracker/scripts/create_superadmin.py
import asyncio

from tracker.core.config import settings
from tracker.db.repositories.users import UserRepository
from tracker.db.session import get_repository_context, initialize_database
from tracker.schemas.user import UserRole


async def create_superadmin_user() -> None:
    """Create the superadmin account if it does not exist yet."""
    await initialize_database()

    email = settings.SUPERADMIN_EMAIL
    password = settings.SUPERADMIN_PASSWORD

    async with get_repository_context(UserRepository) as user_repo:
        existing = await user_repo.get_by_email(email)
        if existing:
            print("✅ Superadmin already exists (id:", existing.id, ")")
            return

        user = await user_repo.create_user(
            name="Super Admin",
            email=email,
            password=password,
            role=UserRole.SUPERADMIN.value,
        )

    print(f"Superadmin created with ID: {user.id}")
    print(f"Email: {email}")
    print("Password: taken from SUPERADMIN_PASSWORD; change it after first login")


if __name__ == "__main__":
    asyncio.run(create_superadmin_user())
