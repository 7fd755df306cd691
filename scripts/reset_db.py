"""
Drop and recreate every table, then seed the superadmin.
Only for development databases.
"""
import asyncio
import sys
from pathlib import Path

# Resolve project root dynamically
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from tracker.db.session import close_database_connections, drop_database, initialize_database  # noqa: E402
from tracker.scripts.create_superadmin import create_superadmin_user  # noqa: E402


async def reset_database() -> None:
    """Reset the database configured by DATABASE_URL."""
    print("🗄️ Dropping all tables...")
    await drop_database()

    print("🚀 Creating tables...")
    await initialize_database()

    print("🌱 Seeding superadmin...")
    await create_superadmin_user()

    await close_database_connections()
    print("✅ Database reset and seeded successfully!")


if __name__ == "__main__":
    asyncio.run(reset_database())
