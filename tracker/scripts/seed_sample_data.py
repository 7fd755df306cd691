#!/usr/bin/env python
"""
Seed database with sample data for frontend development.

This script creates a recruiter account, a handful of contacts with
outreach history and follow-ups, and a few job requirements.

Usage:
    python -m tracker.scripts.seed_sample_data
"""
import asyncio
from datetime import timedelta
from typing import List, Set, Tuple

from tracker.db.repositories.contact_logs import ContactLogRepository
from tracker.db.repositories.contacts import ContactRepository
from tracker.db.repositories.requirements import RequirementRepository
from tracker.db.repositories.users import UserRepository
from tracker.db.session import async_session_factory, initialize_database
from tracker.models.contact import Contact
from tracker.models.contact_log import LogResponse
from tracker.models.user import User
from tracker.schemas.requirement import RequirementCreate
from tracker.schemas.user import UserRole
from tracker.utils.datetime import utc_today

SAMPLE_USER = {
    "name": "Riley Recruiter",
    "email": "recruiter@example.com",
    "password": "Recruit123!",
}

CONTACTS = [
    {"name": "Priya Raman", "email": "priya.raman@acme.example", "phone": "+91 98450 11223", "company": "Acme Corp", "designation": "Engineering Manager"},
    {"name": "Jonas Weber", "email": "jonas@globex.example", "phone": None, "company": "Globex", "designation": "Head of Talent"},
    {"name": "Maria Lopez", "email": None, "phone": "+34 612 345 678", "company": "Initech", "designation": "CTO"},
    {"name": "Kenji Sato", "email": "kenji.sato@umbrella.example", "phone": "+81 90 1234 5678", "company": "Umbrella", "designation": "HR Lead"},
    {"name": "Amara Okafor", "email": "amara@hooli.example", "phone": "+234 803 555 0101", "company": "Hooli", "designation": "VP Engineering"},
]

# (contact index, response, follow-up in days or None, notes)
LOGS = [
    (0, LogResponse.YES, 2, "Interested in two backend hires"),
    (1, LogResponse.PENDING, -1, "Left a message with the front desk"),
    (2, LogResponse.NO, None, "No hiring this quarter"),
    (3, LogResponse.PENDING, 0, "Asked to call back today"),
    (4, LogResponse.YES, 7, "Share profiles next week"),
]

REQUIREMENTS = [
    (0, {"role": "Backend Engineer", "experience": "3-5 years", "skills": "Python, FastAPI, PostgreSQL", "openings": 2}),
    (4, {"role": "Site Reliability Engineer", "experience": "5+ years", "skills": "Kubernetes, Terraform", "openings": 1}),
    (4, {"role": "QA Analyst", "experience": "1-3 years", "skills": "Playwright", "openings": 3, "description": "Contract to hire"}),
]


async def create_sample_user() -> User:
    """Create the sample recruiter if it doesn't exist."""
    async with async_session_factory() as session:
        user_repo = UserRepository(session)

        existing_user = await user_repo.get_by_email(SAMPLE_USER["email"])
        if existing_user:
            print(f"✅ Sample user {existing_user.email} already exists")
            return existing_user

        user = await user_repo.create_user(role=UserRole.USER.value, **SAMPLE_USER)
        print(f"✅ Created sample user: {user.email}")
        return user


async def create_sample_contacts() -> Tuple[List[Contact], Set[str]]:
    """Create sample contacts, reusing any that already exist.

    Returns:
        Tuple[List[Contact], Set[str]]: Contacts in sample order and the IDs created by this run
    """
    async with async_session_factory() as session:
        contact_repo = ContactRepository(session)

        contacts = []
        created = set()
        for data in CONTACTS:
            contact = await contact_repo.find_by_email_or_phone(data["email"], data["phone"])
            if contact:
                print(f"✅ Contact {contact.name} already exists")
            else:
                contact = await contact_repo.create_contact(**data)
                created.add(contact.id)
                print(f"✅ Created contact: {contact.name}")
            contacts.append(contact)

        return contacts, created


async def create_sample_logs(contacts: List[Contact], created: Set[str], contacted_by: str) -> None:
    """Record outreach history, some of it with follow-ups due, for newly created contacts."""
    today = utc_today()
    async with async_session_factory() as session:
        log_repo = ContactLogRepository(session)

        for index, response, follow_up_in, notes in LOGS:
            if contacts[index].id not in created:
                continue
            follow_up_date = today + timedelta(days=follow_up_in) if follow_up_in is not None else None
            await log_repo.create_log(
                contact_id=contacts[index].id,
                contacted_by=contacted_by,
                response=response,
                follow_up_date=follow_up_date,
                notes=notes,
            )
            print(f"✅ Logged outreach to {contacts[index].name}: {response.value}")


async def create_sample_requirements(contacts: List[Contact], created: Set[str]) -> None:
    """Create sample job requirements for newly created contacts."""
    async with async_session_factory() as session:
        requirement_repo = RequirementRepository(session)

        for index, data in REQUIREMENTS:
            if contacts[index].id not in created:
                continue
            await requirement_repo.create_requirement(
                RequirementCreate(contact_id=contacts[index].id, **data)
            )
            print(f"✅ Created requirement: {data['role']} at {contacts[index].company}")


async def seed_database() -> None:
    """Seed database with sample data."""
    print("🌱 Seeding database with sample data...")

    await initialize_database()

    user = await create_sample_user()
    contacts, created = await create_sample_contacts()
    await create_sample_logs(contacts, created, user.name)
    await create_sample_requirements(contacts, created)

    print("\n✅ Database seeded successfully with sample data!")
    print(f"👤 Sample user: {SAMPLE_USER['email']}")
    print(f"🔑 Password: {SAMPLE_USER['password']}")


if __name__ == "__main__":
    asyncio.run(seed_database())
