import asyncio

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from tracker.core.exceptions import ImportFailedError, ValidationError
from tracker.db.base import Base
from tracker.db.repositories.imports import ImportRepository
from tracker.db.session import async_session_factory, configure_sqlite_engine
from tracker.models.contact import Contact
from tracker.models.import_record import ImportRecord
from tracker.services.imports.service import ImportService

ROWS = [
    ["Name", "Email", "Phone", "Company", "Designation"],
    ["Alice", "alice@x.com", "111-222-333", "Acme", "CTO"],
    ["Bob", "", "222-333-444", "Globex", ""],
    ["", "", "", "", ""],
    ["Alice Again", "alice@x.com", "999-999-999", "", ""],
]


async def _count(model, session_factory=async_session_factory, *conditions) -> int:
    async with session_factory() as session:
        query = select(func.count(model.id))
        if conditions:
            query = query.where(*conditions)
        return (await session.execute(query)).scalar_one()


@pytest.mark.asyncio
async def test_import_adds_new_rows_and_skips_in_file_duplicates(xlsx_file):
    summary = await ImportService().run(xlsx_file(ROWS), "contacts.xlsx")

    assert summary.added == 2
    assert summary.skipped == 1
    assert summary.errors == []
    assert await _count(Contact) == 2
    assert await _count(ImportRecord) == 1


@pytest.mark.asyncio
async def test_reimporting_same_file_adds_nothing(xlsx_file):
    path = xlsx_file(ROWS)
    await ImportService().run(path, "contacts.xlsx")

    summary = await ImportService().run(path, "contacts.xlsx")

    assert summary.added == 0
    assert summary.skipped == 3
    assert await _count(Contact) == 2


@pytest.mark.asyncio
async def test_name_only_rows_are_skipped_on_every_import(xlsx_file):
    path = xlsx_file([["Name", "Email", "Phone"], ["Alice", "a@x.com", "111"], ["Carol", "", ""]])

    first = await ImportService().run(path, "contacts.xlsx")
    second = await ImportService().run(path, "contacts.xlsx")

    assert (first.added, first.skipped) == (1, 1)
    assert (second.added, second.skipped) == (0, 2)
    assert await _count(Contact) == 1


@pytest.mark.asyncio
async def test_persisted_values_match_trimmed_cells(xlsx_file):
    path = xlsx_file([["Name", "Email", "Phone"], ["  Dana ", " dana@x.com ", 5550100123]])

    service = ImportService()
    await service.run(path, "contacts.xlsx")

    async with async_session_factory() as session:
        contact = (await session.execute(select(Contact))).scalar_one()

    assert contact.name == "Dana"
    assert contact.email == "dana@x.com"
    assert contact.phone == "5550100123"
    assert contact.import_id == service.import_id


@pytest.mark.asyncio
async def test_small_lookup_batches_still_find_stored_duplicates(xlsx_file):
    rows = [["Name", "Email"]] + [[f"P{i}", f"p{i}@x.com"] for i in range(7)]
    path = xlsx_file(rows)
    await ImportService(lookup_batch_size=2).run(path, "first.xlsx")

    summary = await ImportService(lookup_batch_size=2).run(path, "second.xlsx")

    assert summary.added == 0
    assert summary.skipped == 7


@pytest.mark.asyncio
async def test_transaction_failure_rolls_back_everything(xlsx_file, monkeypatch):
    async def fail_set_counts(self, manifest, added, skipped):
        raise RuntimeError("disk full")

    monkeypatch.setattr(ImportRepository, "set_counts", fail_set_counts)

    with pytest.raises(ImportFailedError):
        await ImportService().run(xlsx_file(ROWS), "contacts.xlsx")

    assert await _count(Contact) == 0
    assert await _count(ImportRecord) == 0


@pytest.mark.asyncio
async def test_unreadable_file_is_a_validation_error(tmp_path):
    path = tmp_path / "contacts.xlsx"
    path.write_text("not a workbook")

    with pytest.raises(ValidationError):
        await ImportService().run(str(path), "contacts.xlsx")

    assert await _count(ImportRecord) == 0


@pytest.mark.asyncio
async def test_concurrent_imports_never_duplicate_an_email(tmp_path, xlsx_file):
    engine = configure_sqlite_engine(create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'race.db'}"))
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(engine, expire_on_commit=False, autoflush=False)

    first = xlsx_file([["Name", "Email"], ["Erin", "shared@x.com"], ["Finn", "finn@x.com"]], "first.xlsx")
    second = xlsx_file([["Name", "Email"], ["Erin B", "shared@x.com"], ["Gus", "gus@x.com"]], "second.xlsx")

    try:
        results = await asyncio.gather(
            ImportService(session_factory=factory).run(first, "first.xlsx"),
            ImportService(session_factory=factory).run(second, "second.xlsx"),
        )
        shared = await _count(Contact, factory, Contact.email == "shared@x.com")
    finally:
        await engine.dispose()

    assert shared == 1
    assert sorted(r.added for r in results) == [1, 2]
    assert sum(r.skipped for r in results) == 1
