"""Instances, sequence codes and the `build` link."""

import asyncio

import pytest
from sqlalchemy import func, select

from doccraft.db.models import BuildHistory, Instance
from doccraft.db.models.base import utcnow
from doccraft.repositories import content_types as content_type_repository
from doccraft.repositories import counters
from doccraft.repositories import users as user_repository
from doccraft.repositories.build_histories import add_build_history
from doccraft.repositories.counters import current_count, next_count, subject_for
from doccraft.repositories.instances import (
    create_instance,
    delete_instance,
    format_code,
    get_instance_by_code,
    list_instances,
    list_instances_for_organisation,
    show_instance,
    update_instance,
)
from doccraft.repositories.organisations import create_organisation
from doccraft.repositories.users import create_user


def test_format_code_pads_to_four_digits():
    assert format_code("OFF", 1) == "OFF0001"
    assert format_code("OFF", 12345) == "OFF12345"


@pytest.mark.asyncio
async def test_sequential_codes(db, tenant):
    codes = [
        (await create_instance(db, tenant.user, tenant.content_type)).instance_id
        for _ in range(3)
    ]

    assert codes == ["OFF0001", "OFF0002", "OFF0003"]
    assert await current_count(db, subject_for(tenant.content_type)) == 3


@pytest.mark.asyncio
async def test_counters_are_per_subject(db):
    assert await next_count(db, "ContentType:1") == 1
    assert await next_count(db, "ContentType:2") == 1
    assert await next_count(db, "ContentType:1") == 2
    assert await current_count(db, "ContentType:3") == 0


@pytest.mark.asyncio
async def test_counter_without_upsert_support(db, monkeypatch):
    monkeypatch.setattr(counters, "_INSERTS", {})

    assert await next_count(db, "ContentType:7") == 1
    assert await next_count(db, "ContentType:7") == 2
    assert await next_count(db, "ContentType:8") == 1
    assert await current_count(db, "ContentType:7") == 2


@pytest.mark.asyncio
async def test_concurrent_creation_yields_unique_codes(session_factory, tenant):
    async def create_one() -> str:
        async with session_factory() as session:
            user = await user_repository.get_user_by_id(session, tenant.user.id)
            content_type = await content_type_repository.get_content_type(
                session, tenant.content_type.uuid
            )
            instance = await create_instance(session, user, content_type)
            await session.commit()
            return instance.instance_id

    codes = await asyncio.gather(*(create_one() for _ in range(8)))

    assert sorted(codes) == [f"OFF{n:04d}" for n in range(1, 9)]


@pytest.mark.asyncio
async def test_show_instance_build_link(db, tenant):
    instance = await create_instance(
        db, tenant.user, tenant.content_type, serialized={"title": "Redesign"}
    )
    start = utcnow()

    shown = await show_instance(db, instance.uuid)
    assert shown.build is None

    await add_build_history(db, tenant.user, instance, start, start, 1)
    shown = await show_instance(db, instance.uuid)
    assert shown.build is None

    await add_build_history(db, tenant.user, instance, start, start, 0)
    shown = await show_instance(db, str(instance.uuid))
    assert shown.build == "uploads/contents/OFF0001/final.pdf"


@pytest.mark.asyncio
async def test_show_unknown_instance(db, tenant):
    assert await show_instance(db, "00000000-0000-0000-0000-000000000000") is None


@pytest.mark.asyncio
async def test_update_content_and_state(db, tenant):
    instance = await create_instance(db, tenant.user, tenant.content_type, state=tenant.draft)

    updated = await update_instance(
        db,
        instance.uuid,
        serialized={"title": "New title"},
        raw="Body",
        state_uuid=tenant.published.uuid,
    )

    assert updated.serialized == {"title": "New title"}
    assert updated.raw == "Body"
    assert updated.state_id == tenant.published.id
    assert updated.instance_id == "OFF0001"


@pytest.mark.asyncio
async def test_update_with_unknown_state(db, tenant):
    instance = await create_instance(db, tenant.user, tenant.content_type)

    with pytest.raises(LookupError):
        await update_instance(db, instance.uuid, state_uuid="00000000-0000-0000-0000-000000000000")


@pytest.mark.asyncio
async def test_delete_removes_history(db, tenant):
    instance = await create_instance(db, tenant.user, tenant.content_type)
    start = utcnow()
    await add_build_history(db, tenant.user, instance, start, start, 0)
    await add_build_history(db, tenant.user, instance, start, start, 2)

    assert await delete_instance(db, instance.uuid) is True

    assert await get_instance_by_code(db, "OFF0001") is None
    remaining = await db.scalar(select(func.count()).select_from(BuildHistory))
    assert remaining == 0
    assert await delete_instance(db, instance.uuid) is False


@pytest.mark.asyncio
async def test_listing_scoped_by_content_type_and_organisation(db, tenant):
    other_org = await create_organisation(db, name="Globex")
    outsider = await create_user(db, email="hank@globex.test", full_name="Hank", organisation=other_org)
    mine = await create_instance(db, tenant.user, tenant.content_type)
    theirs = await create_instance(db, outsider, tenant.content_type)

    by_type = await list_instances(db, tenant.content_type)
    assert {i.id for i in by_type} == {mine.id, theirs.id}

    by_org = await list_instances_for_organisation(db, tenant.org.id)
    assert [i.id for i in by_org] == [mine.id]

    total = await db.scalar(select(func.count()).select_from(Instance))
    assert total == 2
