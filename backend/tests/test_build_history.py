"""Recording build attempts."""

from datetime import datetime, timedelta, timezone

import pytest

from doccraft.core.constants import BuildStatus
from doccraft.repositories.build_histories import (
    add_build_history,
    delay_ms,
    latest_successful_build,
    list_build_history,
)
from doccraft.repositories.instances import create_instance

START = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)


def test_delay_is_whole_milliseconds():
    assert delay_ms(START, START + timedelta(seconds=2, microseconds=500_900)) == 2500
    assert delay_ms(START, START) == 0


@pytest.mark.asyncio
async def test_successful_build_recorded(db, tenant):
    instance = await create_instance(db, tenant.user, tenant.content_type)

    row = await add_build_history(
        db, tenant.user, instance, START, START + timedelta(milliseconds=2500), 0
    )

    assert row.id is not None
    assert row.delay == 2500
    assert row.status == BuildStatus.SUCCESS == "success"
    assert row.exit_code == 0
    assert row.creator_id == tenant.user.id
    assert row.instance_id == instance.id


@pytest.mark.asyncio
async def test_nonzero_exit_recorded_as_failed(db, tenant):
    instance = await create_instance(db, tenant.user, tenant.content_type)

    row = await add_build_history(db, tenant.user, instance, START, START + timedelta(seconds=1), 1)

    assert row.status == "failed"
    assert row.exit_code == 1
    assert await latest_successful_build(db, instance) is None


@pytest.mark.asyncio
async def test_history_listed_newest_first(db, tenant):
    instance = await create_instance(db, tenant.user, tenant.content_type)
    for offset, code in enumerate([2, 0, 127]):
        start = START + timedelta(minutes=offset)
        await add_build_history(db, tenant.user, instance, start, start + timedelta(seconds=3), code)

    rows = await list_build_history(db, instance)

    assert [r.exit_code for r in rows] == [127, 0, 2]
    latest_ok = await latest_successful_build(db, instance)
    assert latest_ok is not None and latest_ok.exit_code == 0
