"""HTTP surface: instances and build trigger."""

from datetime import timedelta
from unittest.mock import Mock, patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from doccraft.api.deps import get_db
from doccraft.db.models.base import utcnow
from doccraft.main import app
from doccraft.repositories.build_histories import add_build_history
from doccraft.repositories.instances import get_instance_by_code

MISSING = "00000000-0000-0000-0000-000000000000"


@pytest_asyncio.fixture
async def client(session_factory):
    async def _override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def _create(client, tenant, **body):
    payload = {"user_id": tenant.user.id, **body}
    return await client.post(
        f"/api/v1/content-types/{tenant.content_type.uuid}/instances", json=payload
    )


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_create_and_show_instance(client, tenant):
    response = await _create(client, tenant, serialized={"title": "Redesign"}, raw="Body")
    assert response.status_code == 201
    created = response.json()
    assert created["instance_id"] == "OFF0001"
    assert created["build"] is None

    second = await _create(client, tenant)
    assert second.json()["instance_id"] == "OFF0002"

    shown = await client.get(f"/api/v1/instances/{created['uuid']}")
    assert shown.status_code == 200
    assert shown.json()["serialized"] == {"title": "Redesign"}
    assert shown.json()["build"] is None


@pytest.mark.asyncio
async def test_show_includes_build_after_success(client, db, tenant):
    created = (await _create(client, tenant)).json()
    instance = await get_instance_by_code(db, created["instance_id"])
    start = utcnow()
    await add_build_history(db, tenant.user, instance, start, start + timedelta(seconds=2), 0)
    await db.commit()

    shown = (await client.get(f"/api/v1/instances/{created['uuid']}")).json()
    assert shown["build"] == "uploads/contents/OFF0001/final.pdf"

    history = (await client.get(f"/api/v1/instances/{created['uuid']}/history")).json()
    assert len(history) == 1
    assert history[0]["delay"] == 2000
    assert history[0]["status"] == "success"


@pytest.mark.asyncio
async def test_update_and_delete(client, tenant):
    created = (await _create(client, tenant, state_uuid=str(tenant.draft.uuid))).json()
    url = f"/api/v1/instances/{created['uuid']}"

    patched = await client.patch(url, json={"raw": "Changed", "state_uuid": str(tenant.published.uuid)})
    assert patched.status_code == 200
    assert patched.json()["raw"] == "Changed"

    bad_state = await client.patch(url, json={"state_uuid": MISSING})
    assert bad_state.status_code == 404

    assert (await client.delete(url)).status_code == 204
    assert (await client.get(url)).status_code == 404


@pytest.mark.asyncio
async def test_not_found_cases(client, tenant):
    assert (await client.get(f"/api/v1/instances/{MISSING}")).status_code == 404
    assert (await client.get(f"/api/v1/instances/{MISSING}/history")).status_code == 404

    response = await client.post(
        f"/api/v1/content-types/{MISSING}/instances", json={"user_id": tenant.user.id}
    )
    assert response.status_code == 404

    unknown_user = await client.post(
        f"/api/v1/content-types/{tenant.content_type.uuid}/instances", json={"user_id": 999}
    )
    assert unknown_user.status_code == 404


@pytest.mark.asyncio
async def test_trigger_build_enqueues_task(client, tenant):
    created = (await _create(client, tenant)).json()

    with patch("doccraft.tasks.build_tasks.build_instance.delay") as delay:
        delay.return_value = Mock(id="task-123")
        response = await client.post(
            f"/api/v1/instances/{created['uuid']}/build", json={"user_id": tenant.user.id}
        )

    assert response.status_code == 202
    assert response.json()["celery_task_id"] == "task-123"
    delay.assert_called_once_with(created["uuid"], tenant.user.id)
