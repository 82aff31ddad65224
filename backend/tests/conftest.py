"""
Shared fixtures: a fresh SQLite database per test, a seeded tenant and
fake renderer executables.

The database is a file under tmp_path (not :memory:) so that tests can
open several independent sessions against it.
"""

from __future__ import annotations

import stat
from pathlib import Path
from types import SimpleNamespace

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from doccraft.db.models import Base
from doccraft.repositories.assets import create_asset
from doccraft.repositories.content_types import create_content_type
from doccraft.repositories.layouts import create_layout
from doccraft.repositories.organisations import create_organisation
from doccraft.repositories.states import create_state
from doccraft.repositories.users import create_user

FAKE_RENDERER_OK = """#!/bin/sh
# Writes a stub PDF to the path following -o, like the real renderer.
out=""
prev=""
for arg in "$@"; do
    if [ "$prev" = "-o" ]; then out="$arg"; fi
    prev="$arg"
done
echo "rendering $out"
printf '%%PDF-1.4 stub\\n' > "$out"
exit 0
"""

FAKE_RENDERER_FAIL = """#!/bin/sh
echo '! LaTeX Error: File missing.sty not found.' >&2
exit 43
"""


def _write_executable(path: Path, body: str) -> Path:
    path.write_text(body)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'doccraft-test.db'}",
        connect_args={"timeout": 30},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def tenant(db):
    """Organisation, author, a 'default' layout with a logo and an OFF content type."""
    org = await create_organisation(db, name="Acme")
    user = await create_user(db, email="Author@Acme.test", full_name="Ada Author", organisation=org)
    draft = await create_state(db, state="Draft", order=1, organisation=org)
    published = await create_state(db, state="Published", order=2, organisation=org)
    logo = await create_asset(db, user, name="logo", file="acme/logo.png")
    layout = await create_layout(db, user, name="Default", slug="default", asset_uuids=[logo.uuid])
    offer = await create_content_type(
        db,
        user,
        name="Offer",
        prefix="OFF",
        layout=layout,
        fields=[("title", "string"), ("client", "string"), ("amount", "number")],
    )
    await db.commit()
    return SimpleNamespace(
        org=org,
        user=user,
        draft=draft,
        published=published,
        logo=logo,
        layout=layout,
        content_type=offer,
    )


@pytest.fixture
def uploads_dir(tmp_path) -> Path:
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def slugs_dir(tmp_path) -> Path:
    path = tmp_path / "slugs"
    bundle = path / "default"
    bundle.mkdir(parents=True)
    (bundle / "template.tex").write_text("$body$\n")
    (bundle / "fonts").mkdir()
    (bundle / "fonts" / "README").write_text("fonts go here\n")
    return path


@pytest.fixture
def fake_renderer(tmp_path) -> Path:
    return _write_executable(tmp_path / "fake-pandoc", FAKE_RENDERER_OK)


@pytest.fixture
def failing_renderer(tmp_path) -> Path:
    return _write_executable(tmp_path / "failing-pandoc", FAKE_RENDERER_FAIL)
