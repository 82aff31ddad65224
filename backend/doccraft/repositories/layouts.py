"""
Layout repository — template bundles and their ordered assets.

The order in which asset UUIDs are given is the order their lines
appear in every header built with the layout.  Updates only ever
append assets, so existing header lines never move.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from doccraft.core.logging import get_logger
from doccraft.db.models.base import as_uuid
from doccraft.db.models.content_type import ContentType
from doccraft.db.models.engine import Engine
from doccraft.db.models.layout import Layout
from doccraft.db.models.layout_asset import LayoutAsset
from doccraft.db.models.user import User
from doccraft.repositories.assets import get_assets
from doccraft.repositories.engines import get_engine
from doccraft.repositories.errors import RecordInUseError

logger = get_logger(__name__)


async def _asset_links(
    db: AsyncSession,
    user: User,
    asset_uuids: Sequence[uuid.UUID | str],
    start: int = 0,
) -> list[LayoutAsset]:
    by_uuid = await get_assets(db, asset_uuids)
    links = []
    for position, asset_uuid in enumerate(asset_uuids, start=start):
        asset = by_uuid.get(as_uuid(asset_uuid))
        if asset is None:
            raise LookupError(f"Asset {asset_uuid} not found")
        links.append(LayoutAsset(asset=asset, position=position, creator_id=user.id))
    return links


async def create_layout(
    db: AsyncSession,
    user: User,
    *,
    name: str,
    slug: str,
    asset_uuids: Sequence[uuid.UUID | str] = (),
    engine: Engine | None = None,
) -> Layout:
    """
    Create a layout associating the given assets in order.

    Raises LookupError if any asset UUID is unknown.
    """
    layout = Layout(
        name=name.strip(),
        slug=slug.strip(),
        engine_id=engine.id if engine else None,
        organisation_id=user.organisation_id,
        creator_id=user.id,
        layout_assets=await _asset_links(db, user, asset_uuids),
    )
    db.add(layout)
    await db.flush()
    return layout


async def get_layout(db: AsyncSession, layout_uuid: uuid.UUID | str) -> Layout | None:
    result = await db.execute(select(Layout).where(Layout.uuid == as_uuid(layout_uuid)))
    return result.scalar_one_or_none()


async def get_layout_with_assets(db: AsyncSession, layout_uuid: uuid.UUID | str) -> Layout | None:
    """Fetch a layout with its engine, asset links and assets loaded, in association order."""
    stmt = (
        select(Layout)
        .options(
            selectinload(Layout.engine),
            selectinload(Layout.layout_assets).selectinload(LayoutAsset.asset),
        )
        .where(Layout.uuid == as_uuid(layout_uuid))
        .execution_options(populate_existing=True)
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def layout_index(
    db: AsyncSession,
    organisation_id: int,
    *,
    offset: int = 0,
    limit: int = 50,
) -> list[Layout]:
    """Layouts of an organisation, newest first, with engines and assets loaded."""
    stmt = (
        select(Layout)
        .options(
            selectinload(Layout.engine),
            selectinload(Layout.layout_assets).selectinload(LayoutAsset.asset),
        )
        .where(Layout.organisation_id == organisation_id)
        .order_by(Layout.id.desc())
        .offset(offset)
        .limit(limit)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def update_layout(
    db: AsyncSession,
    user: User,
    layout_uuid: uuid.UUID | str,
    *,
    name: str | None = None,
    slug: str | None = None,
    engine_uuid: uuid.UUID | str | None = None,
    asset_uuids: Sequence[uuid.UUID | str] = (),
) -> Layout | None:
    """
    Update a layout's attributes and append assets after the existing ones.

    Assets already on the layout are not linked twice.  Raises LookupError
    for an unknown engine or asset.
    """
    layout = await get_layout_with_assets(db, layout_uuid)
    if layout is None:
        return None

    if engine_uuid is not None:
        engine = await get_engine(db, engine_uuid)
        if engine is None:
            raise LookupError(f"Engine {engine_uuid} not found")
        layout.engine_id = engine.id
        layout.engine = engine
    if name is not None:
        layout.name = name.strip()
    if slug is not None:
        layout.slug = slug.strip()

    linked = {link.asset.uuid for link in layout.layout_assets}
    wanted = dict.fromkeys(as_uuid(u) for u in asset_uuids)
    new_uuids = [u for u in wanted if u not in linked]
    if new_uuids:
        start = max((link.position for link in layout.layout_assets), default=-1) + 1
        layout.layout_assets.extend(await _asset_links(db, user, new_uuids, start=start))

    await db.flush()
    return layout


async def delete_layout(db: AsyncSession, layout_uuid: uuid.UUID | str) -> bool:
    """
    Delete a layout and its asset links.

    Raises RecordInUseError while content types still use the layout.
    """
    layout = await get_layout_with_assets(db, layout_uuid)
    if layout is None:
        return False

    dependents = await db.scalar(
        select(func.count()).select_from(ContentType).where(ContentType.layout_id == layout.id)
    )
    if dependents:
        raise RecordInUseError(
            f"Layout '{layout.name}' is used by {dependents} content type(s)",
            dependents=dependents,
        )

    await db.delete(layout)
    await db.flush()
    logger.info("Layout deleted", layout=layout.name, slug=layout.slug)
    return True
