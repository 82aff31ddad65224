"""Asset repository — named files referenced by layouts."""

from __future__ import annotations

import uuid
from collections.abc import Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from doccraft.core.logging import get_logger
from doccraft.db.models.asset import Asset
from doccraft.db.models.base import as_uuid
from doccraft.db.models.layout_asset import LayoutAsset
from doccraft.db.models.user import User

logger = get_logger(__name__)


async def create_asset(
    db: AsyncSession,
    user: User,
    *,
    name: str,
    file: str | None,
) -> Asset:
    """Register an asset; `file` is the storage key of the uploaded file."""
    asset = Asset(
        name=name.strip(),
        file=file,
        organisation_id=user.organisation_id,
        creator_id=user.id,
    )
    db.add(asset)
    await db.flush()
    return asset


async def get_asset(db: AsyncSession, asset_uuid: uuid.UUID | str) -> Asset | None:
    result = await db.execute(select(Asset).where(Asset.uuid == as_uuid(asset_uuid)))
    return result.scalar_one_or_none()


async def get_assets(db: AsyncSession, asset_uuids: Sequence[uuid.UUID | str]) -> dict[uuid.UUID, Asset]:
    """Fetch several assets at once, keyed by UUID.  Unknown UUIDs are absent."""
    wanted = [as_uuid(u) for u in asset_uuids]
    if not wanted:
        return {}
    result = await db.execute(select(Asset).where(Asset.uuid.in_(wanted)))
    return {asset.uuid: asset for asset in result.scalars().all()}


async def asset_index(
    db: AsyncSession,
    organisation_id: int,
    *,
    offset: int = 0,
    limit: int = 50,
) -> list[Asset]:
    """Assets of an organisation, newest first."""
    stmt = (
        select(Asset)
        .where(Asset.organisation_id == organisation_id)
        .order_by(Asset.id.desc())
        .offset(offset)
        .limit(limit)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def update_asset(
    db: AsyncSession,
    asset_uuid: uuid.UUID | str,
    *,
    name: str | None = None,
    file: str | None = None,
) -> Asset | None:
    """Rename an asset or point it at a newly uploaded file."""
    asset = await get_asset(db, asset_uuid)
    if asset is None:
        return None
    if name is not None:
        asset.name = name.strip()
    if file is not None:
        asset.file = file
    await db.flush()
    return asset


async def delete_asset(db: AsyncSession, asset_uuid: uuid.UUID | str) -> bool:
    """
    Delete an asset and unlink it from every layout.

    The remaining assets of those layouts keep their relative order.
    """
    asset = await get_asset(db, asset_uuid)
    if asset is None:
        return False
    await db.execute(
        delete(LayoutAsset)
        .where(LayoutAsset.asset_id == asset.id)
        .execution_options(synchronize_session="fetch")
    )
    await db.delete(asset)
    await db.flush()
    logger.info("Asset deleted", asset=asset.name, file=asset.file)
    return True
