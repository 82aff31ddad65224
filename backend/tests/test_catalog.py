"""Content types, layouts, engines, assets and states."""

import uuid

import pytest

from doccraft.repositories.assets import (
    asset_index,
    create_asset,
    delete_asset,
    get_asset,
    update_asset,
)
from doccraft.repositories.content_types import (
    content_type_index,
    create_content_type,
    delete_content_type,
    get_content_type_with_fields,
    update_content_type,
)
from doccraft.repositories.data_templates import create_data_template, get_data_template
from doccraft.repositories.engines import add_engine, engines_list, get_engine
from doccraft.repositories.errors import RecordInUseError
from doccraft.repositories.instances import create_instance
from doccraft.repositories.layouts import (
    create_layout,
    delete_layout,
    get_layout,
    get_layout_with_assets,
    layout_index,
    update_layout,
)
from doccraft.repositories.states import list_states
from doccraft.repositories.users import get_user_by_email

MISSING = "00000000-0000-0000-0000-000000000000"


@pytest.mark.asyncio
async def test_content_type_fields_keep_declaration_order(db, tenant):
    fetched = await get_content_type_with_fields(db, tenant.content_type.uuid)

    assert [f.name for f in fetched.fields] == ["title", "client", "amount"]
    assert [f.position for f in fetched.fields] == [0, 1, 2]
    assert fetched.organisation_id == tenant.org.id
    assert await get_content_type_with_fields(db, MISSING) is None


@pytest.mark.asyncio
async def test_layout_assets_keep_given_order(db, tenant):
    stamp = await create_asset(db, tenant.user, name="stamp", file="acme/stamp.png")
    sig = await create_asset(db, tenant.user, name="signature", file="acme/sig.png")

    layout = await create_layout(
        db,
        tenant.user,
        name="Letter",
        slug="letter",
        asset_uuids=[sig.uuid, tenant.logo.uuid, str(stamp.uuid)],
    )
    await db.commit()

    fetched = await get_layout_with_assets(db, layout.uuid)
    assert [a.name for a in fetched.assets] == ["signature", "logo", "stamp"]
    assert (await get_layout(db, layout.uuid)).slug == "letter"


@pytest.mark.asyncio
async def test_layout_with_unknown_asset(db, tenant):
    with pytest.raises(LookupError):
        await create_layout(db, tenant.user, name="Broken", slug="x", asset_uuids=[MISSING])


@pytest.mark.asyncio
async def test_update_layout_appends_assets_and_sets_engine(db, tenant):
    pandoc = await add_engine(db, name="pandoc", api_route="/usr/bin/pandoc")
    stamp = await create_asset(db, tenant.user, name="stamp", file="acme/stamp.png")

    updated = await update_layout(
        db,
        tenant.user,
        tenant.layout.uuid,
        name="Default v2",
        engine_uuid=pandoc.uuid,
        asset_uuids=[stamp.uuid, tenant.logo.uuid],
    )

    assert updated.name == "Default v2"
    assert updated.slug == "default"
    assert updated.engine.name == "pandoc"
    assert [a.name for a in updated.assets] == ["logo", "stamp"]
    assert [link.position for link in updated.layout_assets] == [0, 1]

    with pytest.raises(LookupError):
        await update_layout(db, tenant.user, tenant.layout.uuid, engine_uuid=MISSING)
    assert await update_layout(db, tenant.user, MISSING, name="x") is None


@pytest.mark.asyncio
async def test_layout_in_use_cannot_be_deleted(db, tenant):
    with pytest.raises(RecordInUseError) as exc_info:
        await delete_layout(db, tenant.layout.uuid)
    assert exc_info.value.dependents == 1

    spare = await create_layout(db, tenant.user, name="Spare", slug="spare", asset_uuids=[tenant.logo.uuid])
    assert await delete_layout(db, spare.uuid) is True
    assert await get_layout(db, spare.uuid) is None
    assert await get_asset(db, tenant.logo.uuid) is not None


@pytest.mark.asyncio
async def test_engines(db):
    latex = await add_engine(db, name="latex")
    await add_engine(db, name="pandoc")

    assert [e.name for e in await engines_list(db)] == ["latex", "pandoc"]
    assert (await get_engine(db, latex.uuid)).id == latex.id
    assert await get_engine(db, MISSING) is None


@pytest.mark.asyncio
async def test_update_content_type_appends_new_fields(db, tenant):
    letter = await create_layout(db, tenant.user, name="Letter", slug="letter")

    updated = await update_content_type(
        db,
        tenant.content_type.uuid,
        name="Offer letter",
        layout_uuid=letter.uuid,
        fields=[("client", "number"), ("valid_until", "date")],
    )

    assert updated.name == "Offer letter"
    assert updated.prefix == "OFF"
    assert updated.layout_id == letter.id
    assert [(f.name, f.field_type) for f in updated.fields] == [
        ("title", "string"),
        ("client", "string"),
        ("amount", "number"),
        ("valid_until", "date"),
    ]
    assert [f.position for f in updated.fields] == [0, 1, 2, 3]

    with pytest.raises(LookupError):
        await update_content_type(db, tenant.content_type.uuid, layout_uuid=MISSING)


@pytest.mark.asyncio
async def test_delete_content_type(db, tenant):
    memo = await create_content_type(db, tenant.user, name="Memo", prefix="MEM", fields=[("title", "string")])
    template = await create_data_template(db, tenant.user, memo, title="Blank", title_template="Memo [title]")

    assert await delete_content_type(db, memo.uuid) is True
    assert await get_content_type_with_fields(db, memo.uuid) is None
    assert await get_data_template(db, template.uuid) is None
    assert await delete_content_type(db, memo.uuid) is False

    await create_instance(db, tenant.user, tenant.content_type)
    with pytest.raises(RecordInUseError):
        await delete_content_type(db, tenant.content_type.uuid)


@pytest.mark.asyncio
async def test_update_and_delete_asset(db, tenant):
    stamp = await create_asset(db, tenant.user, name="stamp", file="acme/stamp.png")
    await update_layout(db, tenant.user, tenant.layout.uuid, asset_uuids=[stamp.uuid])

    renamed = await update_asset(db, tenant.logo.uuid, name="brand", file="acme/brand.png")
    assert (renamed.name, renamed.file) == ("brand", "acme/brand.png")

    assert await delete_asset(db, tenant.logo.uuid) is True
    assert await get_asset(db, tenant.logo.uuid) is None
    layout = await get_layout_with_assets(db, tenant.layout.uuid)
    assert [a.name for a in layout.assets] == ["stamp"]
    assert await delete_asset(db, MISSING) is False
    assert await update_asset(db, MISSING, name="x") is None


@pytest.mark.asyncio
async def test_indexes_are_scoped_to_organisation(db, tenant):
    await create_content_type(db, tenant.user, name="Contract", prefix="CON")
    await create_asset(db, tenant.user, name="stamp", file="acme/stamp.png")

    assert [ct.name for ct in await content_type_index(db, tenant.org.id)] == ["Contract", "Offer"]
    assert [ct.name for ct in await content_type_index(db, tenant.org.id, offset=1)] == ["Offer"]
    assert [a.name for a in await asset_index(db, tenant.org.id)] == ["stamp", "logo"]
    assert [layout.name for layout in await layout_index(db, tenant.org.id)] == ["Default"]
    assert await layout_index(db, tenant.org.id + 1) == []
    assert [s.state for s in await list_states(db, tenant.org.id)] == ["Draft", "Published"]


@pytest.mark.asyncio
async def test_user_email_is_normalised(db, tenant):
    assert tenant.user.email == "author@acme.test"
    assert (await get_user_by_email(db, " AUTHOR@acme.test ")).id == tenant.user.id


@pytest.mark.asyncio
async def test_states_and_assets_get_uuids(db, tenant):
    assert isinstance(tenant.draft.uuid, uuid.UUID)
    assert isinstance(tenant.logo.uuid, uuid.UUID)
    assert tenant.draft.uuid != tenant.published.uuid
    assert (await get_asset(db, str(tenant.logo.uuid))).id == tenant.logo.id
