"""Themes, data templates and field types."""

import pytest

from doccraft.repositories.content_types import get_content_type_with_fields
from doccraft.repositories.data_templates import (
    create_data_template,
    data_template_index,
    data_templates_index_of_an_organisation,
    delete_data_template,
    get_data_template,
    show_data_template,
    update_data_template,
)
from doccraft.repositories.errors import RecordInUseError
from doccraft.repositories.field_types import (
    create_field_type,
    delete_field_type,
    field_type_index,
    get_field_type,
    update_field_type,
)
from doccraft.repositories.organisations import create_organisation
from doccraft.repositories.themes import (
    create_theme,
    delete_theme,
    get_theme,
    show_theme,
    theme_index,
    update_theme,
)
from doccraft.repositories.users import create_user

MISSING = "00000000-0000-0000-0000-000000000000"


@pytest.mark.asyncio
async def test_theme_lifecycle(db, tenant):
    theme = await create_theme(
        db,
        tenant.user,
        name=" Corporate ",
        font="Roboto",
        typescale={"h1": 24, "p": 11},
        file="acme/themes/roboto.zip",
    )
    await db.commit()

    shown = await show_theme(db, theme.uuid)
    assert shown.name == "Corporate"
    assert shown.typescale == {"h1": 24, "p": 11}
    assert shown.organisation_id == tenant.org.id
    assert shown.creator.id == tenant.user.id

    updated = await update_theme(db, theme.uuid, font="Inter", typescale={"h1": 28})
    assert (updated.name, updated.font, updated.typescale) == ("Corporate", "Inter", {"h1": 28})
    assert updated.file == "acme/themes/roboto.zip"

    assert await delete_theme(db, theme.uuid) is True
    assert await get_theme(db, theme.uuid) is None
    assert await delete_theme(db, theme.uuid) is False
    assert await update_theme(db, MISSING, name="x") is None


@pytest.mark.asyncio
async def test_theme_index_is_per_organisation(db, tenant):
    other_org = await create_organisation(db, name="Globex")
    outsider = await create_user(db, email="hank@globex.test", full_name="Hank", organisation=other_org)
    await create_theme(db, tenant.user, name="Classic", font="Times")
    await create_theme(db, tenant.user, name="Modern", font="Inter")
    await create_theme(db, outsider, name="Globex", font="Arial")

    assert [t.name for t in await theme_index(db, tenant.org.id)] == ["Modern", "Classic"]
    assert [t.name for t in await theme_index(db, tenant.org.id, limit=1)] == ["Modern"]
    assert [t.name for t in await theme_index(db, other_org.id)] == ["Globex"]


@pytest.mark.asyncio
async def test_data_template_lifecycle(db, tenant):
    template = await create_data_template(
        db,
        tenant.user,
        tenant.content_type,
        title="Standard offer",
        title_template="Offer for [client]",
        data="# Scope\n",
        serialized={"amount": 1000},
    )

    shown = await show_data_template(db, template.uuid)
    assert shown.content_type.prefix == "OFF"
    assert shown.creator.email == "author@acme.test"

    updated = await update_data_template(db, template.uuid, data="# Scope\n\nUpdated.", serialized={})
    assert updated.data == "# Scope\n\nUpdated."
    assert updated.serialized == {}
    assert updated.title_template == "Offer for [client]"
    assert updated.content_type.id == tenant.content_type.id

    assert await delete_data_template(db, template.uuid) is True
    assert await get_data_template(db, template.uuid) is None
    assert await update_data_template(db, MISSING, title="x") is None


@pytest.mark.asyncio
async def test_data_template_indexes(db, tenant):
    other_org = await create_organisation(db, name="Globex")
    outsider = await create_user(db, email="hank@globex.test", full_name="Hank", organisation=other_org)
    first = await create_data_template(db, tenant.user, tenant.content_type, title="A", title_template="A")
    second = await create_data_template(db, tenant.user, tenant.content_type, title="B", title_template="B")
    theirs = await create_data_template(db, outsider, tenant.content_type, title="C", title_template="C")

    by_type = await data_template_index(db, tenant.content_type.uuid)
    assert [t.id for t in by_type] == [theirs.id, second.id, first.id]
    assert await data_template_index(db, MISSING) == []

    by_org = await data_templates_index_of_an_organisation(db, tenant.org.id)
    assert [t.id for t in by_org] == [second.id, first.id]


@pytest.mark.asyncio
async def test_field_type_rename_follows_into_fields(db, tenant):
    money = await create_field_type(db, tenant.user, name="number", description="Numbers")
    await create_field_type(db, tenant.user, name="string")

    assert [ft.name for ft in await field_type_index(db)] == ["string", "number"]

    renamed = await update_field_type(db, money.uuid, name="decimal", description="Decimal amounts")
    assert (renamed.name, renamed.description) == ("decimal", "Decimal amounts")

    content_type = await get_content_type_with_fields(db, tenant.content_type.uuid)
    assert [f.field_type for f in content_type.fields] == ["string", "string", "decimal"]
    assert await update_field_type(db, MISSING, name="x") is None


@pytest.mark.asyncio
async def test_field_type_in_use_cannot_be_deleted(db, tenant):
    string = await create_field_type(db, tenant.user, name="string")
    unused = await create_field_type(db, tenant.user, name="markdown")

    with pytest.raises(RecordInUseError) as exc_info:
        await delete_field_type(db, string.uuid)
    assert exc_info.value.dependents == 2

    assert await delete_field_type(db, unused.uuid) is True
    assert await get_field_type(db, unused.uuid) is None
    assert await delete_field_type(db, unused.uuid) is False
