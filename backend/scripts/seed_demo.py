"""
Seed a demo organisation for development: one user, workflow states,
a logo asset, the "default" layout and an "Offer" content type with
one instance ready to build.

Run: python -m scripts.seed_demo  (from backend/)
"""

import asyncio

from doccraft.db.session import async_session
from doccraft.repositories.assets import create_asset
from doccraft.repositories.content_types import create_content_type
from doccraft.repositories.engines import add_engine
from doccraft.repositories.instances import create_instance
from doccraft.repositories.layouts import create_layout
from doccraft.repositories.organisations import create_organisation
from doccraft.repositories.states import create_state
from doccraft.repositories.themes import create_theme
from doccraft.repositories.users import create_user


SEED_STATES = ["Draft", "Review", "Published"]

OFFER_FIELDS = [
    ("title", "string"),
    ("client", "string"),
    ("amount", "number"),
]


async def seed():
    """Insert the demo tenant."""
    async with async_session() as session:
        org = await create_organisation(session, name="Demo Org")
        user = await create_user(
            session,
            email="author@example.com",
            full_name="Demo Author",
            organisation=org,
        )
        states = [
            await create_state(session, state=name, order=order, organisation=org)
            for order, name in enumerate(SEED_STATES, start=1)
        ]

        logo = await create_asset(session, user, name="logo", file="demo/logo.png")
        pandoc = await add_engine(session, name="pandoc", api_route="pandoc")
        layout = await create_layout(
            session, user, name="Default", slug="default", asset_uuids=[logo.uuid], engine=pandoc
        )
        await create_theme(session, user, name="Default", font="Latin Modern Roman")
        offer = await create_content_type(
            session,
            user,
            name="Offer",
            prefix="OFF",
            layout=layout,
            fields=OFFER_FIELDS,
        )
        instance = await create_instance(
            session,
            user,
            offer,
            state=states[0],
            serialized={"title": "Website redesign", "client": "ACME", "amount": 1200},
            raw="# Scope\n\nA new landing page.\n",
        )
        await session.commit()

    print(f"  Created user:     {user.email} (id={user.id})")
    print(f"  Created layout:   {layout.slug} ({layout.uuid})")
    print(f"  Created type:     {offer.name} prefix={offer.prefix} ({offer.uuid})")
    print(f"  Created instance: {instance.instance_id} ({instance.uuid})")


if __name__ == "__main__":
    asyncio.run(seed())
