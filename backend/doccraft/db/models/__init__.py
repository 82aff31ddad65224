"""
Models package — re-exports Base and all models.

Import models here so Alembic's `target_metadata = Base.metadata`
picks up every table automatically.

When adding a new model:
    1. Create `doccraft/db/models/<table_name>.py`
    2. Import it here
"""

from doccraft.db.models.base import Base
from doccraft.db.models.organisation import Organisation
from doccraft.db.models.user import User
from doccraft.db.models.state import State
from doccraft.db.models.layout import Layout
from doccraft.db.models.asset import Asset
from doccraft.db.models.layout_asset import LayoutAsset
from doccraft.db.models.content_type import ContentType
from doccraft.db.models.content_type_field import ContentTypeField
from doccraft.db.models.instance import Instance
from doccraft.db.models.build_history import BuildHistory
from doccraft.db.models.counter import Counter
from doccraft.db.models.engine import Engine
from doccraft.db.models.field_type import FieldType
from doccraft.db.models.theme import Theme
from doccraft.db.models.data_template import DataTemplate

__all__ = [
    "Base",
    "Organisation",
    "User",
    "State",
    "Layout",
    "Asset",
    "LayoutAsset",
    "ContentType",
    "ContentTypeField",
    "Instance",
    "BuildHistory",
    "Counter",
    "Engine",
    "FieldType",
    "Theme",
    "DataTemplate",
]
