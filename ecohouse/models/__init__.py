"""
Model package.

IMPORTANT (Alembic / SQLModel):
- Alembic autogenerate relies on `SQLModel.metadata`, which is populated only
  when the table models are imported.
- `alembic/env.py` imports `ecohouse.models`, so this module must import all
  SQLModel `table=True` models to register them.
"""

from ecohouse.house.models import House, HouseMember  # noqa: F401
from ecohouse.profile.models import UserProfile  # noqa: F401
