"""atlas_db: shared database library (SQLAlchemy/Alembic).

Public exports
--------------
- ``Base`` and ``metadata`` for Alembic autogenerate/targeting
- ORM models in ``atlas_db.models.finance`` (re-exported for convenience)
- Engine/session helpers in ``atlas_db.client``
"""

from __future__ import annotations

from .models.finance import Base, FinanceTransactionRow

# Re-export SQLAlchemy metadata for Alembic's env.py
metadata = Base.metadata

__all__ = [
    "Base",
    "metadata",
    "FinanceTransactionRow",
]
