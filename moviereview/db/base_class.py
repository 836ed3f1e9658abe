# moviereview/db/base_class.py
from __future__ import annotations

"""
# Movie Review API — SQLAlchemy Base & Mixins

SQLAlchemy 2.0 declarative **Base** with:
- Global **naming conventions** (stable constraint names)
- Automatic **snake_case `__tablename__`** (models may override)
- Helpful `__repr__` for debugging/observability
- Common mixins:
  - `PKMixin` — BIGINT surrogate primary key (INTEGER on SQLite so rowid aliasing works)
  - `CreatedAtMixin` — `created_at` set once at insert (UTC, app-side)

Usage:
    from moviereview.db.base_class import Base, PKMixin, CreatedAtMixin

    class Movie(PKMixin, CreatedAtMixin, Base):
        title: Mapped[str] = mapped_column(String(255))
"""

from datetime import datetime, timezone
import re

from sqlalchemy import BigInteger, DateTime, Integer, MetaData
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column

# ──────────────────────────────────────────────────────────────────────────────
# 🏷️ Naming conventions
# ──────────────────────────────────────────────────────────────────────────────

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# BIGINT everywhere except SQLite, which only autoincrements INTEGER PRIMARY KEY
BigIntPK = BigInteger().with_variant(Integer, "sqlite")


def utcnow() -> datetime:
    """Timezone-aware UTC now (microsecond resolution, unlike most server clocks' now())."""
    return datetime.now(timezone.utc)


def _to_snake(name: str) -> str:
    """Convert `CamelCase` / `PascalCase` to `snake_case` for table names."""
    s1 = re.sub("(.)([A-Z][a-z]+)", r"\1_\2", name)
    return re.sub("([a-z0-9])([A-Z])", r"\1_\2", s1).lower()


# ──────────────────────────────────────────────────────────────────────────────
# 🧱 Declarative Base
# ──────────────────────────────────────────────────────────────────────────────

class Base(DeclarativeBase):
    """Global declarative base for Movie Review models."""
    metadata = MetaData(naming_convention=NAMING_CONVENTION)

    @declared_attr.directive
    def __tablename__(cls) -> str:  # type: ignore[override]
        return _to_snake(cls.__name__)

    def __repr__(self) -> str:  # pragma: no cover (repr convenience)
        attrs: list[str] = []
        for key in ("id", "title", "username", "movie_id", "user_id", "rating"):
            value = self.__dict__.get(key)
            if value is not None:
                attrs.append(f"{key}={value!r}")
        return f"{self.__class__.__name__}({', '.join(attrs)})"


# ──────────────────────────────────────────────────────────────────────────────
# 🧩 Common mixins
# ──────────────────────────────────────────────────────────────────────────────

class PKMixin:
    """Surrogate BIGINT primary key (auto-increment)."""
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)


class CreatedAtMixin:
    """`created_at` is assigned once by the application at insert and never updated."""
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )


__all__ = [
    "Base",
    "PKMixin",
    "CreatedAtMixin",
    "BigIntPK",
    "NAMING_CONVENTION",
    "utcnow",
]
