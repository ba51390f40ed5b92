"""
Courseware Backend — Course SQLAlchemy Model
==============================================

What:  ORM record for the `courses` table.
How:   Scalar fields map to typed columns; the nested sequences
       (description, instructor, certificate) are stored as JSON documents.
Who:   Used by SQLAlchemyResourceStore for find_all / find_by_id / insert.

Column names match the Python attribute names of `CourseCreate`, which is
how the generic store copies values in and out without a per-resource mapper.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, Float, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from courseware.database import Base


class CourseRecord(Base):
    """
    A stored course.

    Lifecycle:
        Inserted once by the create operation; never updated or deleted.
        `id` is assigned at insert time and is the only lookup key.
    """

    __tablename__ = "courses"

    # ── Primary Key ───────────────────────────────────────────────────────
    # Generated client-side so the id is known as soon as the row is flushed,
    # on PostgreSQL and SQLite alike
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        comment="Storage-assigned identifier",
    )

    # ── Course Fields (all optional) ──────────────────────────────────────
    title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[list | None] = mapped_column(
        JSON,
        nullable=True,
        comment="Ordered list of {about, learning[], materials[]}",
    )
    duration: Mapped[float | None] = mapped_column(Float, nullable=True)
    rating: Mapped[float | None] = mapped_column(Float, nullable=True)
    level: Mapped[str | None] = mapped_column(String(100), nullable=True)
    instructor: Mapped[list | None] = mapped_column(
        JSON,
        nullable=True,
        comment="Ordered list of {user, title}",
    )
    language: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_updated: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    course_type: Mapped[str | None] = mapped_column(Text, nullable=True)
    enrolled: Mapped[float | None] = mapped_column(Float, nullable=True)
    certificate: Mapped[list | None] = mapped_column(
        JSON,
        nullable=True,
        comment="Ordered list of {is_locked}",
    )

    # ── Bookkeeping ───────────────────────────────────────────────────────
    # Not part of the resource; gives listings a natural insertion order
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("idx_courses_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<CourseRecord(id={self.id}, title={self.title!r})>"
