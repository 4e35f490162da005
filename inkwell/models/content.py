"""
Content Models

Blog posts, journal entries and drafts share one `content` table holding
the author, title and body, plus a small table per kind with the fields
only that kind has.

WHY Joined-Table Inheritance?
=============================
SQLAlchemy maps `BlogPost(Content)` onto both tables. Adding a BlogPost to
the session and flushing inserts the `content` row and the `blog_posts` row
in one unit of work, so creating a content item is a single atomic write and
no resolver has to orchestrate multi-table inserts by hand.

    content          (id, kind, author_id, title, content, ...)
      ├── blog_posts       (id, is_published, publish_date)
      ├── journal_entries  (id, date, encryption_params)
      └── drafts           (id, date)

Sort Keys
=========
Each kind is paginated newest first by one timestamp column
(`publish_date` or `date`). Those columns are written in UTC, truncated to
milliseconds, so a timestamp cursor always matches the stored value.
"""

import json
from datetime import datetime
from typing import Any

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from inkwell.database import Base
from inkwell.models.node import NodeType
from inkwell.utils import utc_now


class Content(Base):
    """
    Common part of every content item.

    Table: content

    `kind` is the polymorphic discriminator and always equals the node type
    tag of the item's id.
    """

    __tablename__ = "content"

    id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("nodes.id", ondelete="CASCADE"),
        primary_key=True,
    )

    kind: Mapped[str] = mapped_column(String(32), nullable=False)

    author_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("authors.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )

    title: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
    )

    # Markdown, or base64 ciphertext for encrypted journal entries
    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    __mapper_args__ = {
        "polymorphic_on": "kind",
    }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id='{self.id}', title='{self.title}')"


class BlogPost(Content):
    """
    A blog post. Visible to everyone once published.

    Table: blog_posts
    """

    __tablename__ = "blog_posts"

    id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("content.id", ondelete="CASCADE"),
        primary_key=True,
    )

    is_published: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    publish_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        index=True,
        nullable=False,
        comment="When the post was (or will be) published"
    )

    __mapper_args__ = {
        "polymorphic_identity": NodeType.BLOG_POST.value,
    }


class JournalEntry(Content):
    """
    A private journal entry, optionally encrypted client-side.

    Table: journal_entries
    """

    __tablename__ = "journal_entries"

    id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("content.id", ondelete="CASCADE"),
        primary_key=True,
    )

    date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        index=True,
        nullable=False,
    )

    # JSON text, e.g. {"cipher": "AES_256_GCM", "iv": "..."}
    encryption_params: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )

    __mapper_args__ = {
        "polymorphic_identity": NodeType.JOURNAL_ENTRY.value,
    }

    @property
    def encryption(self) -> dict[str, Any] | None:
        if self.encryption_params is None:
            return None
        return json.loads(self.encryption_params)


class Draft(Content):
    """
    A private draft. `date` is the last time it was edited.

    Table: drafts
    """

    __tablename__ = "drafts"

    id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("content.id", ondelete="CASCADE"),
        primary_key=True,
    )

    date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        index=True,
        nullable=False,
    )

    __mapper_args__ = {
        "polymorphic_identity": NodeType.DRAFT.value,
    }
