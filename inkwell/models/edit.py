"""
Edit Model

One immutable entry of a content item's edit log. `changes` holds the full
word-level diff from the previous text to the new text, serialized as JSON:

    [{"text": "World "}, {"text": "one", "removed": true},
     {"text": "two", "added": true}]

Each record stands on its own; nothing needs to be replayed to read one.
Rows are never updated and only disappear when their content item is
deleted (ON DELETE CASCADE on content_id).
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from inkwell.database import Base
from inkwell.utils import utc_now


class Edit(Base):
    """
    Edit record.

    Table: edits

    Indexes:
    - content_id: Edit history lookups per content item
    """

    __tablename__ = "edits"

    id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("nodes.id", ondelete="CASCADE"),
        primary_key=True,
    )

    content_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("content.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )

    date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )

    changes: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="JSON list of {text, added?, removed?} segments"
    )

    def __repr__(self) -> str:
        return f"Edit(id='{self.id}', content_id='{self.content_id}')"
