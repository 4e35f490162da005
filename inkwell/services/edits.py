"""
Edit Tracker Service

Records a word-level diff every time a content item's body changes, and
reads the resulting edit log back.

Transactions
============
`record_edit` only adds and flushes; it never commits. Content services
call it inside the same session transaction as the content row update and
commit once, so either both the edit and the new text are stored or
neither is.
"""

import json
import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from inkwell.models import Edit, NodeType
from inkwell.services.diff import Change, diff_words
from inkwell.services.registry import register_node
from inkwell.utils import truncate_ms, utc_now

logger = logging.getLogger(__name__)


def serialize_changes(changes: list[Change]) -> str:
    return json.dumps([change.to_dict() for change in changes])


def deserialize_changes(raw: str) -> list[Change]:
    return [Change.from_dict(item) for item in json.loads(raw)]


def record_edit(
    db: Session,
    content_id: str,
    old_text: str,
    new_text: str,
    timestamp: datetime | None = None,
) -> Edit | None:
    """
    Store the diff between the old and new text of a content item.

    Args:
        db: Session whose transaction also carries the content update
        content_id: Content item being edited
        old_text: Body before the update
        new_text: Body after the update
        timestamp: Edit date (defaults to now)

    Returns:
        The new Edit, or None when the texts are identical (nothing written)
    """
    if old_text == new_text:
        return None

    changes = diff_words(old_text, new_text)

    edit = Edit(
        id=register_node(db, NodeType.EDIT),
        content_id=content_id,
        date=truncate_ms(timestamp) if timestamp else utc_now(),
        changes=serialize_changes(changes),
    )
    db.add(edit)
    db.flush()

    logger.debug(f"Recorded edit {edit.id} with {len(changes)} segments for {content_id}")
    return edit


def list_edits(db: Session, content_id: str) -> list[Edit]:
    """All edits of a content item, most recent first."""
    stmt = (
        select(Edit)
        .where(Edit.content_id == content_id)
        .order_by(Edit.date.desc())
    )
    return list(db.execute(stmt).scalars().all())


def get_edit(db: Session, edit_id: str) -> Edit | None:
    return db.execute(select(Edit).where(Edit.id == edit_id)).scalar_one_or_none()
