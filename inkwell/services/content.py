"""
Content Service

Create, update and delete blog posts, journal entries and drafts, and the
base queries the pager runs against.

Every kind goes through the same three functions; a ContentKind describes
what differs (model class, node type, sort column, wording of errors).

Updates
=======
An update that changes the body records an Edit (see services/edits.py)
and writes the new row in the same transaction:

    record_edit()   -> INSERT nodes, INSERT edits   (flushed)
    item.content =  -> UPDATE content               (flushed at commit)
    db.commit()     -> all or nothing

If anything fails the session is rolled back and the error propagates.

Visibility
==========
- Blog posts: published posts are public; unpublished posts are only
  visible to their author
- Journal entries and drafts: only visible to their author
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy import Select, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import InstrumentedAttribute, Session

from inkwell.exceptions import AuthorizationError, ValidationError
from inkwell.models import BlogPost, Content, Draft, Edit, JournalEntry, NodeType
from inkwell.services.edits import record_edit
from inkwell.services.registry import delete_nodes, register_node
from inkwell.utils import truncate_ms, utc_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContentKind:
    model: type[Content]
    node_type: NodeType
    sort_column: InstrumentedAttribute
    label: str


BLOG_POSTS = ContentKind(BlogPost, NodeType.BLOG_POST, BlogPost.publish_date, "post")
JOURNAL_ENTRIES = ContentKind(JournalEntry, NodeType.JOURNAL_ENTRY, JournalEntry.date, "journal entry")
DRAFTS = ContentKind(Draft, NodeType.DRAFT, Draft.date, "draft")

# Columns holding timestamps supplied by clients; stored at ms precision
TIMESTAMP_FIELDS = {"publish_date", "date"}

SUPPORTED_CIPHERS = {"AES_256_GCM"}


# =============================================================================
# Base Queries
# =============================================================================
def blog_posts_query(viewer_id: str | None, author_id: str | None = None) -> Select:
    """Blog posts the viewer may see, optionally limited to one author."""
    stmt = select(BlogPost)
    if viewer_id is None:
        stmt = stmt.where(BlogPost.is_published.is_(True))
    else:
        stmt = stmt.where(
            or_(BlogPost.is_published.is_(True), BlogPost.author_id == viewer_id)
        )
    if author_id is not None:
        stmt = stmt.where(BlogPost.author_id == author_id)
    return stmt


def journal_entries_query(viewer_id: str) -> Select:
    return select(JournalEntry).where(JournalEntry.author_id == viewer_id)


def drafts_query(viewer_id: str) -> Select:
    return select(Draft).where(Draft.author_id == viewer_id)


# =============================================================================
# Validation
# =============================================================================
def _require_title(title: str) -> str:
    if not title or not title.strip():
        raise ValidationError("Title should not be blank.")
    return title


def validate_encryption_params(params: dict[str, Any] | None) -> str | None:
    """
    Check journal entry encryption params and serialize them for storage.

    Raises:
        ValidationError: Missing/unsupported cipher or missing iv
    """
    if params is None:
        return None

    cipher = params.get("cipher")
    if not cipher:
        raise ValidationError("Missing `cipher` in encryption params.")
    if cipher not in SUPPORTED_CIPHERS:
        raise ValidationError(f"Unsupported cipher `{cipher}`.")

    iv = params.get("iv")
    if not iv:
        raise ValidationError(
            "Missing `iv` in encryption params required for cipher AES_256_GCM."
        )
    if not isinstance(iv, str):
        raise ValidationError("Parameter `iv` for cipher AES_256_GCM must be a string.")

    return json.dumps({"cipher": cipher, "iv": iv})


def _normalize_fields(fields: dict[str, Any]) -> dict[str, Any]:
    """Drop unset fields and bring client timestamps to UTC milliseconds."""
    normalized = {}
    for key, value in fields.items():
        if value is None:
            continue
        if key in TIMESTAMP_FIELDS and isinstance(value, datetime):
            value = truncate_ms(value)
        normalized[key] = value
    return normalized


def _check_owner(item: Content, viewer_id: str, kind: ContentKind, action: str) -> None:
    if item.author_id != viewer_id:
        raise AuthorizationError(f"You cannot {action} another author's {kind.label}.")


# =============================================================================
# Write Operations
# =============================================================================
def create_content(
    db: Session,
    kind: ContentKind,
    author_id: str,
    title: str,
    content: str,
    **fields: Any,
) -> Content:
    """
    Create a content item owned by `author_id`.

    The node, the `content` row and the subtype row are written in one
    transaction.

    Args:
        fields: Kind-specific columns (e.g. is_published, publish_date, date)
    """
    _require_title(title)

    try:
        item = kind.model(
            id=register_node(db, kind.node_type),
            author_id=author_id,
            title=title,
            content=content,
            **_normalize_fields(fields),
        )
        db.add(item)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Failed to create {kind.label}")
        raise

    db.refresh(item)
    logger.info(f"Created {kind.node_type.value} {item.id} for author {author_id}")
    return item


def update_content(
    db: Session,
    kind: ContentKind,
    item: Content,
    viewer_id: str,
    title: str | None = None,
    content: str | None = None,
    **fields: Any,
) -> Content:
    """
    Update a content item, recording an edit if the body changed.

    Raises:
        AuthorizationError: If the viewer does not own the item
        ValidationError: Blank title
    """
    _check_owner(item, viewer_id, kind, "edit")
    if title is not None:
        _require_title(title)

    try:
        if content is not None and content != item.content:
            record_edit(db, item.id, item.content, content, utc_now())
            item.content = content

        if title is not None and title != item.title:
            item.title = title

        for key, value in _normalize_fields(fields).items():
            setattr(item, key, value)

        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Failed to update {kind.label} {item.id}")
        raise

    db.refresh(item)
    logger.info(f"Updated {kind.node_type.value} {item.id}")
    return item


def delete_content(db: Session, kind: ContentKind, item: Content, viewer_id: str) -> str:
    """
    Delete a content item and its edit log.

    Deleting the registry nodes cascades to the content, subtype and edit
    rows; the edits' own nodes are removed alongside.

    Returns:
        The deleted item's id
    """
    _check_owner(item, viewer_id, kind, "delete")
    item_id = item.id

    try:
        edit_ids = db.execute(
            select(Edit.id).where(Edit.content_id == item_id)
        ).scalars().all()
        delete_nodes(db, [*edit_ids, item_id])
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Failed to delete {kind.label} {item_id}")
        raise

    db.expunge(item)
    logger.info(f"Deleted {kind.node_type.value} {item_id} ({len(edit_ids)} edits)")
    return item_id
