"""
Node Model

The shared id/type registry. Every author, content item and edit gets its
id from a row in this table before it is used anywhere else, and the row's
`type` tag tells the GraphQL `node(id)` query which loader to use.

Every other table keys its primary key on `nodes.id` with ON DELETE CASCADE,
so deleting a node removes everything hanging off it.
"""

import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from inkwell.database import Base


class NodeType(str, Enum):
    """
    Type tags stored in the registry.

    The values double as GraphQL type names in error messages and logs.
    """
    AUTHOR = "Author"
    BLOG_POST = "BlogPost"
    JOURNAL_ENTRY = "JournalEntry"
    DRAFT = "Draft"
    EDIT = "Edit"


def new_node_id() -> str:
    return str(uuid.uuid4())


class Node(Base):
    """
    Registry entry for a globally unique id.

    Table: nodes
    """

    __tablename__ = "nodes"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=new_node_id,
    )

    type: Mapped[str] = mapped_column(
        String(32),
        index=True,
        nullable=False,
        comment="Type tag of the entity owning this id"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"Node(id='{self.id}', type='{self.type}')"
