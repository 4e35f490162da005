"""
GraphQL Edit Types

One entry of a content item's edit log and the diff segments it holds.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Annotated, Optional

import strawberry
from strawberry.types import Info

from inkwell.graphql.context import GraphQLContext
from inkwell.graphql.types.node import Node
from inkwell.models import Edit
from inkwell.services.diff import Change
from inkwell.services.edits import deserialize_changes
from inkwell.utils import as_utc

if TYPE_CHECKING:
    from inkwell.graphql.types.content import Content


@strawberry.type
class EditChangeType:
    """
    One segment of a word diff.

    Unchanged text has neither flag; `removed` text was only in the old
    version and `added` text is only in the new one.
    """

    text: str
    added: bool | None = None
    removed: bool | None = None


@strawberry.type
class EditType(Node):
    """
    GraphQL type representing a recorded change to a content item's body.
    """

    date: datetime
    changes: list[EditChangeType]
    content_id: strawberry.Private[str]

    @strawberry.field(description="The content item this edit belongs to")
    async def content(
        self, info: Info[GraphQLContext, None]
    ) -> Optional[Annotated["Content", strawberry.lazy("inkwell.graphql.types.content")]]:
        from inkwell.graphql.nodes import load_node

        return await load_node(info, self.content_id)


def change_to_graphql(change: Change) -> EditChangeType:
    return EditChangeType(
        text=change.text,
        added=True if change.added else None,
        removed=True if change.removed else None,
    )


def edit_to_graphql(edit: Edit) -> EditType:
    """Convert SQLAlchemy Edit model to GraphQL EditType."""
    return EditType(
        id=strawberry.ID(edit.id),
        date=as_utc(edit.date),
        changes=[change_to_graphql(c) for c in deserialize_changes(edit.changes)],
        content_id=edit.content_id,
    )
