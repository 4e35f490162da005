"""
Polymorphic Node Lookup

Resolves any global id to its GraphQL object:

    id --node_types loader--> type tag --dispatch table--> typed loader
       --> row --converter--> GraphQL type

Typed loaders apply the viewer's visibility rules, so an id the viewer may
not see resolves to None just like an unknown id. An edit is only visible
if the content item it belongs to is.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from strawberry.types import Info

from inkwell.graphql.context import GraphQLContext
from inkwell.graphql.loaders import Loaders
from inkwell.graphql.types import (
    Node,
    author_to_graphql,
    blog_post_to_graphql,
    draft_to_graphql,
    edit_to_graphql,
    journal_entry_to_graphql,
)
from inkwell.models import NodeType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NodeResolver:
    loader: Callable[[Loaders], Any]
    convert: Callable[[Any], Node]


NODE_RESOLVERS: dict[NodeType, NodeResolver] = {
    NodeType.AUTHOR: NodeResolver(lambda loaders: loaders.authors, author_to_graphql),
    NodeType.BLOG_POST: NodeResolver(lambda loaders: loaders.blog_posts, blog_post_to_graphql),
    NodeType.JOURNAL_ENTRY: NodeResolver(
        lambda loaders: loaders.journal_entries, journal_entry_to_graphql
    ),
    NodeType.DRAFT: NodeResolver(lambda loaders: loaders.drafts, draft_to_graphql),
    NodeType.EDIT: NodeResolver(lambda loaders: loaders.edits, edit_to_graphql),
}


async def load_row(loaders: Loaders, node_id: str) -> tuple[NodeType, Any] | None:
    """
    Load the row behind a global id, if the viewer may see it.

    Returns:
        (type tag, row), or None for unknown or invisible ids
    """
    node_type = await loaders.node_types.load(node_id)
    if node_type is None:
        return None

    row = await NODE_RESOLVERS[node_type].loader(loaders).load(node_id)
    if row is None:
        return None

    if node_type is NodeType.EDIT and await load_row(loaders, row.content_id) is None:
        return None

    return node_type, row


async def load_node(info: Info[GraphQLContext, None], node_id: str) -> Node | None:
    """Resolve a global id to its GraphQL object, or None."""
    found = await load_row(info.context.loaders, node_id)
    if found is None:
        logger.debug(f"Node {node_id} not found or not visible")
        return None

    node_type, row = found
    return NODE_RESOLVERS[node_type].convert(row)
