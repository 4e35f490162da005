"""
Node Registry Service

Allocates globally unique ids and answers "what type is this id?".

Every author, content item and edit id is registered here first, then used
as the primary key of the entity's own row. The type lookup is not cached
at module level: per-request caching is done by the `node_types` DataLoader,
which calls `get_node_types` once per batch.
"""

import logging
from collections.abc import Iterable

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from inkwell.models import Node, NodeType, new_node_id

logger = logging.getLogger(__name__)


def register_node(db: Session, node_type: NodeType) -> str:
    """
    Register a new id for an entity of the given type.

    The node row is flushed (not committed) so it exists before any foreign
    key points at it; the caller's transaction decides whether it survives.

    Returns:
        The new id
    """
    node = Node(id=new_node_id(), type=node_type.value)
    db.add(node)
    db.flush()
    logger.debug(f"Registered {node_type.value} node {node.id}")
    return node.id


def get_node_types(db: Session, node_ids: Iterable[str]) -> dict[str, NodeType]:
    """
    Look up the type tags of many ids in one query.

    Ids that are not registered are missing from the result.
    """
    node_ids = list(node_ids)
    if not node_ids:
        return {}

    stmt = select(Node.id, Node.type).where(Node.id.in_(node_ids))
    return {node_id: NodeType(type_) for node_id, type_ in db.execute(stmt)}


def get_node_type(db: Session, node_id: str) -> NodeType | None:
    return get_node_types(db, [node_id]).get(node_id)


def delete_nodes(db: Session, node_ids: Iterable[str]) -> int:
    """
    Delete registry rows; the database cascades to the entities keyed on them.

    Returns:
        Number of registry rows deleted
    """
    node_ids = list(node_ids)
    if not node_ids:
        return 0

    result = db.execute(
        delete(Node).where(Node.id.in_(node_ids)),
        execution_options={"synchronize_session": False},
    )
    return result.rowcount
