"""
GraphQL Node Interface

Every object with a global id (authors, content items, edits) implements
Node, so any of them can be fetched back with the `node(id)` query.
"""

import strawberry


@strawberry.interface(description="An object with a globally unique id")
class Node:
    id: strawberry.ID
