"""
GraphQL Package

This package provides the GraphQL API using Strawberry GraphQL.

Features:
- Node and Content interfaces with polymorphic `node(id)` lookup
- Request-scoped DataLoaders batching every per-id fetch
- Cursor pagination (`first`/`after`, `last`/`before`) on every list
- Word-level edit history on every content item
- Authentication via split JWT (header + httpOnly signature cookie)

Usage:
    The GraphQL endpoint is available at /graphql with an
    interactive GraphiQL playground when enabled in settings.

Example Query:
    query {
        blogPosts(pager: {first: 10}) {
            total
            afterEdges {
                cursor
                node { id title author { name } }
            }
            pageInfo { endCursor hasNextPage }
        }
    }
"""

import strawberry
from strawberry.fastapi import GraphQLRouter

from inkwell.config import get_settings
from inkwell.graphql.context import get_context
from inkwell.graphql.mutations import Mutation
from inkwell.graphql.queries import Query
from inkwell.graphql.types import AuthorType, BlogPostType, DraftType, EditType, JournalEntryType

# Create the GraphQL schema. Types only reachable through interfaces are
# listed explicitly.
schema = strawberry.Schema(
    query=Query,
    mutation=Mutation,
    types=[AuthorType, BlogPostType, JournalEntryType, DraftType, EditType],
)


def create_graphql_router() -> GraphQLRouter:
    """
    Create the GraphQL router for FastAPI.

    Returns:
        GraphQLRouter configured with schema and context
    """
    settings = get_settings()
    return GraphQLRouter(
        schema,
        context_getter=get_context,
        graphql_ide="graphiql" if settings.graphql_ide_enabled else None,
    )


__all__ = ["schema", "create_graphql_router"]
