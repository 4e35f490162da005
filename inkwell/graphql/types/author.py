"""
GraphQL Author Type

Defines the Author type and the account inputs.
"""

from datetime import datetime

import strawberry
from strawberry.types import Info

from inkwell.graphql.context import GraphQLContext
from inkwell.graphql.types.content import (
    BlogPostConnection,
    BlogPostEdge,
    blog_post_to_graphql,
)
from inkwell.graphql.types.node import Node
from inkwell.graphql.types.pagination import PagerInput, to_connection, to_pager_args
from inkwell.models import Author, BlogPost
from inkwell.services.content import blog_posts_query
from inkwell.services.pagination import DATE_CURSOR, page_from_rows, paginate
from inkwell.utils import as_utc


@strawberry.type
class AuthorType(Node):
    """
    GraphQL type representing an author.

    Maps to the Author SQLAlchemy model; the password hash is never exposed.
    """

    name: str
    username: str
    created_at: datetime

    @strawberry.field(description="Blog posts by this author, newest first")
    async def blog_posts(
        self,
        info: Info[GraphQLContext, None],
        pager: PagerInput | None = None,
    ) -> BlogPostConnection:
        """
        Without a pager, all posts of every author in the response are
        fetched in one batch; with one, a page is queried for this author.
        """
        ctx = info.context
        args = to_pager_args(pager)

        if args.is_empty:
            posts = await ctx.loaders.blog_posts_by_author.load(self.id)
            page = page_from_rows(posts, BlogPost.publish_date, DATE_CURSOR)
        else:
            page = paginate(
                ctx.db,
                blog_posts_query(ctx.viewer_id, author_id=self.id),
                BlogPost.publish_date,
                args,
                DATE_CURSOR,
            )
            ctx.loaders.prime_rows(ctx.loaders.blog_posts, page.nodes)

        return to_connection(page, BlogPostConnection, BlogPostEdge, blog_post_to_graphql)


@strawberry.input
class CreateAuthorInput:
    """
    Input type for signing up.
    """

    name: str
    username: str
    password: str


@strawberry.input
class UpdateAuthorInput:
    """
    Input type for updating the viewer's account.

    `password` is the current password and is always required.
    """

    password: str
    name: str | None = None
    username: str | None = None
    new_password: str | None = None


def author_to_graphql(author: Author) -> AuthorType:
    """Convert SQLAlchemy Author model to GraphQL AuthorType."""
    return AuthorType(
        id=strawberry.ID(author.id),
        name=author.name,
        username=author.username,
        created_at=as_utc(author.created_at),
    )
