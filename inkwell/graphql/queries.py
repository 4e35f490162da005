"""
GraphQL Query Resolvers

Defines all read operations (queries) for the GraphQL API.
Each resolver reads through the request's DataLoaders or, for paginated
lists, through the pager service, and converts rows to GraphQL types.

Lookups by id return null when nothing visible matches. Journal entries
and drafts are private, so listing them requires authentication.
"""

import strawberry
from strawberry.types import Info

from inkwell.exceptions import AuthenticationError
from inkwell.graphql.context import GraphQLContext
from inkwell.graphql.nodes import load_node
from inkwell.graphql.types import (
    AuthorType,
    BlogPostConnection,
    BlogPostEdge,
    BlogPostType,
    DraftConnection,
    DraftEdge,
    DraftType,
    JournalEntryConnection,
    JournalEntryEdge,
    JournalEntryType,
    Node,
    PagerInput,
    author_to_graphql,
    blog_post_to_graphql,
    draft_to_graphql,
    journal_entry_to_graphql,
    to_connection,
    to_pager_args,
)
from inkwell.services.authors import get_author_by_username, list_authors
from inkwell.services.content import (
    BLOG_POSTS,
    DRAFTS,
    JOURNAL_ENTRIES,
    blog_posts_query,
    drafts_query,
    journal_entries_query,
)
from inkwell.services.pagination import DATE_CURSOR, paginate


def require_viewer(info: Info[GraphQLContext, None]) -> str:
    """Helper to require authentication and return the viewer's id."""
    viewer_id = info.context.viewer_id
    if viewer_id is None:
        raise AuthenticationError("Authentication required")
    return viewer_id


@strawberry.type
class Query:
    """
    GraphQL Query type containing all read operations.

    All resolvers receive an `info` parameter that contains the
    GraphQL context with database session, identity and loaders.
    """

    @strawberry.field(description="Fetch any object by its global id")
    async def node(self, info: Info[GraphQLContext, None], id: strawberry.ID) -> Node | None:
        return await load_node(info, id)

    @strawberry.field(description="The authenticated author, if any")
    async def viewer(self, info: Info[GraphQLContext, None]) -> AuthorType | None:
        viewer_id = info.context.viewer_id
        if viewer_id is None:
            return None

        author = await info.context.loaders.authors.load(viewer_id)
        if author is None:
            return None

        return author_to_graphql(author)

    @strawberry.field(description="Get an author by username (case-insensitive)")
    def author(self, info: Info[GraphQLContext, None], name: str) -> AuthorType | None:
        author = get_author_by_username(info.context.db, name)
        if author is None:
            return None

        info.context.loaders.authors.prime(author.id, author)
        return author_to_graphql(author)

    @strawberry.field(description="Get all authors")
    def authors(self, info: Info[GraphQLContext, None]) -> list[AuthorType]:
        authors = list_authors(info.context.db)
        info.context.loaders.prime_rows(info.context.loaders.authors, authors)
        return [author_to_graphql(a) for a in authors]

    @strawberry.field(description="Get a single blog post by ID")
    async def blog_post(
        self, info: Info[GraphQLContext, None], id: strawberry.ID
    ) -> BlogPostType | None:
        post = await info.context.loaders.blog_posts.load(id)
        if post is None:
            return None

        return blog_post_to_graphql(post)

    @strawberry.field(description="Get a page of blog posts, newest first")
    def blog_posts(
        self,
        info: Info[GraphQLContext, None],
        pager: PagerInput | None = None,
        author_id: strawberry.ID | None = None,
    ) -> BlogPostConnection:
        """
        Get blog posts visible to the viewer.

        Args:
            pager: Cursor pagination arguments
            author_id: Only posts by this author

        Returns:
            Connection of blog posts
        """
        ctx = info.context
        page = paginate(
            ctx.db,
            blog_posts_query(ctx.viewer_id, author_id=author_id),
            BLOG_POSTS.sort_column,
            to_pager_args(pager),
            DATE_CURSOR,
        )
        ctx.loaders.prime_rows(ctx.loaders.blog_posts, page.nodes)

        return to_connection(page, BlogPostConnection, BlogPostEdge, blog_post_to_graphql)

    @strawberry.field(description="Get one of the viewer's journal entries by ID")
    async def journal_entry(
        self, info: Info[GraphQLContext, None], id: strawberry.ID
    ) -> JournalEntryType | None:
        entry = await info.context.loaders.journal_entries.load(id)
        if entry is None:
            return None

        return journal_entry_to_graphql(entry)

    @strawberry.field(description="Get a page of the viewer's journal entries")
    def journal_entries(
        self,
        info: Info[GraphQLContext, None],
        pager: PagerInput | None = None,
    ) -> JournalEntryConnection:
        ctx = info.context
        viewer_id = require_viewer(info)

        page = paginate(
            ctx.db,
            journal_entries_query(viewer_id),
            JOURNAL_ENTRIES.sort_column,
            to_pager_args(pager),
            DATE_CURSOR,
        )
        ctx.loaders.prime_rows(ctx.loaders.journal_entries, page.nodes)

        return to_connection(
            page, JournalEntryConnection, JournalEntryEdge, journal_entry_to_graphql
        )

    @strawberry.field(description="Get one of the viewer's drafts by ID")
    async def draft(
        self, info: Info[GraphQLContext, None], id: strawberry.ID
    ) -> DraftType | None:
        draft = await info.context.loaders.drafts.load(id)
        if draft is None:
            return None

        return draft_to_graphql(draft)

    @strawberry.field(description="Get a page of the viewer's drafts")
    def drafts(
        self,
        info: Info[GraphQLContext, None],
        pager: PagerInput | None = None,
    ) -> DraftConnection:
        ctx = info.context
        viewer_id = require_viewer(info)

        page = paginate(
            ctx.db,
            drafts_query(viewer_id),
            DRAFTS.sort_column,
            to_pager_args(pager),
            DATE_CURSOR,
        )
        ctx.loaders.prime_rows(ctx.loaders.drafts, page.nodes)

        return to_connection(page, DraftConnection, DraftEdge, draft_to_graphql)
