"""
GraphQL Mutation Resolvers

Defines all write operations (mutations) for the GraphQL API.
Everything except signing up and authenticating requires a logged-in
author; content can only be changed by the author who owns it.
"""

import logging

import strawberry
from strawberry.types import Info

from inkwell.exceptions import AuthenticationError, NotFoundError
from inkwell.graphql.context import GraphQLContext
from inkwell.graphql.queries import require_viewer
from inkwell.graphql.types import (
    AuthorType,
    BlogPostType,
    CreateAuthorInput,
    CreateBlogPostInput,
    CreateDraftInput,
    CreateJournalEntryInput,
    DraftType,
    EncryptionParamsInput,
    JournalEntryType,
    UpdateAuthorInput,
    UpdateBlogPostInput,
    UpdateDraftInput,
    UpdateJournalEntryInput,
    author_to_graphql,
    blog_post_to_graphql,
    draft_to_graphql,
    journal_entry_to_graphql,
)
from inkwell.models import Author, Content
from inkwell.services import authors as author_service
from inkwell.services.content import (
    BLOG_POSTS,
    DRAFTS,
    JOURNAL_ENTRIES,
    ContentKind,
    create_content,
    delete_content,
    update_content,
    validate_encryption_params,
)
from inkwell.services.edits import list_edits
from inkwell.services.security import clear_token_cookies, set_token_cookies
from inkwell.utils import utc_now

logger = logging.getLogger(__name__)


def _get_owned_item(info: Info[GraphQLContext, None], kind: ContentKind, item_id: str) -> Content:
    """Load a content item for writing; ownership is checked by the service."""
    item = info.context.db.get(kind.model, item_id)
    if item is None:
        raise NotFoundError(f"No {kind.label} with id {item_id}.")
    return item


def _encryption_params(params: EncryptionParamsInput | None) -> str | None:
    if params is None:
        return None
    return validate_encryption_params({"cipher": params.cipher.value, "iv": params.iv})


def _forget(info: Info[GraphQLContext, None], kind: ContentKind, item_id: str) -> None:
    """Mark a deleted item as missing in the request's loader caches."""
    loaders = info.context.loaders
    loader = {
        BLOG_POSTS.node_type: loaders.blog_posts,
        JOURNAL_ENTRIES.node_type: loaders.journal_entries,
        DRAFTS.node_type: loaders.drafts,
    }[kind.node_type]
    # clear() raises KeyError for keys this request never loaded
    loader.prime(item_id, None, force=True)
    loaders.node_types.prime(item_id, None, force=True)
    loaders.edits_by_content.prime(item_id, [], force=True)


def _refresh_edits(info: Info[GraphQLContext, None], item_id: str) -> None:
    """Re-read an updated item's edit log into the request's loader caches."""
    loaders = info.context.loaders
    edits = list_edits(info.context.db, item_id)
    loaders.edits_by_content.prime(item_id, edits, force=True)
    loaders.prime_rows(loaders.edits, edits)


@strawberry.type
class Mutation:
    """
    GraphQL Mutation type containing all write operations.

    Authenticated mutations read the author id from the request identity
    (JWT in the Authorization header, signature optionally in a cookie).
    """

    # =========================================================================
    # Account Mutations
    # =========================================================================

    @strawberry.mutation(description="Sign up as a new author")
    def create_author(
        self,
        info: Info[GraphQLContext, None],
        input: CreateAuthorInput,
    ) -> AuthorType:
        author = author_service.create_author(
            info.context.db,
            name=input.name,
            username=input.username,
            password=input.password,
        )
        return author_to_graphql(author)

    @strawberry.mutation(description="Update the viewer's name, username or password")
    def update_author(
        self,
        info: Info[GraphQLContext, None],
        input: UpdateAuthorInput,
    ) -> AuthorType:
        """
        Update the authenticated author. The current password is required.

        The token carries the author's name and username, so a fresh one is
        issued in the cookies.
        """
        db = info.context.db
        author = db.get(Author, require_viewer(info))
        if author is None:
            raise AuthenticationError("Authentication required")

        author = author_service.update_author(
            db,
            author,
            password=input.password,
            name=input.name,
            username=input.username,
            new_password=input.new_password,
        )
        set_token_cookies(info.context.response, author_service.issue_token(author))
        info.context.loaders.authors.prime(author.id, author, force=True)

        return author_to_graphql(author)

    @strawberry.mutation(description="Log in; returns a JWT and sets the auth cookies")
    def authenticate(
        self,
        info: Info[GraphQLContext, None],
        username: str,
        password: str,
    ) -> str:
        """
        Authenticate with username and password.

        Returns the full token. The response also sets `jwt.header.payload`
        and the httpOnly `jwt.signature` cookie, so browser clients can send
        only the header and payload in the Authorization header.
        """
        author, token = author_service.authenticate(info.context.db, username, password)
        set_token_cookies(info.context.response, token)
        logger.info(f"Author {author.id} authenticated")
        return token

    @strawberry.mutation(description="Clear the auth cookies")
    def logout(self, info: Info[GraphQLContext, None]) -> bool:
        clear_token_cookies(info.context.response)
        return True

    # =========================================================================
    # Blog Post Mutations
    # =========================================================================

    @strawberry.mutation(description="Create a new blog post")
    def create_blog_post(
        self,
        info: Info[GraphQLContext, None],
        input: CreateBlogPostInput,
    ) -> BlogPostType:
        post = create_content(
            info.context.db,
            BLOG_POSTS,
            author_id=require_viewer(info),
            title=input.title,
            content=input.content,
            is_published=input.is_published,
            publish_date=input.publish_date,
        )
        return blog_post_to_graphql(post)

    @strawberry.mutation(description="Update one of the viewer's blog posts")
    def update_blog_post(
        self,
        info: Info[GraphQLContext, None],
        input: UpdateBlogPostInput,
    ) -> BlogPostType:
        """
        Update a blog post. A changed body is recorded in the edit log.
        """
        viewer_id = require_viewer(info)
        post = _get_owned_item(info, BLOG_POSTS, input.id)

        post = update_content(
            info.context.db,
            BLOG_POSTS,
            post,
            viewer_id,
            title=input.title,
            content=input.content,
            is_published=input.is_published,
            publish_date=input.publish_date,
        )
        _refresh_edits(info, post.id)
        return blog_post_to_graphql(post)

    @strawberry.mutation(description="Delete one of the viewer's blog posts")
    def delete_blog_post(self, info: Info[GraphQLContext, None], id: strawberry.ID) -> strawberry.ID:
        viewer_id = require_viewer(info)
        post = _get_owned_item(info, BLOG_POSTS, id)

        deleted_id = delete_content(info.context.db, BLOG_POSTS, post, viewer_id)
        _forget(info, BLOG_POSTS, deleted_id)
        return strawberry.ID(deleted_id)

    # =========================================================================
    # Journal Entry Mutations
    # =========================================================================

    @strawberry.mutation(description="Create a new journal entry")
    def create_journal_entry(
        self,
        info: Info[GraphQLContext, None],
        input: CreateJournalEntryInput,
    ) -> JournalEntryType:
        viewer_id = require_viewer(info)

        entry = create_content(
            info.context.db,
            JOURNAL_ENTRIES,
            author_id=viewer_id,
            title=input.title,
            content=input.content,
            date=input.date,
            encryption_params=_encryption_params(input.encryption_params),
        )
        return journal_entry_to_graphql(entry)

    @strawberry.mutation(description="Update one of the viewer's journal entries")
    def update_journal_entry(
        self,
        info: Info[GraphQLContext, None],
        input: UpdateJournalEntryInput,
    ) -> JournalEntryType:
        viewer_id = require_viewer(info)
        entry = _get_owned_item(info, JOURNAL_ENTRIES, input.id)

        entry = update_content(
            info.context.db,
            JOURNAL_ENTRIES,
            entry,
            viewer_id,
            title=input.title,
            content=input.content,
            date=input.date,
            encryption_params=_encryption_params(input.encryption_params),
        )
        _refresh_edits(info, entry.id)
        return journal_entry_to_graphql(entry)

    @strawberry.mutation(description="Delete one of the viewer's journal entries")
    def delete_journal_entry(
        self, info: Info[GraphQLContext, None], id: strawberry.ID
    ) -> strawberry.ID:
        viewer_id = require_viewer(info)
        entry = _get_owned_item(info, JOURNAL_ENTRIES, id)

        deleted_id = delete_content(info.context.db, JOURNAL_ENTRIES, entry, viewer_id)
        _forget(info, JOURNAL_ENTRIES, deleted_id)
        return strawberry.ID(deleted_id)

    # =========================================================================
    # Draft Mutations
    # =========================================================================

    @strawberry.mutation(description="Create a new draft")
    def create_draft(
        self,
        info: Info[GraphQLContext, None],
        input: CreateDraftInput,
    ) -> DraftType:
        draft = create_content(
            info.context.db,
            DRAFTS,
            author_id=require_viewer(info),
            title=input.title,
            content=input.content,
        )
        return draft_to_graphql(draft)

    @strawberry.mutation(description="Update one of the viewer's drafts")
    def update_draft(
        self,
        info: Info[GraphQLContext, None],
        input: UpdateDraftInput,
    ) -> DraftType:
        viewer_id = require_viewer(info)
        draft = _get_owned_item(info, DRAFTS, input.id)

        # A draft's date is when it was last worked on
        draft = update_content(
            info.context.db,
            DRAFTS,
            draft,
            viewer_id,
            title=input.title,
            content=input.content,
            date=input.date or utc_now(),
        )
        _refresh_edits(info, draft.id)
        return draft_to_graphql(draft)

    @strawberry.mutation(description="Delete one of the viewer's drafts")
    def delete_draft(self, info: Info[GraphQLContext, None], id: strawberry.ID) -> strawberry.ID:
        viewer_id = require_viewer(info)
        draft = _get_owned_item(info, DRAFTS, id)

        deleted_id = delete_content(info.context.db, DRAFTS, draft, viewer_id)
        _forget(info, DRAFTS, deleted_id)
        return strawberry.ID(deleted_id)
