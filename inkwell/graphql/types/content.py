"""
GraphQL Content Types

Blog posts, journal entries and drafts all implement the Content
interface: a title, a body, an author and the edit log of the body.
"""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Annotated

import strawberry
from strawberry.types import Info

from inkwell.graphql.context import GraphQLContext
from inkwell.graphql.types.edit import EditType, edit_to_graphql
from inkwell.graphql.types.node import Node
from inkwell.graphql.types.pagination import PageInfoType
from inkwell.models import BlogPost, Draft, JournalEntry
from inkwell.utils import as_utc

if TYPE_CHECKING:
    from inkwell.graphql.types.author import AuthorType


@strawberry.interface(description="A piece of writing owned by an author")
class Content(Node):
    title: str
    content: str
    updated_at: datetime
    author_id: strawberry.Private[str]

    @strawberry.field(description="Author of this item")
    async def author(
        self, info: Info[GraphQLContext, None]
    ) -> Annotated["AuthorType", strawberry.lazy("inkwell.graphql.types.author")]:
        from inkwell.graphql.types.author import author_to_graphql

        author = await info.context.loaders.authors.load(self.author_id)
        return author_to_graphql(author)

    @strawberry.field(description="Changes made to the body, most recent first")
    async def edits(self, info: Info[GraphQLContext, None]) -> list[EditType]:
        edits = await info.context.loaders.edits_by_content.load(self.id)
        return [edit_to_graphql(e) for e in edits]


@strawberry.enum
class EncryptionCipher(Enum):
    AES_256_GCM = "AES_256_GCM"


@strawberry.type
class EncryptionParamsType:
    """How an encrypted journal entry's body was encrypted."""

    cipher: EncryptionCipher
    iv: str


@strawberry.type
class BlogPostType(Content):
    """
    GraphQL type representing a blog post.

    Unpublished posts are only returned to their author.
    """

    is_published: bool
    publish_date: datetime


@strawberry.type
class JournalEntryType(Content):
    """
    GraphQL type representing a private journal entry.

    When `encryptionParams` is set, `content` is base64 ciphertext.
    """

    date: datetime
    encryption_params: EncryptionParamsType | None = None


@strawberry.type
class DraftType(Content):
    """GraphQL type representing a private draft."""

    date: datetime


# =============================================================================
# Connections
# =============================================================================
@strawberry.type
class BlogPostEdge:
    node: BlogPostType
    cursor: str


@strawberry.type
class BlogPostConnection:
    """
    Paginated list of blog posts, newest first.

    Follows the Connection pattern for GraphQL pagination.
    """

    total: int
    before_edges: list[BlogPostEdge]
    after_edges: list[BlogPostEdge]
    page_info: PageInfoType


@strawberry.type
class JournalEntryEdge:
    node: JournalEntryType
    cursor: str


@strawberry.type
class JournalEntryConnection:
    """Paginated list of the viewer's journal entries, newest first."""

    total: int
    before_edges: list[JournalEntryEdge]
    after_edges: list[JournalEntryEdge]
    page_info: PageInfoType


@strawberry.type
class DraftEdge:
    node: DraftType
    cursor: str


@strawberry.type
class DraftConnection:
    """Paginated list of the viewer's drafts, most recently edited first."""

    total: int
    before_edges: list[DraftEdge]
    after_edges: list[DraftEdge]
    page_info: PageInfoType


# =============================================================================
# Inputs
# =============================================================================
@strawberry.input
class EncryptionParamsInput:
    cipher: EncryptionCipher
    iv: str | None = None


@strawberry.input
class CreateBlogPostInput:
    """
    Input type for creating a blog post.
    """

    title: str
    content: str
    is_published: bool = False
    publish_date: datetime | None = None


@strawberry.input
class UpdateBlogPostInput:
    """
    Input type for updating a blog post.
    All fields except `id` are optional.
    """

    id: strawberry.ID
    title: str | None = None
    content: str | None = None
    is_published: bool | None = None
    publish_date: datetime | None = None


@strawberry.input
class CreateJournalEntryInput:
    """
    Input type for creating a journal entry.
    """

    title: str
    content: str
    date: datetime | None = None
    encryption_params: EncryptionParamsInput | None = None


@strawberry.input
class UpdateJournalEntryInput:
    id: strawberry.ID
    title: str | None = None
    content: str | None = None
    date: datetime | None = None
    encryption_params: EncryptionParamsInput | None = None


@strawberry.input
class CreateDraftInput:
    title: str
    content: str


@strawberry.input
class UpdateDraftInput:
    """
    Input type for updating a draft. Without a `date`, the draft's date is
    set to the time of the update.
    """

    id: strawberry.ID
    title: str | None = None
    content: str | None = None
    date: datetime | None = None


# =============================================================================
# Converters
# =============================================================================
def blog_post_to_graphql(post: BlogPost) -> BlogPostType:
    """Convert SQLAlchemy BlogPost model to GraphQL BlogPostType."""
    return BlogPostType(
        id=strawberry.ID(post.id),
        title=post.title,
        content=post.content,
        updated_at=as_utc(post.updated_at),
        author_id=post.author_id,
        is_published=post.is_published,
        publish_date=as_utc(post.publish_date),
    )


def journal_entry_to_graphql(entry: JournalEntry) -> JournalEntryType:
    """Convert SQLAlchemy JournalEntry model to GraphQL JournalEntryType."""
    encryption = entry.encryption
    return JournalEntryType(
        id=strawberry.ID(entry.id),
        title=entry.title,
        content=entry.content,
        updated_at=as_utc(entry.updated_at),
        author_id=entry.author_id,
        date=as_utc(entry.date),
        encryption_params=(
            EncryptionParamsType(
                cipher=EncryptionCipher(encryption["cipher"]),
                iv=encryption["iv"],
            )
            if encryption
            else None
        ),
    )


def draft_to_graphql(draft: Draft) -> DraftType:
    """Convert SQLAlchemy Draft model to GraphQL DraftType."""
    return DraftType(
        id=strawberry.ID(draft.id),
        title=draft.title,
        content=draft.content,
        updated_at=as_utc(draft.updated_at),
        author_id=draft.author_id,
        date=as_utc(draft.date),
    )
