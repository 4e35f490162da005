"""
GraphQL Types Package

This package contains all GraphQL type definitions that map to our
SQLAlchemy models. Types are defined using Strawberry's decorator syntax.

Types defined here:
- Node / Content: Interfaces for globally identified objects and writing
- AuthorType: Author with their blog posts
- BlogPostType, JournalEntryType, DraftType: The three content kinds
- EditType / EditChangeType: Edit log entries and their diff segments
- PagerInput / PageInfo: Cursor pagination
- Various Input types for mutations
- Connection types for pagination
"""

from inkwell.graphql.types.author import (
    AuthorType,
    CreateAuthorInput,
    UpdateAuthorInput,
    author_to_graphql,
)
from inkwell.graphql.types.content import (
    BlogPostConnection,
    BlogPostEdge,
    BlogPostType,
    Content,
    CreateBlogPostInput,
    CreateDraftInput,
    CreateJournalEntryInput,
    DraftConnection,
    DraftEdge,
    DraftType,
    EncryptionCipher,
    EncryptionParamsInput,
    EncryptionParamsType,
    JournalEntryConnection,
    JournalEntryEdge,
    JournalEntryType,
    UpdateBlogPostInput,
    UpdateDraftInput,
    UpdateJournalEntryInput,
    blog_post_to_graphql,
    draft_to_graphql,
    journal_entry_to_graphql,
)
from inkwell.graphql.types.edit import EditChangeType, EditType, edit_to_graphql
from inkwell.graphql.types.node import Node
from inkwell.graphql.types.pagination import (
    PageInfoType,
    PagerInput,
    to_connection,
    to_pager_args,
)

__all__ = [
    # Interfaces
    "Node",
    "Content",
    # Author types
    "AuthorType",
    "CreateAuthorInput",
    "UpdateAuthorInput",
    "author_to_graphql",
    # Content types
    "BlogPostType",
    "BlogPostEdge",
    "BlogPostConnection",
    "CreateBlogPostInput",
    "UpdateBlogPostInput",
    "JournalEntryType",
    "JournalEntryEdge",
    "JournalEntryConnection",
    "CreateJournalEntryInput",
    "UpdateJournalEntryInput",
    "EncryptionCipher",
    "EncryptionParamsType",
    "EncryptionParamsInput",
    "DraftType",
    "DraftEdge",
    "DraftConnection",
    "CreateDraftInput",
    "UpdateDraftInput",
    "blog_post_to_graphql",
    "journal_entry_to_graphql",
    "draft_to_graphql",
    # Edit types
    "EditType",
    "EditChangeType",
    "edit_to_graphql",
    # Pagination
    "PagerInput",
    "PageInfoType",
    "to_pager_args",
    "to_connection",
]
