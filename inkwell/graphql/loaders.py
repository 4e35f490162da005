"""
Request-Scoped DataLoaders

DataLoaders batch and cache database lookups within a single GraphQL
request, preventing N+1 query problems in resolvers.

How a batch works:
==================
1. Resolvers call `await loaders.authors.load(author_id)` during one
   event-loop tick
2. Strawberry's DataLoader collects the keys, dropping duplicates (a
   repeated key gets the same pending future)
3. On the next tick it calls the batch function once with the key list
4. The batch function runs ONE query and returns a list in key order, with
   None for keys that matched nothing
5. Results stay cached for the rest of the request

If a batch query raises, every key in that batch fails with that error.

Priming:
========
A query that returns whole rows for another access path fills the per-id
caches for free: loading all posts of an author primes `blog_posts` with
each post, and a connection page primes the per-id loader of its kind.
`prime()` never overwrites a cached entry.

Scope:
======
One Loaders container is built per request by create_loaders(); nothing is
shared across requests, so caches never need invalidating. Loaders for
private kinds (journal entries, drafts) only return the viewer's rows.
"""

import logging
from collections import defaultdict
from collections.abc import Callable, Hashable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any, TypeVar

from sqlalchemy import select
from sqlalchemy.orm import InstrumentedAttribute, Session
from strawberry.dataloader import DataLoader

from inkwell.models import Author, BlogPost, Draft, Edit, JournalEntry, NodeType
from inkwell.services.content import blog_posts_query, drafts_query, journal_entries_query
from inkwell.services.registry import get_node_types

logger = logging.getLogger(__name__)

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


# =============================================================================
# Re-mapping helpers
# =============================================================================
def map_by(rows: Iterable[T], key: Callable[[T], K]) -> dict[K, T]:
    """Index rows by a key."""
    return {key(row): row for row in rows}


def group_by(rows: Iterable[T], key: Callable[[T], K]) -> dict[K, list[T]]:
    """Group rows by a key, keeping row order inside each group."""
    groups: dict[K, list[T]] = defaultdict(list)
    for row in rows:
        groups[key(row)].append(row)
    return groups


def in_key_order(keys: Sequence[K], mapping: dict[K, T], default: Any = None) -> list[Any]:
    """Results for `keys` in order; keys without a match get `default`."""
    return [mapping.get(key, default) for key in keys]


# =============================================================================
# Batch functions
# =============================================================================
def _by_id_loader(
    db: Session,
    build_query: Callable[[], Any],
    id_column: InstrumentedAttribute,
) -> DataLoader:
    """DataLoader fetching rows of one query by primary key."""

    async def load_fn(keys: list[str]) -> list[Any]:
        stmt = build_query().where(id_column.in_(keys))
        rows = db.execute(stmt).scalars().all()
        logger.debug(f"Batched {len(keys)} keys on {id_column}")
        return in_key_order(keys, map_by(rows, lambda row: row.id))

    return DataLoader(load_fn=load_fn)


def _nothing_loader() -> DataLoader:
    """Loader for anonymous viewers of private kinds: everything is absent."""

    async def load_fn(keys: list[str]) -> list[None]:
        return [None] * len(keys)

    return DataLoader(load_fn=load_fn)


@dataclass
class Loaders:
    """
    Container for all DataLoader instances of one request.

    Usage in a resolver:
        loaders = info.context.loaders
        author = await loaders.authors.load(post.author_id)
    """

    node_types: DataLoader
    authors: DataLoader
    blog_posts: DataLoader
    blog_posts_by_author: DataLoader
    journal_entries: DataLoader
    drafts: DataLoader
    edits: DataLoader
    edits_by_content: DataLoader

    def prime_rows(self, loader: DataLoader, rows: Iterable[Any]) -> None:
        """Prime a per-id loader with rows fetched some other way."""
        loader.prime_many({row.id: row for row in rows})


def create_loaders(db: Session, viewer_id: str | None) -> Loaders:
    """
    Factory for request-scoped DataLoaders.

    Args:
        db: Database session for the current request
        viewer_id: Authenticated author id, or None for anonymous requests

    Returns:
        Loaders container with all loaders initialized
    """

    async def load_node_types(keys: list[str]) -> list[NodeType | None]:
        return in_key_order(keys, get_node_types(db, keys))

    blog_posts = _by_id_loader(db, lambda: blog_posts_query(viewer_id), BlogPost.id)

    async def load_blog_posts_by_author(keys: list[str]) -> list[list[BlogPost]]:
        stmt = (
            blog_posts_query(viewer_id)
            .where(BlogPost.author_id.in_(keys))
            .order_by(BlogPost.publish_date.desc())
        )
        rows = db.execute(stmt).scalars().all()
        blog_posts.prime_many({row.id: row for row in rows})
        return in_key_order(keys, group_by(rows, lambda row: row.author_id), default=[])

    edits = _by_id_loader(db, lambda: select(Edit), Edit.id)

    async def load_edits_by_content(keys: list[str]) -> list[list[Edit]]:
        stmt = (
            select(Edit)
            .where(Edit.content_id.in_(keys))
            .order_by(Edit.date.desc())
        )
        rows = db.execute(stmt).scalars().all()
        edits.prime_many({row.id: row for row in rows})
        return in_key_order(keys, group_by(rows, lambda row: row.content_id), default=[])

    if viewer_id is None:
        journal_entries = _nothing_loader()
        drafts = _nothing_loader()
    else:
        journal_entries = _by_id_loader(
            db, lambda: journal_entries_query(viewer_id), JournalEntry.id
        )
        drafts = _by_id_loader(db, lambda: drafts_query(viewer_id), Draft.id)

    return Loaders(
        node_types=DataLoader(load_fn=load_node_types),
        authors=_by_id_loader(db, lambda: select(Author), Author.id),
        blog_posts=blog_posts,
        blog_posts_by_author=DataLoader(load_fn=load_blog_posts_by_author),
        journal_entries=journal_entries,
        drafts=drafts,
        edits=edits,
        edits_by_content=DataLoader(load_fn=load_edits_by_content),
    )
