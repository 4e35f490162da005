"""
GraphQL Pagination Types

Cursor pager input and page info shared by every connection.

A connection returns two edge lists, `beforeEdges` and `afterEdges`, both
in natural order. Asking for `last: 2, before: X, first: 2, after: X`
returns the two items on each side of X.
"""

from collections.abc import Callable
from typing import Any

import strawberry

from inkwell.services.pagination import Page, PagerArgs, validate_pager


@strawberry.input
class PagerInput:
    """
    Input type for cursor pagination.

    `first`/`after` page forward, `last`/`before` page backward. `first` and
    `last` can only be combined when both `after` and `before` are given.
    """

    first: int | None = None
    after: str | None = None
    last: int | None = None
    before: str | None = None


@strawberry.type(name="PageInfo")
class PageInfoType:
    """Cursors of the first and last returned edge, and whether more exist."""

    start_cursor: str | None = None
    end_cursor: str | None = None
    has_previous_page: bool = False
    has_next_page: bool = False


def to_pager_args(pager: PagerInput | None) -> PagerArgs:
    """Validate a pager input. Missing input means "everything"."""
    if pager is None:
        return validate_pager()
    return validate_pager(
        first=pager.first,
        after=pager.after,
        last=pager.last,
        before=pager.before,
    )


def to_connection(
    page: Page,
    connection_cls: type,
    edge_cls: type,
    convert: Callable[[Any], Any],
) -> Any:
    """Convert a service Page into a GraphQL connection of the given type."""

    def to_edges(edges):
        return [edge_cls(node=convert(edge.node), cursor=edge.cursor) for edge in edges]

    info = page.page_info
    return connection_cls(
        total=page.total,
        before_edges=to_edges(page.before_edges),
        after_edges=to_edges(page.after_edges),
        page_info=PageInfoType(
            start_cursor=info.start_cursor,
            end_cursor=info.end_cursor,
            has_previous_page=info.has_previous_page,
            has_next_page=info.has_next_page,
        ),
    )
