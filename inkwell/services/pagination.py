"""
Cursor Pagination Service

Turns a `{first, after, last, before}` pager into range queries over one
sort column and returns Relay-style edges plus page info.

Key Concepts:
=============

1. Cursors
   - A cursor is the serialized sort-key value of a row, used as an
     exclusive bound: "rows strictly after this one"
   - Timestamps are encoded as base64 of their epoch milliseconds
   - A cursor only means something for the query and sort order it came
     from; filtered views do not share cursors

2. Directions
   - Forward (`first`/`after`): rows past `after` in natural order
   - Backward (`last`/`before`): rows before `before`, fetched in reverse
     order and flipped back, so both lists read in natural order
   - Both at once with the same pivot cursor gives a "jump to this item and
     show its neighbours" view: beforeEdges + afterEdges

3. Has-more detection
   - Each direction fetches `limit + 1` rows; the extra row only tells us
     there is another page and is dropped

Rules:
======
- `first` and `last` may only be combined when both `after` and `before`
  are given
- `first` and `last` must not be negative
- No arguments at all means one forward page with no limit
"""

import base64
import binascii
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any, Generic, Literal, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.orm import InstrumentedAttribute, Session

from inkwell.exceptions import ValidationError
from inkwell.utils import as_utc

logger = logging.getLogger(__name__)

T = TypeVar("T")

SortOrder = Literal["asc", "desc"]

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
ONE_MS = timedelta(milliseconds=1)


class PagerError(ValidationError):
    """Raised for invalid pager arguments or undecodable cursors."""

    pass


# =============================================================================
# Pager Arguments
# =============================================================================
@dataclass(frozen=True)
class PagerArgs:
    """Validated pager arguments. Build with validate_pager()."""

    first: int | None = None
    after: str | None = None
    last: int | None = None
    before: str | None = None

    @property
    def is_empty(self) -> bool:
        return (
            self.first is None
            and self.after is None
            and self.last is None
            and self.before is None
        )

    @property
    def wants_forward(self) -> bool:
        return self.is_empty or self.first is not None or self.after is not None

    @property
    def wants_backward(self) -> bool:
        return self.last is not None or self.before is not None


def validate_pager(
    first: int | None = None,
    after: str | None = None,
    last: int | None = None,
    before: str | None = None,
) -> PagerArgs:
    """
    Validate raw pager arguments.

    A request pages forward (`first`/`after`), backward (`last`/`before`),
    or both ways around one pivot cursor. The pivot form needs all four
    arguments with `after == before`; any other mix of directions is
    rejected.

    Raises:
        PagerError: Directions mixed outside the pivot form, or a negative
            `first`/`last`
    """
    forward = first is not None or after is not None
    backward = last is not None or before is not None
    if forward and backward:
        if first is None or last is None or after is None or before is None:
            raise PagerError(
                "Cannot mix forward and backward arguments unless `first`, "
                "`after`, `last` and `before` are all given."
            )
        if after != before:
            raise PagerError("`after` and `before` must be the same cursor when paging both ways.")
    if (first is not None and first < 0) or (last is not None and last < 0):
        raise PagerError("Neither `first` nor `last` can be negative.")

    return PagerArgs(first=first, after=after, last=last, before=before)


# =============================================================================
# Cursor Codecs
# =============================================================================
class CursorCodec(Generic[T]):
    """Converts sort-key values to opaque cursor strings and back."""

    def serialize(self, value: T) -> str:
        raise NotImplementedError

    def deserialize(self, cursor: str) -> T:
        raise NotImplementedError


class IdentityCursorCodec(CursorCodec[str]):
    """For sort keys that are already safe strings."""

    def serialize(self, value: str) -> str:
        return str(value)

    def deserialize(self, cursor: str) -> str:
        return cursor


class IntegerCursorCodec(CursorCodec[int]):
    """Base64 of the decimal representation of an integer."""

    def serialize(self, value: int) -> str:
        return base64.b64encode(str(int(value)).encode("ascii")).decode("ascii")

    def deserialize(self, cursor: str) -> int:
        try:
            return int(base64.b64decode(cursor, validate=True).decode("ascii"))
        except (binascii.Error, UnicodeDecodeError, ValueError) as e:
            raise PagerError(f"Invalid cursor: {cursor!r}") from e


class DateCursorCodec(CursorCodec[datetime]):
    """
    Timestamps as base64 of their epoch milliseconds.

    Round-trips are exact to the millisecond; decoded values are aware UTC
    datetimes. Naive datetimes (as returned by SQLite) are taken as UTC.
    """

    def __init__(self) -> None:
        self._integers = IntegerCursorCodec()

    def serialize(self, value: datetime) -> str:
        return self._integers.serialize((as_utc(value) - EPOCH) // ONE_MS)

    def deserialize(self, cursor: str) -> datetime:
        millis = self._integers.deserialize(cursor)
        try:
            return EPOCH + millis * ONE_MS
        except OverflowError as e:
            raise PagerError(f"Invalid cursor: {cursor!r}") from e


DATE_CURSOR = DateCursorCodec()
INTEGER_CURSOR = IntegerCursorCodec()
IDENTITY_CURSOR = IdentityCursorCodec()


# =============================================================================
# Page Results
# =============================================================================
@dataclass
class Edge(Generic[T]):
    node: T
    cursor: str


@dataclass
class PageInfo:
    start_cursor: str | None = None
    end_cursor: str | None = None
    has_previous_page: bool = False
    has_next_page: bool = False


@dataclass
class Page(Generic[T]):
    """
    One page of a connection.

    `before_edges` and `after_edges` are both in natural order; together
    they form the merged edge list that page_info describes.
    """

    total: int
    before_edges: list[Edge[T]] = field(default_factory=list)
    after_edges: list[Edge[T]] = field(default_factory=list)
    page_info: PageInfo = field(default_factory=PageInfo)

    @property
    def edges(self) -> list[Edge[T]]:
        return self.before_edges + self.after_edges

    @property
    def nodes(self) -> list[T]:
        return [edge.node for edge in self.edges]


# =============================================================================
# Pagination
# =============================================================================
def paginate(
    db: Session,
    stmt: Select,
    column: InstrumentedAttribute,
    pager: PagerArgs,
    codec: CursorCodec,
    order: SortOrder = "desc",
) -> Page:
    """
    Fetch one page of `stmt` ordered by `column`.

    Args:
        db: Database session
        stmt: Filtered base query selecting one ORM entity, without ordering
        column: Sort-key column; rows expose it under `column.key`
        pager: Validated pager arguments
        codec: Cursor codec matching the column's type
        order: Natural order of the collection

    Returns:
        Page with edges, page info and the total size of the base query

    Raises:
        PagerError: If a cursor cannot be decoded
    """
    if order not in ("asc", "desc"):
        raise ValueError(f"order must be 'asc' or 'desc', got {order!r}")
    ascending = order == "asc"

    after = codec.deserialize(pager.after) if pager.after is not None else None
    before = codec.deserialize(pager.before) if pager.before is not None else None

    after_rows: list[Any] = []
    has_next_page = False
    if pager.wants_forward:
        after_rows, has_next_page = _fetch(
            db, stmt, column, after, pager.first, ascending=ascending
        )

    before_rows: list[Any] = []
    has_previous_page = False
    if pager.wants_backward:
        before_rows, has_previous_page = _fetch(
            db, stmt, column, before, pager.last, ascending=not ascending
        )
        before_rows.reverse()

    # Nothing was cut off, so the fetched rows are the whole collection
    if pager.is_empty:
        total = len(after_rows)
    else:
        total = count(db, stmt)

    return _build_page(
        total,
        [_to_edge(row, column, codec) for row in before_rows],
        [_to_edge(row, column, codec) for row in after_rows],
        has_previous_page=has_previous_page,
        has_next_page=has_next_page,
    )


def page_from_rows(rows: list[Any], column: InstrumentedAttribute, codec: CursorCodec) -> Page:
    """
    Wrap an already-complete, already-ordered row list as a single page.

    Used when the rows came from a batched loader instead of a pager query.
    """
    return _build_page(len(rows), [], [_to_edge(row, column, codec) for row in rows])


def _to_edge(row: Any, column: InstrumentedAttribute, codec: CursorCodec) -> Edge:
    return Edge(node=row, cursor=codec.serialize(getattr(row, column.key)))


def _build_page(
    total: int,
    before_edges: list[Edge],
    after_edges: list[Edge],
    has_previous_page: bool = False,
    has_next_page: bool = False,
) -> Page:
    merged = before_edges + after_edges
    return Page(
        total=total,
        before_edges=before_edges,
        after_edges=after_edges,
        page_info=PageInfo(
            start_cursor=merged[0].cursor if merged else None,
            end_cursor=merged[-1].cursor if merged else None,
            has_previous_page=has_previous_page,
            has_next_page=has_next_page,
        ),
    )


def _fetch(
    db: Session,
    stmt: Select,
    column: InstrumentedAttribute,
    bound: Any,
    limit: int | None,
    ascending: bool,
) -> tuple[list[Any], bool]:
    """
    Rows strictly past `bound` in the given direction, at most `limit`.

    Returns:
        (rows, whether more rows exist past the last one returned)
    """
    if bound is not None:
        stmt = stmt.where(column > bound if ascending else column < bound)

    stmt = stmt.order_by(column.asc() if ascending else column.desc())
    if limit is not None:
        stmt = stmt.limit(limit + 1)

    rows = list(db.execute(stmt).scalars().all())

    if limit is not None and len(rows) > limit:
        return rows[:limit], True
    return rows, False


def count(db: Session, stmt: Select) -> int:
    """Number of rows matched by a base query."""
    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    return db.execute(count_stmt).scalar() or 0
