"""
GraphQL Context

Provides request context to all GraphQL resolvers:
- Database session for queries
- The resolved identity of the caller
- The request's DataLoaders

The context is created fresh for each GraphQL request and passed to all
resolvers via the `info` parameter. The session comes from the `get_db`
dependency, so it is closed when the request ends.
"""

import logging
from dataclasses import dataclass

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session
from strawberry.fastapi import BaseContext

from inkwell.database import get_db
from inkwell.graphql.loaders import Loaders, create_loaders
from inkwell.services.security import (
    SIGNATURE_COOKIE,
    MalformedTokenError,
    assemble_token,
    parse_authorization_header,
    verify_token_type,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """Who is making the request. `id` is set only when logged in."""

    logged_in: bool = False
    id: str | None = None

    @classmethod
    def anonymous(cls) -> "Identity":
        return cls()

    @classmethod
    def author(cls, author_id: str) -> "Identity":
        return cls(logged_in=True, id=author_id)


class GraphQLContext(BaseContext):
    """
    Context object available to all GraphQL resolvers.

    Attributes:
        db: SQLAlchemy database session
        identity: The caller's identity (anonymous if not authenticated)
        loaders: Request-scoped DataLoaders
    """

    def __init__(self, db: Session, identity: Identity, loaders: Loaders):
        super().__init__()
        self.db = db
        self.identity = identity
        self.loaders = loaders

    @property
    def viewer_id(self) -> str | None:
        return self.identity.id


def resolve_identity(authorization: str | None, signature: str | None) -> Identity:
    """
    Build the caller's identity from the Authorization header and cookie.

    Raises:
        HTTPException: 400 for a malformed header or token, 401 for a token
            that does not verify
    """
    if not authorization:
        return Identity.anonymous()

    try:
        bearer = parse_authorization_header(authorization)
        token = assemble_token(bearer, signature)
    except MalformedTokenError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    payload = verify_token_type(token, "access")
    if payload is None or not payload.get("sub"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid JWT.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return Identity.author(str(payload["sub"]))


async def get_context(request: Request, db: Session = Depends(get_db)) -> GraphQLContext:
    """
    Create GraphQL context for each request.

    Called by Strawberry for every GraphQL request; FastAPI resolves the
    `db` dependency, so tests can swap the session with dependency_overrides.
    """
    identity = resolve_identity(
        request.headers.get("Authorization"),
        request.cookies.get(SIGNATURE_COOKIE),
    )

    return GraphQLContext(
        db=db,
        identity=identity,
        loaders=create_loaders(db, identity.id),
    )
