"""
Author Service

Account creation, profile updates and username/password authentication.

Usernames are unique ignoring case: "Alice" can log in as "alice", and a
second account called "ALICE" is rejected.
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from inkwell.exceptions import AuthenticationError, ValidationError
from inkwell.models import Author, NodeType
from inkwell.services.registry import register_node
from inkwell.services.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)


def get_author_by_username(db: Session, username: str) -> Author | None:
    stmt = select(Author).where(func.lower(Author.username) == username.lower())
    return db.execute(stmt).scalar_one_or_none()


def list_authors(db: Session) -> list[Author]:
    stmt = select(Author).order_by(Author.name, Author.username)
    return list(db.execute(stmt).scalars().all())


def _require_not_blank(value: str, field: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field} should not be blank.")
    return value


def _ensure_username_free(db: Session, username: str, exclude_id: str | None = None) -> None:
    existing = get_author_by_username(db, username)
    if existing is not None and existing.id != exclude_id:
        raise ValidationError("Username already taken.")


def create_author(db: Session, name: str, username: str, password: str) -> Author:
    """
    Create a new author account.

    Raises:
        ValidationError: Blank name/username/password or username taken
    """
    _require_not_blank(name, "Name")
    _require_not_blank(username, "Username")
    _require_not_blank(password, "Password")
    username = username.strip()
    _ensure_username_free(db, username)

    try:
        author = Author(
            id=register_node(db, NodeType.AUTHOR),
            name=name.strip(),
            username=username,
            password_hash=hash_password(password),
        )
        db.add(author)
        db.commit()
    except IntegrityError as e:
        # Lost a race with another signup for the same username
        db.rollback()
        raise ValidationError("Username already taken.") from e

    db.refresh(author)
    logger.info(f"Created author {author.id} ({author.username})")
    return author


def update_author(
    db: Session,
    author: Author,
    password: str,
    name: str | None = None,
    username: str | None = None,
    new_password: str | None = None,
) -> Author:
    """
    Update an author's profile. The current password must be confirmed.

    Raises:
        AuthenticationError: If `password` is wrong
        ValidationError: Blank values or username taken
    """
    if not verify_password(password, author.password_hash):
        raise AuthenticationError("Password incorrect.")

    if name is not None:
        author.name = _require_not_blank(name, "Name").strip()

    if username is not None:
        username = _require_not_blank(username, "Username").strip()
        _ensure_username_free(db, username, exclude_id=author.id)
        author.username = username

    if new_password is not None:
        author.password_hash = hash_password(_require_not_blank(new_password, "Password"))

    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ValidationError("Username already taken.") from e

    db.refresh(author)
    logger.info(f"Updated author {author.id}")
    return author


def issue_token(author: Author) -> str:
    """Create an access token carrying the author's public profile."""
    return create_access_token(
        author.id,
        claims={
            "author": {
                "id": author.id,
                "name": author.name,
                "username": author.username,
            }
        },
    )


def authenticate(db: Session, username: str, password: str) -> tuple[Author, str]:
    """
    Check a username/password pair.

    Returns:
        (author, access token)

    Raises:
        AuthenticationError: Unknown username or wrong password
    """
    if not password:
        raise AuthenticationError("Password should not be blank.")

    author = get_author_by_username(db, username)
    if author is None or not verify_password(password, author.password_hash):
        logger.info(f"Failed login for username {username!r}")
        raise AuthenticationError("Invalid username or password.")

    return author, issue_token(author)
