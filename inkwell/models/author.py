"""
Author Model

Represents an author who writes content.

SQLAlchemy 2.0 Features Used:
- mapped_column(): Columns with full type support
- Mapped[]: Type hint wrapper for SQLAlchemy columns
- Index on an expression: case-insensitive unique usernames
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, func
from sqlalchemy.orm import Mapped, mapped_column

from inkwell.database import Base


class Author(Base):
    """
    Author model.

    Table: authors

    The primary key is a registered node id; deleting the node deletes the
    author and, through content.author_id, everything they wrote.

    Indexes:
    - lower(username): Unique, so "Alice" and "alice" cannot both exist

    Example:
        author = Author(
            id=register_node(db, NodeType.AUTHOR),
            name="Alice",
            username="alice",
            password_hash=hash_password("secret123"),
        )
    """

    __tablename__ = "authors"

    id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("nodes.id", ondelete="CASCADE"),
        primary_key=True,
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Display name"
    )

    username: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="Login name, unique ignoring case"
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hash of the password"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"Author(id='{self.id}', username='{self.username}')"


Index("uq_authors_username_lower", func.lower(Author.username), unique=True)
