#!/usr/bin/env python3
"""
Database Seed Script

Populates the database with sample authors and content for development.

USAGE:
    # From the project root with the virtualenv activated
    python scripts/seed_data.py

This script:
1. Creates the tables if they don't exist
2. Clears existing data (optional)
3. Creates sample authors (password: "password123")
4. Creates blog posts, journal entries and drafts, and edits some of them
   so the edit history has something to show
"""

import sys
from datetime import timedelta
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import delete
from sqlalchemy.orm import Session

from inkwell.database import SessionLocal, create_tables
from inkwell.models import Author, Node
from inkwell.services.authors import create_author
from inkwell.services.content import (
    BLOG_POSTS,
    DRAFTS,
    JOURNAL_ENTRIES,
    create_content,
    update_content,
)
from inkwell.utils import utc_now

SEED_PASSWORD = "password123"


def clear_data(db: Session) -> None:
    """Clear all existing data; every row hangs off the node registry."""
    print("Clearing existing data...")
    db.execute(delete(Node))
    db.commit()
    print("Data cleared.")


def create_authors(db: Session) -> dict[str, Author]:
    """Create sample authors."""
    print("Creating authors...")
    authors_data = [
        {"name": "Ada Lovelace", "username": "ada"},
        {"name": "Grace Hopper", "username": "grace"},
        {"name": "Alan Turing", "username": "alan"},
    ]

    authors = {}
    for data in authors_data:
        author = create_author(db, password=SEED_PASSWORD, **data)
        authors[author.username] = author
        print(f"  Created author: {author.name} ({author.username})")

    return authors


def create_blog_posts(db: Session, authors: dict[str, Author]) -> int:
    """Create blog posts, publishing all but the last of each author."""
    print("Creating blog posts...")
    posts_data = {
        "ada": [
            ("Notes on the Analytical Engine", "The engine weaves algebraic patterns."),
            ("On Bernoulli numbers", "A worked example for the engine."),
            ("Poetical science", "Imagination is the discovering faculty."),
        ],
        "grace": [
            ("Debugging", "We found a moth in relay 70."),
            ("Compilers", "Programs should be written in English words."),
        ],
        "alan": [
            ("Computing machinery", "Can machines think?"),
            ("Morphogenesis", "Patterns from reaction and diffusion."),
        ],
    }

    now = utc_now()
    count = 0
    for username, posts in posts_data.items():
        author = authors[username]
        for index, (title, content) in enumerate(posts):
            post = create_content(
                db,
                BLOG_POSTS,
                author_id=author.id,
                title=title,
                content=content,
                is_published=index < len(posts) - 1,
                publish_date=now - timedelta(days=len(posts) - index),
            )
            count += 1
            print(f"  Created post: {post.title}")

    return count


def create_private_content(db: Session, authors: dict[str, Author]) -> int:
    """Create a journal entry and a draft per author, and edit each draft."""
    print("Creating journal entries and drafts...")
    count = 0
    for author in authors.values():
        create_content(
            db,
            JOURNAL_ENTRIES,
            author_id=author.id,
            title=f"{author.name}'s journal",
            content="Today I worked on the seed data.",
        )
        draft = create_content(
            db,
            DRAFTS,
            author_id=author.id,
            title="Untitled",
            content="A rough first sentence.",
        )
        update_content(
            db,
            DRAFTS,
            draft,
            author.id,
            content="A polished first sentence.",
            date=utc_now(),
        )
        count += 2

    return count


def seed_database(clear_existing: bool = True) -> None:
    """
    Main seeding function.

    Args:
        clear_existing: If True, clears existing data before seeding.
    """
    print("=" * 60)
    print("Starting database seed...")
    print("=" * 60)

    create_tables()
    db = SessionLocal()

    try:
        if clear_existing:
            clear_data(db)

        authors = create_authors(db)
        posts = create_blog_posts(db, authors)
        private_items = create_private_content(db, authors)

        print("=" * 60)
        print("Database seeding completed successfully!")
        print("=" * 60)
        print("\nSummary:")
        print(f"  - Authors: {len(authors)} (password: {SEED_PASSWORD})")
        print(f"  - Blog posts: {posts}")
        print(f"  - Journal entries and drafts: {private_items}")
        print("\nGraphQL endpoint at http://localhost:8001/graphql")

    except Exception as e:
        print(f"Error seeding database: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_database()
