"""
Services Package

This package contains business logic services that are:
- Separate from GraphQL resolvers
- Reusable from the API, the seed script and the tests
- Easier to test in isolation

Current services:
- authors.py: Account creation, updates and login
- content.py: Create/update/delete for blog posts, journal entries and drafts
- diff.py: Word-level diffs between two texts
- edits.py: The per-content edit log
- pagination.py: Cursor pagination over SQLAlchemy selects
- registry.py: Global node id to node type lookups
- security.py: Password hashing, JWT and split-token utilities
"""
