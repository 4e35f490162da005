"""
Inkwell

GraphQL API for a blogging and journaling application.

Authors write blog posts, private journal entries and drafts. Every change
to a piece of content is kept as a word-level diff so its full edit history
can be replayed.
"""

__version__ = "0.1.0"
