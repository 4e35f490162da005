"""
SQLAlchemy Models Package

Model Relationships:
- Node: Shared id/type registry; every other table keys on nodes.id
- Author -> Content: One-to-Many (content.author_id)
- Content -> BlogPost / JournalEntry / Draft: Joined-table inheritance
- Content -> Edit: One-to-Many edit log (edits.content_id)

Import all models here to:
1. Make them available as: from inkwell.models import Author, BlogPost
2. Ensure Alembic discovers them for migrations
"""

from inkwell.models.node import Node, NodeType, new_node_id
from inkwell.models.author import Author
from inkwell.models.content import BlogPost, Content, Draft, JournalEntry
from inkwell.models.edit import Edit

__all__ = [
    "Node",
    "NodeType",
    "new_node_id",
    "Author",
    "Content",
    "BlogPost",
    "JournalEntry",
    "Draft",
    "Edit",
]
