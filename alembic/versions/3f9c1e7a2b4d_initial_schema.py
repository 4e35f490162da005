"""Initial schema: node registry, authors, content kinds, edits

Revision ID: 3f9c1e7a2b4d
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9c1e7a2b4d'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('nodes',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('type', sa.String(length=32), nullable=False, comment='Type tag of the entity owning this id'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_nodes_type'), 'nodes', ['type'], unique=False)

    op.create_table('authors',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False, comment='Display name'),
        sa.Column('username', sa.String(length=50), nullable=False, comment='Login name, unique ignoring case'),
        sa.Column('password_hash', sa.String(length=255), nullable=False, comment='Bcrypt hash of the password'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.ForeignKeyConstraint(['id'], ['nodes.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('uq_authors_username_lower', 'authors', [sa.text('lower(username)')], unique=True)

    op.create_table('content',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('kind', sa.String(length=32), nullable=False),
        sa.Column('author_id', sa.String(length=36), nullable=False),
        sa.Column('title', sa.String(length=500), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.ForeignKeyConstraint(['id'], ['nodes.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['author_id'], ['authors.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_content_author_id'), 'content', ['author_id'], unique=False)

    op.create_table('blog_posts',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('is_published', sa.Boolean(), nullable=False),
        sa.Column('publish_date', sa.DateTime(timezone=True), nullable=False, comment='When the post was (or will be) published'),
        sa.ForeignKeyConstraint(['id'], ['content.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_blog_posts_publish_date'), 'blog_posts', ['publish_date'], unique=False)

    op.create_table('journal_entries',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('encryption_params', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['id'], ['content.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_journal_entries_date'), 'journal_entries', ['date'], unique=False)

    op.create_table('drafts',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['id'], ['content.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_drafts_date'), 'drafts', ['date'], unique=False)

    op.create_table('edits',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('content_id', sa.String(length=36), nullable=False),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('changes', sa.Text(), nullable=False, comment='JSON list of {text, added?, removed?} segments'),
        sa.ForeignKeyConstraint(['id'], ['nodes.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['content_id'], ['content.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_edits_content_id'), 'edits', ['content_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_edits_content_id'), table_name='edits')
    op.drop_table('edits')
    op.drop_index(op.f('ix_drafts_date'), table_name='drafts')
    op.drop_table('drafts')
    op.drop_index(op.f('ix_journal_entries_date'), table_name='journal_entries')
    op.drop_table('journal_entries')
    op.drop_index(op.f('ix_blog_posts_publish_date'), table_name='blog_posts')
    op.drop_table('blog_posts')
    op.drop_index(op.f('ix_content_author_id'), table_name='content')
    op.drop_table('content')
    op.drop_index('uq_authors_username_lower', table_name='authors')
    op.drop_table('authors')
    op.drop_index(op.f('ix_nodes_type'), table_name='nodes')
    op.drop_table('nodes')
