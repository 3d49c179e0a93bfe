"""Create journal entry, tag and entry_tags tables

Revision ID: 3c9d51e0a7b2
Revises:
Create Date: 2026-10-19 09:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3c9d51e0a7b2'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

MOODS = (
    'Happy', 'Excited', 'Relaxed', 'Grateful', 'Confident',
    'Calm', 'Thoughtful', 'Curious', 'Nostalgic', 'Bored',
    'Sad', 'Angry', 'Stressed', 'Lonely', 'Anxious', 'Tired',
)


def _mood() -> sa.Enum:
    return sa.Enum(*MOODS, name='mood', native_enum=False, length=32)


def upgrade() -> None:
    """
    Baseline schema.

    One entry per (user_id, date); tags unique per (user_id, name_key).
    """
    op.create_table(
        'journal_entries',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('primary_mood', _mood(), nullable=False),
        sa.Column('secondary_mood_1', _mood(), nullable=True),
        sa.Column('secondary_mood_2', _mood(), nullable=True),
        sa.Column('word_count', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('word_count >= 0', name='ck_entry_positive_word_count'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'date', name='uq_entry_user_date'),
    )
    op.create_index('ix_journal_entries_user_id', 'journal_entries', ['user_id'])

    op.create_table(
        'tags',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('name_key', sa.String(length=100), nullable=False),
        sa.Column('color', sa.String(length=16), nullable=False),
        sa.Column('usage_count', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("name != ''", name='ck_non_empty_tag'),
        sa.CheckConstraint('usage_count >= 0', name='ck_tag_positive_usage'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'name_key', name='uq_tag_user_name'),
    )
    op.create_index('ix_tags_user_id', 'tags', ['user_id'])
    op.create_index('ix_tags_name_key', 'tags', ['name_key'])

    op.create_table(
        'entry_tags',
        sa.Column('entry_id', sa.Integer(), nullable=False),
        sa.Column('tag_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['entry_id'], ['journal_entries.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['tag_id'], ['tags.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('entry_id', 'tag_id'),
    )


def downgrade() -> None:
    op.drop_table('entry_tags')
    op.drop_index('ix_tags_name_key', table_name='tags')
    op.drop_index('ix_tags_user_id', table_name='tags')
    op.drop_table('tags')
    op.drop_index('ix_journal_entries_user_id', table_name='journal_entries')
    op.drop_table('journal_entries')
