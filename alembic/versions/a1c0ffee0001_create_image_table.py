"""create image table

Revision ID: a1c0ffee0001
Revises:
Create Date: 2026-10-19 10:00:00.000000

Hey future me - die einzige Tabelle des Art-Caches!

One row per (object_type, object_id, size). size is "original" for the uploaded /
gathered image and "WxH" (e.g. "275x275") for derived thumbnails. ImageRepository.put()
keeps one row per size (delete-then-insert); there is no unique constraint.

INDEXES:
- ix_image_object_size: exact-size lookups (get_sized, thumbnails)
- ix_image_object_id: bulk meta reads (build_cache / url())
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'a1c0ffee0001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'image',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('object_type', sa.String(32), nullable=False),
        sa.Column('object_id', sa.Integer, nullable=False),
        sa.Column('size', sa.String(32), nullable=False, server_default='original'),
        sa.Column('mime', sa.String(64), nullable=False, server_default='image/jpeg'),
        sa.Column('image', sa.LargeBinary, nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.func.now()),
    )
    op.create_index(
        'ix_image_object_size',
        'image',
        ['object_type', 'object_id', 'size'],
    )
    op.create_index('ix_image_object_id', 'image', ['object_id'])


def downgrade() -> None:
    op.drop_index('ix_image_object_id', table_name='image')
    op.drop_index('ix_image_object_size', table_name='image')
    op.drop_table('image')
