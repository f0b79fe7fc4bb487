"""add gift images and rate limit entries

Revision ID: 8b1e4d2f6a93
Revises: 3f2a9c1d7e40
Create Date: 2026-10-25 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '8b1e4d2f6a93'
down_revision = '3f2a9c1d7e40'
branch_labels = None
depends_on = None


def upgrade():
    # Gift gallery images
    op.create_table('gift_images',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('gift_id', sa.Integer(), nullable=False),
        sa.Column('image_url', sa.String(length=500), nullable=False),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['gift_id'], ['gifts.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('gift_images', schema=None) as batch_op:
        batch_op.create_index('ix_gift_images_gift_id', ['gift_id'], unique=False)

    # Login / registration rate limiting
    op.create_table('rate_limit_entries',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('key', sa.String(length=255), nullable=False),
        sa.Column('endpoint', sa.String(length=255), nullable=False),
        sa.Column('timestamp', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('rate_limit_entries', schema=None) as batch_op:
        batch_op.create_index('ix_rate_limit_entries_key', ['key'], unique=False)
        batch_op.create_index('ix_rate_limit_entries_endpoint', ['endpoint'], unique=False)
        batch_op.create_index('ix_rate_limit_key_endpoint_ts', ['key', 'endpoint', 'timestamp'], unique=False)


def downgrade():
    with op.batch_alter_table('rate_limit_entries', schema=None) as batch_op:
        batch_op.drop_index('ix_rate_limit_key_endpoint_ts')
        batch_op.drop_index('ix_rate_limit_entries_endpoint')
        batch_op.drop_index('ix_rate_limit_entries_key')
    op.drop_table('rate_limit_entries')

    with op.batch_alter_table('gift_images', schema=None) as batch_op:
        batch_op.drop_index('ix_gift_images_gift_id')
    op.drop_table('gift_images')
