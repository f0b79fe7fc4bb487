"""initial membership schema

Revision ID: 3f2a9c1d7e40
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f2a9c1d7e40'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('admins',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=100), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('username'),
    )

    op.create_table('members',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('phone', sa.String(length=20), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('prefix', sa.String(length=50), nullable=False, server_default=''),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('status', sa.String(length=30), nullable=False, server_default='pending_payment'),
        sa.Column('membership_start', sa.DateTime(), nullable=True),
        sa.Column('membership_end', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('members', schema=None) as batch_op:
        batch_op.create_index('ix_members_phone', ['phone'], unique=True)
        batch_op.create_index('ix_members_status', ['status'], unique=False)

    op.create_table('payments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('member_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('slip_url', sa.String(length=500), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('verified_at', sa.DateTime(), nullable=True),
        sa.Column('verified_by', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['member_id'], ['members.id']),
        sa.ForeignKeyConstraint(['verified_by'], ['admins.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('payments', schema=None) as batch_op:
        batch_op.create_index('ix_payments_member_id', ['member_id'], unique=False)
        batch_op.create_index('ix_payments_status', ['status'], unique=False)

    op.create_table('gifts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('details', sa.Text(), nullable=False, server_default=''),
        sa.Column('image_url', sa.String(length=500), nullable=False, server_default=''),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('monthly_quota', sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )

    # One delivery per member; one delivery per quota slot per gift per month
    op.create_table('gift_deliveries',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('member_id', sa.Integer(), nullable=False),
        sa.Column('gift_id', sa.Integer(), nullable=False),
        sa.Column('delivery_name', sa.String(length=200), nullable=False),
        sa.Column('delivery_phone', sa.String(length=20), nullable=False),
        sa.Column('house_number', sa.String(length=50), nullable=False),
        sa.Column('moo_soi', sa.String(length=100), nullable=True),
        sa.Column('street', sa.String(length=200), nullable=True),
        sa.Column('subdistrict', sa.String(length=100), nullable=False),
        sa.Column('district', sa.String(length=100), nullable=False),
        sa.Column('province', sa.String(length=100), nullable=False),
        sa.Column('postal_code', sa.String(length=10), nullable=False),
        sa.Column('delivery_date', sa.DateTime(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('tracking_number', sa.String(length=100), nullable=True),
        sa.Column('tracking_url', sa.String(length=500), nullable=True),
        sa.Column('quota_period', sa.String(length=7), nullable=True),
        sa.Column('quota_slot', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['gift_id'], ['gifts.id']),
        sa.ForeignKeyConstraint(['member_id'], ['members.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('member_id'),
        sa.UniqueConstraint('gift_id', 'quota_period', 'quota_slot',
                            name='uq_gift_deliveries_quota_slot'),
    )
    with op.batch_alter_table('gift_deliveries', schema=None) as batch_op:
        batch_op.create_index('ix_gift_deliveries_gift_id', ['gift_id'], unique=False)
        batch_op.create_index('ix_gift_deliveries_created_at', ['created_at'], unique=False)

    op.create_table('events',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('event_date', sa.String(length=32), nullable=False),
        sa.Column('platform', sa.String(length=20), nullable=False),
        sa.Column('event_url', sa.String(length=500), nullable=False),
        sa.Column('replay_url', sa.String(length=500), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('events', schema=None) as batch_op:
        batch_op.create_index('ix_events_event_date', ['event_date'], unique=False)

    op.create_table('reviews',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('member_id', sa.Integer(), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('pros', sa.Text(), nullable=True),
        sa.Column('cons', sa.Text(), nullable=True),
        sa.Column('images', sa.Text(), nullable=True),
        sa.Column('videos', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('helpful', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('not_helpful', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('approved_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['member_id'], ['members.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('reviews', schema=None) as batch_op:
        batch_op.create_index('ix_reviews_member_id', ['member_id'], unique=False)
        batch_op.create_index('ix_reviews_status', ['status'], unique=False)

    op.create_table('terms',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False, server_default=''),
        sa.Column('show_on_registration', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('show_on_payment', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('require_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('updated_by', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['updated_by'], ['admins.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table('site_settings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('membership_price', sa.Integer(), nullable=False, server_default='499'),
        sa.Column('bank_name', sa.String(length=200), nullable=False, server_default=''),
        sa.Column('bank_account', sa.String(length=50), nullable=False, server_default=''),
        sa.Column('bank_account_name', sa.String(length=200), nullable=False, server_default=''),
        sa.Column('line_url', sa.String(length=500), nullable=False, server_default=''),
        sa.Column('qr_code_path', sa.String(length=500), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('updated_by', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['updated_by'], ['admins.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table('revoked_tokens',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('jti', sa.String(length=64), nullable=False),
        sa.Column('subject', sa.String(length=64), nullable=False),
        sa.Column('revoked_at', sa.DateTime(), nullable=True),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('revoked_tokens', schema=None) as batch_op:
        batch_op.create_index('ix_revoked_tokens_jti', ['jti'], unique=True)


def downgrade():
    with op.batch_alter_table('revoked_tokens', schema=None) as batch_op:
        batch_op.drop_index('ix_revoked_tokens_jti')
    op.drop_table('revoked_tokens')

    op.drop_table('site_settings')
    op.drop_table('terms')

    with op.batch_alter_table('reviews', schema=None) as batch_op:
        batch_op.drop_index('ix_reviews_status')
        batch_op.drop_index('ix_reviews_member_id')
    op.drop_table('reviews')

    with op.batch_alter_table('events', schema=None) as batch_op:
        batch_op.drop_index('ix_events_event_date')
    op.drop_table('events')

    with op.batch_alter_table('gift_deliveries', schema=None) as batch_op:
        batch_op.drop_index('ix_gift_deliveries_created_at')
        batch_op.drop_index('ix_gift_deliveries_gift_id')
    op.drop_table('gift_deliveries')

    op.drop_table('gifts')

    with op.batch_alter_table('payments', schema=None) as batch_op:
        batch_op.drop_index('ix_payments_status')
        batch_op.drop_index('ix_payments_member_id')
    op.drop_table('payments')

    with op.batch_alter_table('members', schema=None) as batch_op:
        batch_op.drop_index('ix_members_status')
        batch_op.drop_index('ix_members_phone')
    op.drop_table('members')

    op.drop_table('admins')
